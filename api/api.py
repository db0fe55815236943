from fastapi import APIRouter, FastAPI

from api.vote_api import router as vote_router, invalid_vote_input_handler, storage_failure_handler
from core.exceptions import InvalidVoteInputError, StorageFailureError


api_router = APIRouter()
api_router.include_router(vote_router, tags=["vote"])


def add_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvalidVoteInputError, invalid_vote_input_handler)
    app.add_exception_handler(StorageFailureError, storage_failure_handler)
