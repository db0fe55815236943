from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from starlette import status

from core.depends import TallyServiceDep
from core.exceptions import InvalidVoteInputError, StorageFailureError
from schemas.vote_schema import (
    VoteRequestSchema,
    TallyEntrySchema,
    TallyResponseSchema,
    WinnerResponseSchema,
)


router = APIRouter()


@router.post("/vote", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def submit_vote(
    service: TallyServiceDep,
    vote_data: VoteRequestSchema,
):
    """Record the voter's pick, replacing any earlier vote of the same voter."""
    await service.submit_vote(vote_data)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/tally", response_model=TallyResponseSchema)
async def get_tally(service: TallyServiceDep):
    tally = await service.compute_tally()
    return TallyResponseSchema(
        entries=[
            TallyEntrySchema(restaurant=restaurant, voters=sorted(voters))
            for restaurant, voters in tally.entries.items()
        ],
        total_votes=tally.total_votes,
    )


@router.get("/winner", response_model=WinnerResponseSchema)
async def get_winner(service: TallyServiceDep):
    winner = await service.winner()
    if winner is None:
        return WinnerResponseSchema(restaurants=[], votes=0, tie=False)
    return WinnerResponseSchema(restaurants=winner.restaurants, votes=winner.votes, tie=winner.is_tie)


async def invalid_vote_input_handler(request: Request, exc: InvalidVoteInputError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"detail": {"error": "invalid_input", "field": exc.field, "message": exc.message}},
    )


async def storage_failure_handler(request: Request, exc: StorageFailureError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": {"error": "storage_failure", "message": "Vote storage is unavailable, try again later"}},
    )
