from typing import Annotated

from fastapi import Depends, Request
from typing_extensions import TypeAlias

from services.tally_service import TallyService


def get_tally_service(request: Request) -> TallyService:
    return request.app.state.tally_service

TallyServiceDep: TypeAlias = Annotated[TallyService, Depends(get_tally_service)]
