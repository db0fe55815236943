import logging
from dataclasses import dataclass, field
from typing import Optional

from core.exceptions import (
    InvalidVoteInputError,
    StorageFailureError,
    StoreBackendError,
    StoreInvalidInputError,
)
from crud.vote_crud import VoteStore, clean_name
from schemas.vote_schema import VoteRequestSchema

logger = logging.getLogger(__name__)


@dataclass
class Tally:
    """Restaurant name -> names of the voters currently choosing it.

    Restaurants appear in the order their first voter was read. A restaurant
    with no remaining voters is never present.
    """
    entries: dict[str, set[str]] = field(default_factory=dict)

    @property
    def total_votes(self) -> int:
        return sum(len(voters) for voters in self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class Winner:
    """Every restaurant sharing the highest voter count, sorted by name."""
    restaurants: list[str]
    votes: int

    @property
    def is_tie(self) -> bool:
        return len(self.restaurants) > 1

    @property
    def restaurant(self) -> str:
        return self.restaurants[0]


class TallyService:

    def __init__(self, store: VoteStore, max_name_length: int = 255):
        self.store = store
        self.max_name_length = max_name_length

    async def submit_vote(self, request: VoteRequestSchema) -> None:
        voter_name = self._validate("voter_name", request.voter_name)
        restaurant_name = self._validate("restaurant_name", request.restaurant_name)

        try:
            await self.store.upsert(voter_name, restaurant_name)
        except StoreInvalidInputError as e:
            logger.warning(f"Vote store rejected {e.field}: {e.message}")
            raise InvalidVoteInputError(e.field, e.message) from e
        except StoreBackendError as e:
            logger.error(f"Failed to record vote of {voter_name!r}: {e}")
            raise StorageFailureError(str(e)) from e

        logger.info(f"{voter_name} voted for {restaurant_name}")

    async def compute_tally(self) -> Tally:
        try:
            votes = await self.store.fetch_all()
        except StoreBackendError as e:
            logger.error(f"Failed to read votes: {e}")
            raise StorageFailureError(str(e)) from e

        tally = Tally()
        for vote in votes:
            tally.entries.setdefault(vote.restaurant_name, set()).add(vote.voter_name)

        logger.debug(f"Tallied {tally.total_votes} votes across {len(tally)} restaurants")
        return tally

    async def winner(self) -> Optional[Winner]:
        """Restaurants with the most voters; ties are all returned, never broken silently."""
        tally = await self.compute_tally()
        if not tally.entries:
            return None

        top = max(len(voters) for voters in tally.entries.values())
        leaders = sorted(name for name, voters in tally.entries.items() if len(voters) == top)
        return Winner(restaurants=leaders, votes=top)

    def _validate(self, field_name: str, value: str) -> str:
        try:
            return clean_name(field_name, value, self.max_name_length)
        except StoreInvalidInputError as e:
            logger.warning(f"Rejected vote: {e.message}")
            raise InvalidVoteInputError(e.field, e.message) from e
