from typing import List

from pydantic import AliasChoices, BaseModel, Field


class VoteRequestSchema(BaseModel):
    voter_name: str = Field(
        ...,
        validation_alias=AliasChoices("voter_name", "voterName"),
        description="Name of the person voting",
    )
    restaurant_name: str = Field(
        ...,
        validation_alias=AliasChoices("restaurant_name", "restaurantName"),
        description="Restaurant the voter picks for lunch",
    )


class TallyEntrySchema(BaseModel):
    restaurant: str
    voters: List[str]


class TallyResponseSchema(BaseModel):
    """Current votes grouped by restaurant."""
    entries: List[TallyEntrySchema]
    total_votes: int


class WinnerResponseSchema(BaseModel):
    """Leading restaurant(s); more than one name means a tie."""
    restaurants: List[str]
    votes: int
    tie: bool
