"""Request bodies for the JSON API.

Field aliases keep the camelCase keys the signup page sends; snake_case
names are accepted too.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MatchCreate(_Body):
    group_name: str = Field(alias="groupName")
    scheduled_at: datetime = Field(alias="dateTime")
    location_name: str = Field(alias="locationName")
    player_limit: int = Field(alias="playerLimit")


class PlayerCreate(_Body):
    name: str
    primary_position: Optional[str] = Field(default=None, alias="primaryPosition")
    secondary_position: Optional[str] = Field(default=None, alias="secondaryPosition")
    speed: Optional[int] = None
    control: Optional[int] = None
    physical_condition: Optional[int] = Field(default=None, alias="physicalCondition")
    attitude: Optional[int] = None


class SignupCreate(_Body):
    player_id: Optional[int] = Field(default=None, alias="playerId")
    player_name: Optional[str] = Field(default=None, alias="playerName")
    is_guest: bool = Field(default=False, alias="isGuest")
    meal_only: bool = Field(default=False, alias="mealOnly")


class SignupRef(_Body):
    """Targets one signup. The original page calls the signup id playerId."""

    signup_id: int = Field(alias="playerId")


class MealUpdate(SignupRef):
    has_meal: bool = Field(alias="hasMeal")


class PositionsUpdate(SignupRef):
    positions: list[str] = Field(default_factory=list)


class TeamSplitRequest(_Body):
    seed: Optional[int] = None
