"""Pydantic models for spots, courses and API bodies."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

import config
from geo import has_coordinate

Category = Literal["gourmet", "history", "art", "nature", "shopping", "tourism", "other"]


class Center(BaseModel):
    lat: float
    lon: float


class Spot(BaseModel):
    id: int | str
    name: str = ""
    lat: float | None = None
    lon: float | None = None
    category: Category = "other"
    tags: dict[str, Any] = Field(default_factory=dict)
    rating: float | None = None
    user_ratings_total: int | None = None
    # Filled only by the language-model path
    stay_time: float | None = None
    ai_description: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _unknown_category_is_other(cls, v: Any) -> Any:
        if v not in config.CATEGORIES:
            return "other"
        return v

    @property
    def routable(self) -> bool:
        return has_coordinate(self.lat, self.lon)


class Course(BaseModel):
    id: str
    title: str
    description: str
    theme: str
    spots: list[Spot]
    total_time: float
    total_distance: int


class ThemeModel(BaseModel):
    id: str
    key: str
    label: str
    title: str
    description: str
    categories: list[str]
    photo: bool
    hidden_gem: bool


class CourseRequest(BaseModel):
    center: Center
    spots: list[Spot]
    duration: int = Field(..., ge=0, description="Total duration in minutes")
    seed: int | None = None


class CoursesResponse(BaseModel):
    count: int
    courses: list[Course]
