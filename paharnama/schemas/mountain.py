"""Pydantic schemas for Mountain and MountainTranslation models."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class TranslationBase(BaseModel):
    """Localized mountain text."""

    language: str = Field(..., min_length=2, max_length=10)
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    location: str | None = Field(None, max_length=200)
    first_climber: str | None = Field(None, max_length=200)


class TranslationCreate(TranslationBase):
    """Schema for creating or upserting a translation."""

    pass


class Translation(TranslationBase):
    """Schema for translation responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    mountain_id: int


class MountainBase(BaseModel):
    """Base Mountain schema with common fields."""

    altitude: str | None = Field(None, max_length=50)
    has_death_zone: bool = False
    first_climbed_date: date | None = None
    mountain_img: str | None = Field(None, max_length=500)
    country_flag_img: str | None = Field(None, max_length=500)


class MountainCreate(MountainBase):
    """Schema for creating a new Mountain with its translations."""

    key: str = Field(..., min_length=1, max_length=100)
    translations: list[TranslationCreate] = Field(default_factory=list)


class MountainUpdate(BaseModel):
    """Schema for updating an existing Mountain."""

    altitude: str | None = Field(None, max_length=50)
    has_death_zone: bool | None = None
    first_climbed_date: date | None = None
    mountain_img: str | None = Field(None, max_length=500)
    country_flag_img: str | None = Field(None, max_length=500)
    translations: list[TranslationCreate] | None = None


class Mountain(MountainBase):
    """Schema for Mountain responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    key: str
    created_at: datetime
    updated_at: datetime
    translations: list[Translation] = Field(default_factory=list)
