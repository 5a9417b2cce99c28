"""
Typed payloads for memorial content.

Incoming JSON is validated here, at the system boundary, before any service
touches the database. Audio entries become AudioTrack records rather than
free-form dicts.
"""

from datetime import date
from typing import Annotated

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from src.core.errors import ValidationError, require_object

MediaUrl = Annotated[str, Field(min_length=1, max_length=500)]


class AudioTrack(BaseModel):
    """An audio message: where it lives, what it's called, how long it is."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    url: MediaUrl
    title: str = Field(default="Untitled", max_length=200)
    duration: float | None = Field(default=None, ge=0)

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return "Untitled"
        return value


class MemorialContent(BaseModel):
    """Fields shared by memorials and memorial requests."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, max_length=200)
    birth_date: date | None = None
    death_date: date | None = None
    tribute: str | None = None
    biography: str | None = None
    profile_photo_url: MediaUrl | None = None
    cover_photo_url: MediaUrl | None = None
    photos: list[MediaUrl] = []
    videos: list[MediaUrl] = []
    audios: list[AudioTrack] = []

    @field_validator(
        "name", "birth_date", "death_date", "tribute", "biography",
        "profile_photo_url", "cover_photo_url",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("photos", "videos", "audios", mode="before")
    @classmethod
    def _null_to_empty(cls, value):
        return [] if value is None else value


class MemorialPayload(MemorialContent):
    """Admin-authored memorial."""

    featured_video_url: MediaUrl | None = None

    @field_validator("featured_video_url", mode="before")
    @classmethod
    def _blank_video_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class MemorialRequestPayload(MemorialContent):
    """Public memorial-creation request, with the requester's contact details."""

    requester_name: str | None = Field(default=None, max_length=200)
    requester_email: str | None = Field(default=None, max_length=254)
    requester_phone: str | None = Field(default=None, max_length=50)

    @field_validator("requester_name", "requester_email", "requester_phone", mode="before")
    @classmethod
    def _blank_contact_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("requester_email")
    @classmethod
    def _valid_email(cls, value):
        if value is None:
            return value
        try:
            validate_email(value)
        except DjangoValidationError:
            raise ValueError("not a valid email address")
        return value


def parse_payload(schema: type[BaseModel], data) -> BaseModel:
    """
    Validate raw request data against a schema.

    Args:
        schema: Pydantic model class to validate against
        data: Decoded JSON body

    Raises:
        ValidationError listing every offending field
    """
    require_object(data)

    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise ValidationError(
            f"Invalid value for: {', '.join(fields)}", fields=fields
        ) from e


def require(payload: BaseModel, fields: list[str]) -> None:
    """Raise ValidationError naming every required field that is empty."""
    missing = [f for f in fields if getattr(payload, f, None) in (None, "")]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}", fields=missing
        )


def check_dates(payload: MemorialContent) -> None:
    if payload.birth_date and payload.death_date and payload.death_date < payload.birth_date:
        raise ValidationError(
            "death_date cannot be before birth_date", fields=["death_date"]
        )
