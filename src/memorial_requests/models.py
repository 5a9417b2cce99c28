"""Models for public memorial-creation requests."""

import uuid

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models

from src.memorials.schemas import AudioTrack


class MemorialRequest(models.Model):
    """A memorial submitted by the public, waiting for an admin decision."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)

    # Proposed memorial content
    name = models.CharField(max_length=200)
    birth_date = models.DateField()
    death_date = models.DateField()
    tribute = models.TextField(null=True, blank=True)
    biography = models.TextField(null=True, blank=True)
    profile_photo_url = models.CharField(max_length=500, null=True, blank=True)
    cover_photo_url = models.CharField(max_length=500, null=True, blank=True)
    photos = models.JSONField(default=list, blank=True)
    videos = models.JSONField(default=list, blank=True)
    # List of {"url", "title", "duration"} validated as AudioTrack on the way in
    audios = models.JSONField(default=list, blank=True)

    # Requester contact
    requester_name = models.CharField(max_length=200)
    requester_email = models.EmailField(max_length=254)
    requester_phone = models.CharField(max_length=50, null=True, blank=True)

    class Status(models.TextChoices):
        PENDING = "pending"
        IN_REVIEW = "in_review"
        APPROVED = "approved"
        REJECTED = "rejected"

    status = models.CharField(max_length=20, choices=Status, default=Status.PENDING)
    notes = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    TERMINAL_STATUSES = (Status.APPROVED, Status.REJECTED)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Request {self.id} for {self.name} ({self.status})"

    # ----- Class methods -----

    @classmethod
    def get_or_none(cls, request_id, for_update: bool = False) -> "MemorialRequest | None":
        """Get request by ID, returning None if not found or not a valid id."""
        queryset = cls.objects.select_for_update() if for_update else cls.objects
        try:
            return queryset.get(id=request_id)
        except (cls.DoesNotExist, ValueError, TypeError, DjangoValidationError):
            return None

    # ----- Properties -----

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES

    @property
    def tracks(self) -> list[AudioTrack]:
        return [AudioTrack.model_validate(a) for a in self.audios or []]

    @property
    def is_materialized(self) -> bool:
        """True once a Memorial has been created from this request."""
        return hasattr(self, "memorial")
