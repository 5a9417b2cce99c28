"""
Memorial Models
"""

import uuid

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models


class Memorial(models.Model):
    """A memorial page honoring a person, with its media stored as child rows."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    slug = models.SlugField(max_length=120, unique=True)

    name = models.CharField(max_length=200)
    birth_date = models.DateField()
    death_date = models.DateField()
    tribute = models.TextField(null=True, blank=True)
    biography = models.TextField(null=True, blank=True)

    # Media (None means "not provided")
    profile_photo_url = models.CharField(max_length=500, null=True, blank=True)
    cover_photo_url = models.CharField(max_length=500, null=True, blank=True)
    featured_video_url = models.CharField(max_length=500, null=True, blank=True)

    is_published = models.BooleanField(default=False)

    # Set when materialized from an approved request
    source_request = models.OneToOneField(
        "memorial_requests.MemorialRequest",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="memorial",
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} ({self.slug})"

    # ----- Class methods -----

    @classmethod
    def get_or_none(cls, memorial_id) -> "Memorial | None":
        """Get memorial by ID, returning None if not found or not a valid id."""
        try:
            return cls.objects.get(id=memorial_id)
        except (cls.DoesNotExist, ValueError, TypeError, DjangoValidationError):
            return None

    @classmethod
    def published(cls):
        """Memorials visible on the public read path."""
        return cls.objects.filter(is_published=True)

    # ----- Properties -----

    @property
    def photo_urls(self) -> list[str]:
        return [p.photo_url for p in self.photos.all()]

    @property
    def video_urls(self) -> list[str]:
        return [v.video_url for v in self.videos.all()]

    @property
    def audio_tracks(self) -> list[dict]:
        return [a.as_track() for a in self.audios.all()]


class MemorialPhoto(models.Model):
    memorial = models.ForeignKey(Memorial, on_delete=models.CASCADE, related_name="photos")
    photo_url = models.CharField(max_length=500)
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["position", "id"]


class MemorialVideo(models.Model):
    memorial = models.ForeignKey(Memorial, on_delete=models.CASCADE, related_name="videos")
    video_url = models.CharField(max_length=500)
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["position", "id"]


class MemorialAudio(models.Model):
    """An audio message attached to a memorial (the autoplay source is the first one)."""

    memorial = models.ForeignKey(Memorial, on_delete=models.CASCADE, related_name="audios")
    audio_url = models.CharField(max_length=500)
    audio_title = models.CharField(max_length=200, blank=True)
    duration = models.FloatField(null=True, blank=True)
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["position", "id"]

    def as_track(self) -> dict:
        return {
            "url": self.audio_url,
            "title": self.audio_title or "Untitled",
            "duration": self.duration,
        }


class MemorialVisit(models.Model):
    """One public view of a published memorial."""

    memorial = models.ForeignKey(Memorial, on_delete=models.CASCADE, related_name="visits")
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    visited_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-visited_at"]
