"""
Tribute Models
"""

import uuid

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models


class Tribute(models.Model):
    """A visitor's message on a memorial, shown publicly once approved."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    memorial = models.ForeignKey(
        "memorials.Memorial", on_delete=models.CASCADE, related_name="tributes"
    )

    author_name = models.CharField(max_length=100)
    message = models.TextField()
    image_url = models.CharField(max_length=500, null=True, blank=True)

    class Status(models.TextChoices):
        PENDING = "pending"
        APPROVED = "approved"
        REJECTED = "rejected"

    status = models.CharField(max_length=20, choices=Status, default=Status.PENDING)
    likes_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Tribute {self.id} by {self.author_name} ({self.status})"

    # ----- Class methods -----

    @classmethod
    def get_or_none(cls, tribute_id) -> "Tribute | None":
        """Get tribute by ID, returning None if not found or not a valid id."""
        try:
            return cls.objects.get(id=tribute_id)
        except (cls.DoesNotExist, ValueError, TypeError, DjangoValidationError):
            return None

    # ----- Properties -----

    @property
    def is_visible(self) -> bool:
        return self.status == self.Status.APPROVED


class TributeLike(models.Model):
    """One like, kept for auditing. Repeats from the same visitor are allowed."""

    tribute = models.ForeignKey(Tribute, on_delete=models.CASCADE, related_name="likes")
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
