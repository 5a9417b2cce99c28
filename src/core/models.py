"""Process-wide application settings stored as key/value rows."""

from django.db import models


class AppSetting(models.Model):
    """A single named setting such as moderation_enabled."""

    key = models.CharField(max_length=100, unique=True)
    value = models.JSONField(default=None, null=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["key"]

    def __str__(self):
        return f"{self.key}={self.value!r}"
