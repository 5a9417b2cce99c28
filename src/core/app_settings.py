"""
Settings collaborator.

Values are read fresh on every call so each caller gets a snapshot of the
current value. Writes are plain upserts: last write wins.
"""

import logging

from django.conf import settings
from django.db import transaction

from .errors import ValidationError, persistence_guard
from .models import AppSetting

logger = logging.getLogger(__name__)

MODERATION_ENABLED = "moderation_enabled"
AUTOPLAY_ENABLED = "autoplay_enabled"

DEFAULTS = {
    MODERATION_ENABLED: False,
    AUTOPLAY_ENABLED: True,
}


def _defaults() -> dict:
    return {**DEFAULTS, **getattr(settings, "APP_SETTING_DEFAULTS", {})}


def _check_key(key: str) -> None:
    if key not in _defaults():
        raise ValidationError(f"Unknown setting: {key}", fields=[key])


def get_setting(key: str) -> bool:
    """Return the current value of a setting, or its default if never set."""
    _check_key(key)
    with persistence_guard(f"read setting {key}"):
        row = AppSetting.objects.filter(key=key).first()
    if row is None:
        return _defaults()[key]
    return row.value


def set_setting(key: str, value: bool) -> bool:
    """Store a setting value and return it."""
    _check_key(key)
    if not isinstance(value, bool):
        raise ValidationError(f"{key} must be true or false", fields=[key])

    with persistence_guard(f"update setting {key}"):
        AppSetting.objects.update_or_create(key=key, defaults={"value": value})
    logger.info(f"Setting {key} set to {value}")
    return value


def update_settings(values: dict) -> None:
    """Validate every key/value first, then store them all in one transaction."""
    for key, value in values.items():
        _check_key(key)
        if not isinstance(value, bool):
            raise ValidationError(f"{key} must be true or false", fields=[key])

    with persistence_guard("update settings"), transaction.atomic():
        for key, value in values.items():
            AppSetting.objects.update_or_create(key=key, defaults={"value": value})
    logger.info(f"Settings updated: {sorted(values)}")


def all_settings() -> dict:
    """Return every known setting with stored values applied over defaults."""
    values = dict(_defaults())
    with persistence_guard("read settings"):
        for row in AppSetting.objects.filter(key__in=values.keys()):
            values[row.key] = row.value
    return values


def moderation_enabled() -> bool:
    return get_setting(MODERATION_ENABLED)


def autoplay_enabled() -> bool:
    return get_setting(AUTOPLAY_ENABLED)
