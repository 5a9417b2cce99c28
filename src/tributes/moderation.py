"""
Tribute moderation.

New tributes are created pending or approved depending on the moderation
flag at the moment of submission. Only approved tributes are ever returned
on the public read path. Admins move tributes between approved and rejected,
one at a time or in bulk.
"""

import logging
import uuid
from typing import Callable, Iterable

from django.conf import settings
from django.db import transaction
from django.db.models import F

from src.core import app_settings
from src.core.errors import NotFoundError, ValidationError, persistence_guard
from src.memorials.models import Memorial
from .models import Tribute, TributeLike

logger = logging.getLogger(__name__)

TARGET_STATUSES = (Tribute.Status.APPROVED, Tribute.Status.REJECTED)


def _parse_id(value) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def _check_target(to: str) -> None:
    if to not in TARGET_STATUSES:
        raise ValidationError(
            f"Status must be one of: {', '.join(TARGET_STATUSES)}", fields=["status"]
        )


class TributeModerationEngine:
    """
    Submission, moderation and likes for tributes.

    Args:
        moderation_flag: Callable returning the current moderation setting.
            Read once per submit() unless the caller passes the value in.
    """

    def __init__(self, moderation_flag: Callable[[], bool] = app_settings.moderation_enabled):
        self._moderation_flag = moderation_flag

    # ----- Visitor operations -----

    def submit(
        self,
        memorial_id,
        author_name: str,
        message: str,
        image_url: str | None = None,
        moderation_enabled: bool | None = None,
    ) -> Tribute:
        """
        Create a tribute on a published memorial.

        Returns:
            The created Tribute; pending when moderation is on, approved otherwise

        Raises:
            ValidationError: author or message empty or too long (nothing is written)
            NotFoundError: memorial missing or unpublished
        """
        author_name, message, image_url = self._validate(author_name, message, image_url)

        with persistence_guard("load memorial"):
            memorial = Memorial.published().filter(id=_parse_id(memorial_id)).first()
        if memorial is None:
            raise NotFoundError("Memorial not found or not published")

        if moderation_enabled is None:
            moderation_enabled = self._moderation_flag()
        status = Tribute.Status.PENDING if moderation_enabled else Tribute.Status.APPROVED

        with persistence_guard("create tribute"):
            tribute = Tribute.objects.create(
                memorial=memorial,
                author_name=author_name,
                message=message,
                image_url=image_url,
                status=status,
            )

        logger.info(f"Tribute {tribute.id} submitted on memorial {memorial.slug} as {status}")
        return tribute

    def like(self, tribute_id, ip_address: str | None = None) -> int:
        """
        Add one like to an approved tribute and return the new count.

        Every call counts; repeated likes from one visitor are not filtered.
        """
        parsed = _parse_id(tribute_id)
        with persistence_guard("like tribute"), transaction.atomic():
            updated = Tribute.objects.filter(
                id=parsed, status=Tribute.Status.APPROVED
            ).update(likes_count=F("likes_count") + 1)
            if not updated:
                raise NotFoundError("Tribute not found")
            TributeLike.objects.create(tribute_id=parsed, ip_address=ip_address)
            return Tribute.objects.values_list("likes_count", flat=True).get(id=parsed)

    def visible_tributes(self, memorial: Memorial) -> list[Tribute]:
        """Approved tributes for the public page, newest first."""
        with persistence_guard("list tributes"):
            return list(
                memorial.tributes.filter(status=Tribute.Status.APPROVED).order_by("-created_at")
            )

    # ----- Admin operations -----

    def transition(self, tribute_id, to: str) -> Tribute:
        """Set a tribute to approved or rejected. Repeating a transition is a no-op."""
        _check_target(to)

        with persistence_guard("load tribute"):
            tribute = Tribute.get_or_none(tribute_id)
        if tribute is None:
            raise NotFoundError("Tribute not found")

        if tribute.status != to:
            previous = tribute.status
            tribute.status = to
            with persistence_guard("update tribute"):
                tribute.save(update_fields=["status"])
            logger.info(f"Tribute {tribute.id}: {previous} -> {to}")
        return tribute

    def bulk_transition(self, tribute_ids: Iterable, to: str) -> int:
        """
        Set every named tribute to the same status, all or nothing.

        Returns:
            Number of tributes named

        Raises:
            NotFoundError: any id is unknown (no tribute changes)
            PersistenceError: storage failed (no tribute changes)
        """
        _check_target(to)

        ids = list(tribute_ids or [])
        if not ids:
            raise ValidationError("No tributes selected", fields=["ids"])

        parsed = {_parse_id(i) for i in ids}
        if None in parsed:
            raise NotFoundError("Tribute not found")

        with persistence_guard("update tributes"), transaction.atomic():
            queryset = Tribute.objects.select_for_update().filter(id__in=parsed)
            found = set(queryset.values_list("id", flat=True))
            missing = parsed - found
            if missing:
                raise NotFoundError(
                    f"Tributes not found: {', '.join(sorted(str(i) for i in missing))}"
                )
            queryset.update(status=to)

        logger.info(f"{len(parsed)} tributes -> {to}")
        return len(parsed)

    def admin_queue(self, status: str | None = None) -> list[Tribute]:
        """All tributes with their memorial, newest first."""
        if status is not None and status not in Tribute.Status.values:
            raise ValidationError(f"Unknown status: {status}", fields=["status"])

        queryset = Tribute.objects.select_related("memorial").order_by("-created_at")
        if status is not None:
            queryset = queryset.filter(status=status)
        with persistence_guard("list tributes"):
            return list(queryset)

    def pending_count(self) -> int:
        with persistence_guard("count tributes"):
            return Tribute.objects.filter(status=Tribute.Status.PENDING).count()

    def delete(self, tribute_id) -> None:
        with persistence_guard("load tribute"):
            tribute = Tribute.get_or_none(tribute_id)
        if tribute is None:
            raise NotFoundError("Tribute not found")

        with persistence_guard("delete tribute"):
            tribute.delete()
        logger.info(f"Tribute {tribute_id} deleted")

    # ----- Helpers -----

    @staticmethod
    def _validate(author_name, message, image_url) -> tuple[str, str, str | None]:
        max_message = getattr(settings, "TRIBUTE_MESSAGE_MAX_LENGTH", 500)
        max_author = getattr(settings, "TRIBUTE_AUTHOR_MAX_LENGTH", 100)

        author_name = author_name.strip() if isinstance(author_name, str) else ""
        message = message.strip() if isinstance(message, str) else ""
        if isinstance(image_url, str):
            image_url = image_url.strip() or None

        errors = []
        if not author_name:
            errors.append(("author_name", "author_name is required"))
        elif len(author_name) > max_author:
            errors.append(("author_name", f"author_name is limited to {max_author} characters"))

        if not message:
            errors.append(("message", "message is required"))
        elif len(message) > max_message:
            errors.append(("message", f"message is limited to {max_message} characters"))

        if image_url is not None and (not isinstance(image_url, str) or len(image_url) > 500):
            errors.append(("image_url", "image_url must be a URL of at most 500 characters"))

        if errors:
            raise ValidationError(
                "; ".join(text for _, text in errors),
                fields=[field for field, _ in errors],
            )
        return author_name, message, image_url


engine = TributeModerationEngine()
