"""
Memorial request workflow.

Lifecycle of a public memorial request and the approval step that
materializes a Memorial from it:

    pending -> in_review -> approved | rejected
    pending -> approved | rejected

approved and rejected are terminal. Only approve() reaches approved.
"""

import logging

from django.db import transaction

from src.core.errors import (
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    persistence_guard,
)
from src.memorials.models import Memorial
from src.memorials.schemas import MemorialRequestPayload, check_dates, parse_payload, require
from src.memorials.services import add_media
from src.memorials.slugs import generate_unique_slug
from .models import MemorialRequest

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["name", "birth_date", "death_date", "requester_name", "requester_email"]
CONTENT_FIELDS = [
    "name", "birth_date", "death_date", "tribute", "biography",
    "profile_photo_url", "cover_photo_url",
    "requester_name", "requester_email", "requester_phone",
]
ADMIN_STATUSES = (MemorialRequest.Status.IN_REVIEW, MemorialRequest.Status.REJECTED)


def get_request(request_id, for_update: bool = False) -> MemorialRequest:
    """Load a request. for_update locks the row and must run inside a transaction."""
    with persistence_guard("load memorial request"):
        request = MemorialRequest.get_or_none(request_id, for_update=for_update)
    if request is None:
        raise NotFoundError("Memorial request not found")
    return request


def list_requests(status: str | None = None) -> list[MemorialRequest]:
    """Admin listing, newest first, optionally filtered by status."""
    if status is not None and status not in MemorialRequest.Status.values:
        raise ValidationError(f"Unknown status: {status}", fields=["status"])

    queryset = MemorialRequest.objects.all()
    if status is not None:
        queryset = queryset.filter(status=status)
    with persistence_guard("list memorial requests"):
        return list(queryset)


def pending_count() -> int:
    with persistence_guard("count memorial requests"):
        return MemorialRequest.objects.filter(status=MemorialRequest.Status.PENDING).count()


def create_request(data: dict) -> MemorialRequest:
    """
    Store a public memorial request in pending.

    Raises:
        ValidationError listing every missing or malformed field
    """
    payload = parse_payload(MemorialRequestPayload, data)
    require(payload, REQUIRED_FIELDS)
    check_dates(payload)

    with persistence_guard("create memorial request"):
        request = MemorialRequest.objects.create(
            photos=list(payload.photos),
            videos=list(payload.videos),
            audios=[track.model_dump() for track in payload.audios],
            **{field: getattr(payload, field) for field in CONTENT_FIELDS},
        )

    logger.info(f"Memorial request {request.id} submitted for {request.name}")
    return request


def set_status(request_id, status: str, notes: str | None = None) -> MemorialRequest:
    """
    Move a request to in_review or rejected, optionally updating notes.

    Raises:
        ValidationError: status is unknown, or is approved (use approve)
        NotFoundError: no such request
        InvalidTransitionError: the request is already approved or rejected
    """
    if status == MemorialRequest.Status.APPROVED:
        raise ValidationError(
            "Requests are approved through the approve action", fields=["status"]
        )
    if status not in ADMIN_STATUSES:
        raise ValidationError(f"Unknown status: {status}", fields=["status"])

    with transaction.atomic():
        request = get_request(request_id, for_update=True)
        if request.is_terminal:
            raise InvalidTransitionError(
                f"Request is already {request.status} and cannot change"
            )

        update_fields = ["status", "updated_at"]
        request.status = status
        if notes is not None:
            request.notes = notes
            update_fields.append("notes")

        with persistence_guard("update memorial request"):
            request.save(update_fields=update_fields)

    logger.info(f"Memorial request {request.id} -> {status}")
    return request


def approve(request_id) -> Memorial:
    """
    Approve a request and materialize its Memorial.

    The approved status is committed on its own before anything else, so a
    failure later leaves an approved request without a memorial rather than
    losing the decision. The memorial row and its photo/video/audio rows are
    then written in a single transaction. Calling approve() again on such a
    request retries the materialization.

    Both steps lock the request row, so of two concurrent approvals exactly
    one creates the memorial and the other gets InvalidTransitionError.

    Returns:
        The new, unpublished Memorial

    Raises:
        NotFoundError: no such request
        InvalidTransitionError: rejected, or already materialized
        PersistenceError: storage failed (nothing partial is left behind)
    """
    with persistence_guard("approve memorial request"), transaction.atomic():
        request = get_request(request_id, for_update=True)

        if request.status == MemorialRequest.Status.REJECTED:
            raise InvalidTransitionError("Request was rejected and cannot be approved")

        if request.status == MemorialRequest.Status.APPROVED:
            if request.is_materialized:
                raise InvalidTransitionError("Request is already approved")
            logger.warning(f"Resuming materialization of approved request {request.id}")
        else:
            request.status = MemorialRequest.Status.APPROVED
            request.save(update_fields=["status", "updated_at"])
            logger.info(f"Memorial request {request.id} approved")

    try:
        memorial = _materialize(request.id)
    except PersistenceError:
        logger.error(
            f"Request {request.id} is approved but its memorial could not be created"
        )
        raise

    logger.info(f"Memorial {memorial.id} ({memorial.slug}) created from request {request.id}")
    return memorial


def _materialize(request_id) -> Memorial:
    with persistence_guard("create memorial from request"), transaction.atomic():
        request = get_request(request_id, for_update=True)
        # A concurrent approve may have finished while this one waited for the lock
        if request.is_materialized:
            raise InvalidTransitionError("Request is already approved")

        memorial = Memorial.objects.create(
            slug=generate_unique_slug(request.name),
            name=request.name,
            birth_date=request.birth_date,
            death_date=request.death_date,
            tribute=request.tribute,
            biography=request.biography,
            profile_photo_url=request.profile_photo_url,
            cover_photo_url=request.cover_photo_url,
            is_published=False,
            source_request=request,
        )
        add_media(memorial, request.photos or [], request.videos or [], request.tracks)

    return memorial


def remove(request_id) -> None:
    """Hard delete. A memorial already created from the request is kept."""
    request = get_request(request_id)
    with persistence_guard("delete memorial request"):
        request.delete()
    logger.info(f"Memorial request {request_id} deleted")
