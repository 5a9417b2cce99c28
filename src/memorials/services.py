"""
Memorial management.

Admin create/update/delete/publish, the public read path, dashboard stats,
and the child-media insert shared with request approval.
"""

import logging

from django.db import transaction
from django.utils import timezone

from src.core.errors import NotFoundError, persistence_guard
from .models import Memorial, MemorialAudio, MemorialPhoto, MemorialVideo, MemorialVisit
from .schemas import AudioTrack, MemorialPayload, check_dates, parse_payload, require
from .slugs import generate_unique_slug

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["name", "birth_date", "death_date"]
SCALAR_FIELDS = [
    "name", "birth_date", "death_date", "tribute", "biography",
    "profile_photo_url", "cover_photo_url", "featured_video_url",
]


def add_media(
    memorial: Memorial,
    photos: list[str],
    videos: list[str],
    audios: list[AudioTrack],
) -> None:
    """Bulk-insert child media rows for a memorial, keeping list order."""
    if photos:
        MemorialPhoto.objects.bulk_create([
            MemorialPhoto(memorial=memorial, photo_url=url, position=i)
            for i, url in enumerate(photos)
        ])
    if videos:
        MemorialVideo.objects.bulk_create([
            MemorialVideo(memorial=memorial, video_url=url, position=i)
            for i, url in enumerate(videos)
        ])
    if audios:
        MemorialAudio.objects.bulk_create([
            MemorialAudio(
                memorial=memorial,
                audio_url=track.url,
                audio_title=track.title,
                duration=track.duration,
                position=i,
            )
            for i, track in enumerate(audios)
        ])


def get_memorial(memorial_id) -> Memorial:
    """Admin lookup by id, published or not."""
    with persistence_guard("load memorial"):
        memorial = Memorial.get_or_none(memorial_id)
    if memorial is None:
        raise NotFoundError("Memorial not found")
    return memorial


def list_memorials():
    with persistence_guard("list memorials"):
        return list(
            Memorial.objects.prefetch_related("photos", "videos", "audios")
        )


def create_memorial(data: dict) -> Memorial:
    """Create a memorial directly (admin). New memorials start unpublished."""
    payload = parse_payload(MemorialPayload, data)
    require(payload, REQUIRED_FIELDS)
    check_dates(payload)

    slug = generate_unique_slug(payload.name)
    with persistence_guard("create memorial"), transaction.atomic():
        memorial = Memorial.objects.create(
            slug=slug,
            **{field: getattr(payload, field) for field in SCALAR_FIELDS},
        )
        add_media(memorial, payload.photos, payload.videos, payload.audios)

    logger.info(f"Created memorial {memorial.id} ({memorial.slug})")
    return memorial


def update_memorial(memorial_id, data: dict) -> Memorial:
    """
    Update the fields present in data.

    A media list that is present replaces the existing rows entirely.
    """
    memorial = get_memorial(memorial_id)
    payload = parse_payload(MemorialPayload, data)
    provided = payload.model_fields_set

    # Fields that are sent must not blank out required values
    require(payload, [f for f in REQUIRED_FIELDS if f in provided])

    for field in SCALAR_FIELDS:
        if field in provided:
            setattr(memorial, field, getattr(payload, field))
    check_dates(memorial)

    with persistence_guard("update memorial"), transaction.atomic():
        memorial.save()
        if "photos" in provided:
            memorial.photos.all().delete()
            add_media(memorial, payload.photos, [], [])
        if "videos" in provided:
            memorial.videos.all().delete()
            add_media(memorial, [], payload.videos, [])
        if "audios" in provided:
            memorial.audios.all().delete()
            add_media(memorial, [], [], payload.audios)

    logger.info(f"Updated memorial {memorial.id}: {sorted(provided)}")
    return memorial


def delete_memorial(memorial_id) -> None:
    memorial = get_memorial(memorial_id)
    with persistence_guard("delete memorial"):
        memorial.delete()
    logger.info(f"Deleted memorial {memorial_id}")


def set_published(memorial_id, published: bool) -> Memorial:
    """The explicit publication action; nothing else publishes a memorial."""
    memorial = get_memorial(memorial_id)
    if memorial.is_published != published:
        memorial.is_published = published
        with persistence_guard("change memorial publication"):
            memorial.save(update_fields=["is_published", "updated_at"])
        logger.info(f"Memorial {memorial.id} published={published}")
    return memorial


def get_public_memorial(slug: str) -> Memorial:
    """Published memorial by slug. Unpublished ones are indistinguishable from missing."""
    with persistence_guard("load memorial"):
        memorial = (
            Memorial.published()
            .prefetch_related("photos", "videos", "audios")
            .filter(slug=slug)
            .first()
        )
    if memorial is None:
        raise NotFoundError("Memorial not found or not published")
    return memorial


def record_visit(memorial_id, ip_address: str | None = None) -> MemorialVisit:
    with persistence_guard("record visit"):
        return MemorialVisit.objects.create(memorial_id=memorial_id, ip_address=ip_address)


def get_stats() -> dict:
    """Dashboard counters."""
    month_start = timezone.now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    with persistence_guard("compute stats"):
        return {
            "total_memorials": Memorial.objects.count(),
            "total_visits": MemorialVisit.objects.count(),
            "visits_this_month": MemorialVisit.objects.filter(visited_at__gte=month_start).count(),
            "memorials_this_month": Memorial.objects.filter(created_at__gte=month_start).count(),
        }
