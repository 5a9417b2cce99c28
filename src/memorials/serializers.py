"""Maps memorial models to the API response shape."""

from .models import Memorial


def memorial_to_dict(memorial: Memorial, admin: bool = False) -> dict:
    """
    Build the JSON representation of a memorial.

    Args:
        memorial: Memorial with photos/videos/audios (prefetched where possible)
        admin: Include publication state and bookkeeping fields

    Returns:
        Dict with snake_case keys; absent media are null, never ""
    """
    data = {
        "id": str(memorial.id),
        "slug": memorial.slug,
        "name": memorial.name,
        "birth_date": memorial.birth_date.isoformat(),
        "death_date": memorial.death_date.isoformat(),
        "tribute": memorial.tribute,
        "biography": memorial.biography,
        "profile_photo_url": memorial.profile_photo_url,
        "cover_photo_url": memorial.cover_photo_url,
        "featured_video_url": memorial.featured_video_url,
        "photos": memorial.photo_urls,
        "videos": memorial.video_urls,
        "audios": memorial.audio_tracks,
        "created_at": memorial.created_at.isoformat(),
    }
    if admin:
        data.update({
            "is_published": memorial.is_published,
            "source_request_id": (
                str(memorial.source_request_id) if memorial.source_request_id else None
            ),
            "updated_at": memorial.updated_at.isoformat(),
        })
    return data
