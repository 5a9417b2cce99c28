"""Maps memorial requests to the API response shape."""

from .models import MemorialRequest


def request_to_dict(request: MemorialRequest) -> dict:
    memorial = getattr(request, "memorial", None)
    return {
        "id": str(request.id),
        "name": request.name,
        "birth_date": request.birth_date.isoformat(),
        "death_date": request.death_date.isoformat(),
        "tribute": request.tribute,
        "biography": request.biography,
        "profile_photo_url": request.profile_photo_url,
        "cover_photo_url": request.cover_photo_url,
        "photos": list(request.photos or []),
        "videos": list(request.videos or []),
        "audios": [track.model_dump() for track in request.tracks],
        "requester_name": request.requester_name,
        "requester_email": request.requester_email,
        "requester_phone": request.requester_phone,
        "status": request.status,
        "notes": request.notes,
        "memorial_id": str(memorial.id) if memorial else None,
        "created_at": request.created_at.isoformat(),
        "updated_at": request.updated_at.isoformat(),
    }
