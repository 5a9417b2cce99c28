"""Maps tributes to the API response shape."""

from .models import Tribute


def tribute_to_dict(tribute: Tribute) -> dict:
    return {
        "id": str(tribute.id),
        "author_name": tribute.author_name,
        "message": tribute.message,
        "image_url": tribute.image_url,
        "likes_count": tribute.likes_count,
        "created_at": tribute.created_at.isoformat(),
    }


def admin_tribute_to_dict(tribute: Tribute) -> dict:
    data = tribute_to_dict(tribute)
    data.update({
        "status": tribute.status,
        "memorial": {
            "id": str(tribute.memorial.id),
            "name": tribute.memorial.name,
            "slug": tribute.memorial.slug,
        },
    })
    return data
