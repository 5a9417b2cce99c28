"""Slug generation: the public lookup key for a memorial."""

from django.utils.text import slugify

from src.core.errors import persistence_guard
from .models import Memorial

FALLBACK_SLUG = "memorial"
MAX_BASE_LENGTH = 100


def generate_unique_slug(name: str) -> str:
    """
    Derive a URL-safe slug from a name, unique among all memorials.

    Accents are folded to ASCII ("João" -> "joao"). Collisions get a numeric
    suffix: "maria-silva", "maria-silva-2", "maria-silva-3", ...
    """
    base = slugify(name or "")[:MAX_BASE_LENGTH].strip("-") or FALLBACK_SLUG

    with persistence_guard("generate a memorial slug"):
        taken = set(
            Memorial.objects.filter(slug__startswith=base).values_list("slug", flat=True)
        )

    if base not in taken:
        return base
    suffix = 2
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"
