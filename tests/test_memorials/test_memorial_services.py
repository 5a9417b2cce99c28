"""Tests for memorial management services."""

from datetime import date, timedelta
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone

from src.core.errors import NotFoundError, PersistenceError, ValidationError
from src.memorials import services
from src.memorials.models import Memorial, MemorialPhoto, MemorialVisit
from src.memorials.slugs import generate_unique_slug


def memorial_data(**overrides):
    data = {
        "name": "Ada Lovelace",
        "birth_date": "1815-12-10",
        "death_date": "1852-11-27",
        "biography": "Mathematician.",
        "photos": ["a.jpg", "b.jpg"],
        "videos": ["v.mp4"],
        "audios": [{"url": "voice.mp3", "title": "Her voice", "duration": 12.5}],
    }
    data.update(overrides)
    return data


class TestGenerateUniqueSlug(TestCase):

    def test_slugifies_name(self):
        assert generate_unique_slug("Élodie  O'Brien") == "elodie-obrien"

    def test_appends_suffix_on_collision(self):
        Memorial.objects.create(slug="john-smith", name="John Smith",
                                birth_date=date(1950, 1, 1), death_date=date(2020, 1, 1))
        Memorial.objects.create(slug="john-smith-2", name="John Smith",
                                birth_date=date(1950, 1, 1), death_date=date(2020, 1, 1))
        assert generate_unique_slug("John Smith") == "john-smith-3"

    def test_empty_name_falls_back(self):
        assert generate_unique_slug("!!!") == "memorial"


class TestCreateMemorial(TestCase):

    def test_creates_unpublished_memorial_with_children(self):
        memorial = services.create_memorial(memorial_data())

        assert memorial.is_published is False
        assert memorial.slug == "ada-lovelace"
        assert memorial.photo_urls == ["a.jpg", "b.jpg"]
        assert memorial.video_urls == ["v.mp4"]
        assert memorial.audio_tracks == [
            {"url": "voice.mp3", "title": "Her voice", "duration": 12.5}
        ]

    def test_missing_required_fields_listed_together(self):
        with pytest.raises(ValidationError) as exc_info:
            services.create_memorial({"biography": "x"})
        assert exc_info.value.fields == ["name", "birth_date", "death_date"]
        assert not Memorial.objects.exists()

    def test_blank_cover_photo_stored_as_none(self):
        memorial = services.create_memorial(memorial_data(cover_photo_url="  "))
        assert memorial.cover_photo_url is None

    def test_death_before_birth_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            services.create_memorial(memorial_data(death_date="1800-01-01"))
        assert exc_info.value.fields == ["death_date"]

    def test_bad_date_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            services.create_memorial(memorial_data(birth_date="not-a-date"))
        assert "birth_date" in exc_info.value.fields

    def test_blank_audio_title_defaults(self):
        memorial = services.create_memorial(memorial_data(audios=[{"url": "x.mp3", "title": ""}]))
        assert memorial.audio_tracks[0]["title"] == "Untitled"

    def test_child_insert_failure_rolls_back_memorial(self):
        with patch.object(MemorialPhoto.objects, "bulk_create", side_effect=DatabaseError("boom")):
            with pytest.raises(PersistenceError):
                services.create_memorial(memorial_data())
        assert not Memorial.objects.exists()


class TestUpdateMemorial(TestCase):

    def setUp(self):
        self.memorial = services.create_memorial(memorial_data())

    def test_updates_only_provided_fields(self):
        services.update_memorial(self.memorial.id, {"biography": "Poet's daughter."})
        self.memorial.refresh_from_db()
        assert self.memorial.biography == "Poet's daughter."
        assert self.memorial.name == "Ada Lovelace"
        assert self.memorial.photo_urls == ["a.jpg", "b.jpg"]

    def test_provided_media_list_replaces_rows(self):
        services.update_memorial(self.memorial.id, {"photos": ["c.jpg"]})
        assert self.memorial.photo_urls == ["c.jpg"]
        assert self.memorial.video_urls == ["v.mp4"]

    def test_cannot_blank_required_field(self):
        with pytest.raises(ValidationError):
            services.update_memorial(self.memorial.id, {"name": ""})

    def test_unknown_memorial(self):
        with pytest.raises(NotFoundError):
            services.update_memorial("00000000-0000-0000-0000-000000000000", {"name": "X"})


class TestPublication(TestCase):

    def setUp(self):
        self.memorial = services.create_memorial(memorial_data())

    def test_unpublished_is_invisible_publicly(self):
        with pytest.raises(NotFoundError):
            services.get_public_memorial(self.memorial.slug)

    def test_published_is_visible(self):
        services.set_published(self.memorial.id, True)
        assert services.get_public_memorial(self.memorial.slug).id == self.memorial.id

    def test_unpublish(self):
        services.set_published(self.memorial.id, True)
        services.set_published(self.memorial.id, False)
        with pytest.raises(NotFoundError):
            services.get_public_memorial(self.memorial.slug)

    def test_delete_cascades(self):
        services.record_visit(self.memorial.id, "10.0.0.1")
        services.delete_memorial(self.memorial.id)
        assert not Memorial.objects.exists()
        assert not MemorialPhoto.objects.exists()
        assert not MemorialVisit.objects.exists()


class TestStats(TestCase):

    def test_counts(self):
        memorial = services.create_memorial(memorial_data())
        services.create_memorial(memorial_data(name="Grace Hopper"))
        services.record_visit(memorial.id, "10.0.0.1")
        old = services.record_visit(memorial.id, None)
        MemorialVisit.objects.filter(id=old.id).update(
            visited_at=timezone.now() - timedelta(days=62)
        )

        stats = services.get_stats()
        assert stats["total_memorials"] == 2
        assert stats["memorials_this_month"] == 2
        assert stats["total_visits"] == 2
        assert stats["visits_this_month"] == 1
