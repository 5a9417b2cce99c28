"""Tests for the memorial request workflow."""

from datetime import date
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.test import TestCase

from src.core.errors import InvalidTransitionError, NotFoundError, PersistenceError, ValidationError
from src.memorial_requests import workflow
from src.memorial_requests.models import MemorialRequest
from src.memorials.models import Memorial, MemorialAudio, MemorialPhoto, MemorialVideo

MISSING_ID = "00000000-0000-0000-0000-000000000000"


def request_data(**overrides):
    data = {
        "name": "Maria Silva",
        "birth_date": "1940-03-01",
        "death_date": "2021-07-15",
        "requester_name": "Ana Silva",
        "requester_email": "ana@example.com",
        "photos": ["a.jpg", "b.jpg"],
        "videos": [],
        "audios": [],
    }
    data.update(overrides)
    return data


class TestCreateRequest(TestCase):

    def test_created_pending(self):
        request = workflow.create_request(request_data())
        assert request.status == MemorialRequest.Status.PENDING
        assert request.photos == ["a.jpg", "b.jpg"]
        assert request.birth_date == date(1940, 3, 1)

    def test_missing_fields_reported_together(self):
        with pytest.raises(ValidationError) as exc_info:
            workflow.create_request({"name": "Maria Silva"})
        assert exc_info.value.fields == [
            "birth_date", "death_date", "requester_name", "requester_email"
        ]
        assert not MemorialRequest.objects.exists()

    def test_invalid_email(self):
        with pytest.raises(ValidationError) as exc_info:
            workflow.create_request(request_data(requester_email="not-an-email"))
        assert exc_info.value.fields == ["requester_email"]

    def test_audios_validated_as_tracks(self):
        request = workflow.create_request(request_data(audios=[{"url": "a.mp3"}]))
        assert request.audios == [{"url": "a.mp3", "title": "Untitled", "duration": None}]
        assert request.tracks[0].title == "Untitled"

    def test_audio_without_url_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            workflow.create_request(request_data(audios=[{"title": "No url"}]))
        assert exc_info.value.fields == ["audios"]

    def test_negative_duration_rejected(self):
        with pytest.raises(ValidationError):
            workflow.create_request(request_data(audios=[{"url": "a.mp3", "duration": -1}]))


class TestSetStatus(TestCase):

    def setUp(self):
        self.request = workflow.create_request(request_data())

    def test_pending_to_in_review_with_notes(self):
        updated = workflow.set_status(self.request.id, "in_review", notes="Checking dates")
        assert updated.status == "in_review"
        assert updated.notes == "Checking dates"

    def test_notes_kept_when_not_provided(self):
        workflow.set_status(self.request.id, "in_review", notes="First look")
        workflow.set_status(self.request.id, "in_review")
        self.request.refresh_from_db()
        assert self.request.notes == "First look"

    def test_approved_must_go_through_approve(self):
        with pytest.raises(ValidationError) as exc_info:
            workflow.set_status(self.request.id, "approved")
        assert not isinstance(exc_info.value, InvalidTransitionError)
        self.request.refresh_from_db()
        assert self.request.status == "pending"

    def test_unknown_status(self):
        with pytest.raises(ValidationError):
            workflow.set_status(self.request.id, "archived")

    def test_missing_request(self):
        with pytest.raises(NotFoundError):
            workflow.set_status(MISSING_ID, "in_review")

    def test_rejected_is_terminal(self):
        workflow.set_status(self.request.id, "rejected")
        with pytest.raises(InvalidTransitionError):
            workflow.set_status(self.request.id, "in_review")
        self.request.refresh_from_db()
        assert self.request.status == "rejected"

    def test_approved_is_terminal(self):
        workflow.approve(self.request.id)
        for status in ("in_review", "rejected"):
            with pytest.raises(InvalidTransitionError):
                workflow.set_status(self.request.id, status)
        self.request.refresh_from_db()
        assert self.request.status == "approved"


class TestApprove(TestCase):

    def test_materializes_unpublished_memorial(self):
        Memorial.objects.create(
            slug="maria-silva", name="Maria Silva",
            birth_date=date(1900, 1, 1), death_date=date(1980, 1, 1),
        )
        request = workflow.create_request(request_data())

        memorial = workflow.approve(request.id)

        assert memorial.is_published is False
        assert memorial.slug == "maria-silva-2"
        assert memorial.source_request_id == request.id
        assert MemorialPhoto.objects.filter(memorial=memorial).count() == 2
        assert not MemorialVideo.objects.filter(memorial=memorial).exists()
        assert not MemorialAudio.objects.filter(memorial=memorial).exists()
        assert Memorial.objects.filter(source_request=request).count() == 1

    def test_copies_content_and_tracks(self):
        request = workflow.create_request(request_data(
            biography="Taught at the village school.",
            cover_photo_url="cover.jpg",
            videos=["v.mp4"],
            audios=[{"url": "a.mp3", "title": "Song", "duration": 30}],
        ))
        memorial = workflow.approve(request.id)

        assert memorial.biography == "Taught at the village school."
        assert memorial.cover_photo_url == "cover.jpg"
        assert memorial.profile_photo_url is None
        assert memorial.video_urls == ["v.mp4"]
        assert memorial.audio_tracks == [{"url": "a.mp3", "title": "Song", "duration": 30.0}]

    def test_second_approve_refused(self):
        request = workflow.create_request(request_data())
        workflow.approve(request.id)
        with pytest.raises(InvalidTransitionError):
            workflow.approve(request.id)
        assert Memorial.objects.count() == 1

    def test_rejected_cannot_be_approved(self):
        request = workflow.create_request(request_data())
        workflow.set_status(request.id, "rejected")
        with pytest.raises(InvalidTransitionError):
            workflow.approve(request.id)
        assert not Memorial.objects.exists()

    def test_in_review_can_be_approved(self):
        request = workflow.create_request(request_data())
        workflow.set_status(request.id, "in_review")
        workflow.approve(request.id)
        request.refresh_from_db()
        assert request.status == "approved"

    def test_child_failure_rolls_back_memorial_but_keeps_approval(self):
        request = workflow.create_request(request_data())

        with patch.object(MemorialPhoto.objects, "bulk_create", side_effect=DatabaseError("boom")):
            with pytest.raises(PersistenceError):
                workflow.approve(request.id)

        request.refresh_from_db()
        assert request.status == "approved"
        assert not Memorial.objects.exists()
        assert not MemorialPhoto.objects.exists()

    def test_retry_after_failure_materializes(self):
        request = workflow.create_request(request_data())
        with patch.object(MemorialPhoto.objects, "bulk_create", side_effect=DatabaseError("boom")):
            with pytest.raises(PersistenceError):
                workflow.approve(request.id)

        memorial = workflow.approve(request.id)
        assert memorial.photo_urls == ["a.jpg", "b.jpg"]

    def test_approve_locks_request_row(self):
        request = workflow.create_request(request_data())
        manager = MemorialRequest.objects
        with patch.object(manager, "select_for_update", wraps=manager.select_for_update) as lock:
            workflow.approve(request.id)
        # Once for the approval, once for the materialization
        assert lock.call_count == 2

    def test_losing_concurrent_approval_gets_conflict(self):
        request = workflow.create_request(request_data())
        workflow.approve(request.id)

        # The second approval committed its check before the first one created the memorial
        with pytest.raises(InvalidTransitionError):
            workflow._materialize(request.id)
        assert Memorial.objects.count() == 1

    def test_missing_request(self):
        with pytest.raises(NotFoundError):
            workflow.approve(MISSING_ID)


class TestRemove(TestCase):

    def test_remove(self):
        request = workflow.create_request(request_data())
        workflow.remove(request.id)
        assert not MemorialRequest.objects.exists()

    def test_remove_keeps_materialized_memorial(self):
        request = workflow.create_request(request_data())
        memorial = workflow.approve(request.id)
        workflow.remove(request.id)
        memorial.refresh_from_db()
        assert memorial.source_request_id is None

    def test_remove_missing(self):
        with pytest.raises(NotFoundError):
            workflow.remove(MISSING_ID)


class TestListRequests(TestCase):

    def test_filter_by_status(self):
        first = workflow.create_request(request_data())
        workflow.create_request(request_data(name="Other"))
        workflow.set_status(first.id, "in_review")

        assert [r.id for r in workflow.list_requests("in_review")] == [first.id]
        assert len(workflow.list_requests()) == 2
        assert workflow.pending_count() == 1

    def test_unknown_status_filter(self):
        with pytest.raises(ValidationError):
            workflow.list_requests("archived")
