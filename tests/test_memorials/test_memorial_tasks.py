"""Tests for the visit-recording task."""

import uuid
from datetime import date

from django.test import TestCase

from src.memorials.models import Memorial, MemorialVisit
from src.memorials.tasks import record_visit


class TestRecordVisit(TestCase):

    def test_records_visit(self):
        memorial = Memorial.objects.create(
            slug="ana", name="Ana", birth_date=date(1950, 1, 1), death_date=date(2020, 1, 1)
        )
        visit_id = record_visit(str(memorial.id), "192.168.0.10")

        visit = MemorialVisit.objects.get(id=visit_id)
        assert visit.memorial_id == memorial.id
        assert visit.ip_address == "192.168.0.10"

    def test_unknown_memorial_is_ignored(self):
        assert record_visit(str(uuid.uuid4()), None) is None
        assert not MemorialVisit.objects.exists()
