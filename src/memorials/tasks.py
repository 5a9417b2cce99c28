"""Celery tasks for memorial pages."""

import logging

from celery import shared_task

from src.core.errors import PersistenceError
from .models import Memorial
from . import services

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=2, default_retry_delay=30)
def record_visit(self, memorial_id: str, ip_address: str | None = None):
    """
    Store one public visit. Best-effort: a lost visit never affects the page.

    Args:
        memorial_id: The memorial UUID as a string
        ip_address: Visitor address, if known
    """
    if not Memorial.objects.filter(id=memorial_id).exists():
        logger.warning(f"Visit for unknown memorial {memorial_id} ignored")
        return None

    try:
        visit = services.record_visit(memorial_id, ip_address)
    except PersistenceError as e:
        logger.warning(f"Could not record visit for memorial {memorial_id}: {e}")
        raise self.retry(exc=e)

    return visit.id
