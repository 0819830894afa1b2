"""
Storage port for application status transitions.

``transition_application_status`` only talks to an ``ApplicationStore``; the
Django implementation below is the one the app uses.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager

from django.db import DatabaseError, transaction

from .exceptions import NotFound, StorageFailure
from .models import JobApplication, JobPost
from .utils import record_application_event

logger = logging.getLogger(__name__)


class ApplicationStore(ABC):
    """Abstract interface for reading and writing one transition."""

    @abstractmethod
    def atomic(self):
        """Context manager for one all-or-nothing unit of work."""

    @abstractmethod
    def get_application_for_update(self, application_id):
        """Return the application, locked for the rest of the unit of work."""

    @abstractmethod
    def get_posting_for_update(self, job_post_id):
        """Return the job post, locked for the rest of the unit of work."""

    @abstractmethod
    def apply_transition(self, application, posting, plan):
        """Persist a ``TransitionPlan`` and return the updated application."""

    def on_commit(self, callback):
        """Run ``callback`` once the current unit of work has committed."""
        callback()


class DjangoApplicationStore(ApplicationStore):
    @contextmanager
    def atomic(self):
        try:
            with transaction.atomic():
                yield
        except DatabaseError as exc:
            logger.exception("Transaction aborted")
            raise StorageFailure() from exc

    def get_application_for_update(self, application_id):
        try:
            return JobApplication.objects.select_for_update().get(id=application_id)
        except (JobApplication.DoesNotExist, ValueError, TypeError):
            raise NotFound("Application not found") from None

    def get_posting_for_update(self, job_post_id):
        # Every writer of positions_filled/status holds this row lock.
        try:
            return JobPost.objects.select_for_update().get(id=job_post_id)
        except JobPost.DoesNotExist:
            raise NotFound("Job post not found") from None

    def apply_transition(self, application, posting, plan):
        application.status = plan.requested_status
        application.save(update_fields=["status", "updated_at"])

        if plan.positions_filled != posting.positions_filled or plan.post_status != posting.status:
            posting.positions_filled = plan.positions_filled
            posting.status = plan.post_status
            posting.save(update_fields=["positions_filled", "status", "updated_at"])

        if plan.changes_status:
            record_application_event(
                application,
                plan.requested_status,
                f"Status changed from {plan.previous_status} to {plan.requested_status}",
            )
        return application

    def on_commit(self, callback):
        transaction.on_commit(callback)
