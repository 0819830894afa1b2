"""
Job post and application operations that touch capacity or status.

Each public function is one transaction. ``positions_filled`` and ``status``
on ``JobPost`` are written only here, always under the post's row lock.
"""

import logging
from functools import partial

from django.db import IntegrityError, transaction

from .constants import ApplicationStatus, JobPostStatus, STATUS_NOTIFICATION_TITLES
from .exceptions import AlreadyApplied, ApplicationClosed, Forbidden, InvalidRequest, NotFound
from .models import JobApplication, JobPost
from .store import DjangoApplicationStore
from .transitions import derive_post_status, parse_status, plan_transition
from .utils import notify_new_application, record_application_event, send_application_status_notification

logger = logging.getLogger(__name__)


def transition_application_status(application_id, requested_status, *, job_post_id=None, store=None):
    """Move one application to ``requested_status`` and settle the post's capacity.

    Raises ``InvalidRequest`` for an unknown status (or an application that is
    not under ``job_post_id`` when given), ``NotFound`` when the application or
    its post is missing, ``CapacityExceeded`` when a shortlist finds no free
    position, and ``StorageFailure`` when the transaction cannot commit.
    Nothing is written unless the whole move succeeds.
    """
    store = store or DjangoApplicationStore()
    requested = parse_status(requested_status).value

    with store.atomic():
        application = store.get_application_for_update(application_id)
        if job_post_id is not None and str(application.job_post_id) != str(job_post_id):
            raise InvalidRequest()

        posting = store.get_posting_for_update(application.job_post_id)
        plan = plan_transition(
            application.status,
            requested,
            positions_filled=posting.positions_filled,
            positions_available=posting.positions_available,
            post_status=posting.status,
        )
        application = store.apply_transition(application, posting, plan)

        if plan.changes_status and requested in STATUS_NOTIFICATION_TITLES:
            store.on_commit(partial(send_application_status_notification, application.id))

    logger.info(
        "Application status changed: app_id=%s job_post_id=%s %s->%s delta=%s filled=%s/%s post_status=%s",
        application.id,
        posting.id,
        plan.previous_status,
        plan.requested_status,
        plan.delta,
        plan.positions_filled,
        posting.positions_available,
        plan.post_status,
    )
    return application


def _lock_owned_post(store, job_post_id, user):
    posting = store.get_posting_for_update(job_post_id)
    if posting.owner_id != user.id:
        raise Forbidden()
    return posting


def close_job_post(job_post_id, user, *, store=None):
    store = store or DjangoApplicationStore()
    with store.atomic():
        posting = _lock_owned_post(store, job_post_id, user)
        if posting.status != JobPostStatus.CLOSED:
            posting.status = JobPostStatus.CLOSED
            posting.save(update_fields=["status", "updated_at"])
    logger.info("Job post closed: job_post_id=%s owner=%s", posting.id, user.username)
    return posting


def reopen_job_post(job_post_id, user, *, store=None):
    """Clear CLOSED; the post comes back FILLED if every position is taken."""
    store = store or DjangoApplicationStore()
    with store.atomic():
        posting = _lock_owned_post(store, job_post_id, user)
        if posting.status == JobPostStatus.CLOSED:
            posting.status = derive_post_status(
                JobPostStatus.OPEN, posting.positions_filled, posting.positions_available
            )
            posting.save(update_fields=["status", "updated_at"])
    logger.info("Job post reopened: job_post_id=%s status=%s owner=%s", posting.id, posting.status, user.username)
    return posting


def submit_application(job_post_id, applicant, *, resume, resume_letter=None, expected_salary=None, availability=None):
    with transaction.atomic():
        try:
            job_post = JobPost.objects.select_related("owner").get(id=job_post_id)
        except JobPost.DoesNotExist:
            raise NotFound("Job post not found") from None

        if job_post.owner_id == applicant.id:
            raise InvalidRequest("You cannot apply to your own job post")
        if job_post.display_status() != JobPostStatus.OPEN:
            raise ApplicationClosed()
        if JobApplication.objects.filter(job_post=job_post, applicant=applicant).exists():
            raise AlreadyApplied()

        application = JobApplication(
            job_post=job_post,
            applicant=applicant,
            resume=resume,
            resume_letter=resume_letter or None,
            expected_salary=expected_salary,
            availability=availability or None,
        )
        try:
            with transaction.atomic():
                application.save()
        except IntegrityError:
            # lost a race against the same applicant's other request
            raise AlreadyApplied() from None

        record_application_event(application, ApplicationStatus.PENDING, "Application submitted")
        transaction.on_commit(partial(notify_new_application, application))

    logger.info(
        "Application submitted: app_id=%s job_post_id=%s user=%s",
        application.id,
        job_post.id,
        applicant.username,
    )
    return application
