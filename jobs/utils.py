import logging

from .constants import STATUS_NOTIFICATION_TITLES

logger = logging.getLogger(__name__)


def application_url(application) -> str:
    return f"/api/jobs/posts/{application.job_post_id}/applications/{application.id}/"


def record_application_event(application, status: str, note: str | None = None):
    """Create a timeline event for an application."""
    from .models import JobApplicationEvent

    return JobApplicationEvent.objects.create(application=application, status=status, note=note)


def create_in_app_notification(user, title: str, message: str = "", url: str = ""):
    try:
        from accounts.models import Notification
        return Notification.objects.create(user=user, title=title, message=message or None, url=url or None)
    except Exception:
        logger.exception("Failed to create in-app notification")
        return None


def notify_new_application(application):
    job_post = application.job_post
    create_in_app_notification(
        job_post.owner,
        title=f"New application for {job_post.title}",
        message=f"Candidate: {application.applicant.username}",
        url=application_url(application),
    )


def send_application_status_notification(application_id: int):
    """Tell the applicant their application moved. Never raises."""
    from .models import JobApplication

    try:
        application = JobApplication.objects.select_related("job_post", "applicant").get(id=application_id)
    except JobApplication.DoesNotExist:
        logger.warning("Status notification skipped, application gone: app_id=%s", application_id)
        return

    template = STATUS_NOTIFICATION_TITLES.get(application.status)
    if template is None:
        return

    job_title = application.job_post.title
    create_in_app_notification(
        application.applicant,
        title=template.format(title=job_title),
        message=f"Your application status changed to {application.get_status_display().lower()}.",
        url=application_url(application),
    )
    logger.info("Status notification sent: app_id=%s status=%s", application.id, application.status)
