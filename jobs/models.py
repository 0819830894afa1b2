from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from .constants import ApplicationStatus, EmploymentType, JobPostStatus, LocationType


def _split_lines(value):
    return [part.strip() for part in (value or "").splitlines() if part.strip()]


class JobPostQuerySet(models.QuerySet):
    def for_owner(self, user):
        return self.filter(owner=user)

    def recent(self):
        return self.order_by("-created_at")


class JobPost(models.Model):
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="job_posts")
    title = models.CharField(max_length=255)
    company_name = models.CharField(max_length=255, blank=True)
    location = models.CharField(max_length=255, blank=True)
    location_type = models.CharField(max_length=20, choices=LocationType.choices, blank=True)
    employment_type = models.CharField(max_length=20, choices=EmploymentType.choices, default=EmploymentType.FULL_TIME)
    positions_available = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    positions_filled = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=JobPostStatus.choices, default=JobPostStatus.OPEN)
    salary_min = models.PositiveIntegerField(blank=True, null=True)
    salary_max = models.PositiveIntegerField(blank=True, null=True)
    salary_currency = models.CharField(max_length=3, blank=True)
    deadline = models.DateTimeField(blank=True, null=True)
    details = models.TextField(blank=True)
    requirements = models.TextField(blank=True, help_text="One requirement per line.")
    allow_external_apply = models.BooleanField(default=False)
    apply_url = models.URLField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = JobPostQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(positions_available__gte=1),
                name="jobpost_positions_available_positive",
            ),
            models.CheckConstraint(
                condition=Q(positions_filled__lte=F("positions_available")),
                name="jobpost_positions_filled_within_capacity",
            ),
        ]

    def __str__(self):
        return self.title

    def requirements_list(self):
        return _split_lines(self.requirements)

    @property
    def positions_remaining(self):
        return max(0, self.positions_available - self.positions_filled)

    def is_deadline_passed(self, now=None):
        if not self.deadline:
            return False
        return self.deadline < (now or timezone.now())

    def display_status(self, now=None):
        """An OPEN post whose deadline has passed shows (and behaves) as CLOSED."""
        if self.status == JobPostStatus.OPEN and self.is_deadline_passed(now):
            return JobPostStatus.CLOSED
        return self.status


class JobApplicationQuerySet(models.QuerySet):
    def for_job_post(self, job_post):
        return self.filter(job_post=job_post)

    def for_applicant(self, user):
        return self.filter(applicant=user)


class JobApplication(models.Model):
    job_post = models.ForeignKey(JobPost, on_delete=models.CASCADE, related_name="applications")
    applicant = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="job_applications")
    resume = models.FileField(upload_to="resumes/%Y/%m/")
    resume_letter = models.TextField(blank=True, null=True)
    expected_salary = models.PositiveIntegerField(blank=True, null=True)
    availability = models.CharField(max_length=255, blank=True, null=True)
    status = models.CharField(max_length=20, choices=ApplicationStatus.choices, default=ApplicationStatus.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = JobApplicationQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["job_post", "applicant"], name="unique_application_per_applicant"),
        ]

    def __str__(self):
        return f"{self.applicant} → {self.job_post}"


class JobApplicationEvent(models.Model):
    application = models.ForeignKey(JobApplication, on_delete=models.CASCADE, related_name="events")
    status = models.CharField(max_length=20, choices=ApplicationStatus.choices)
    note = models.CharField(max_length=255, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.application_id}: {self.status}"
