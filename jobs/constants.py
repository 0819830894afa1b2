"""Choice sets shared by the jobs models, forms and the transition table.

Kept free of model imports so ``jobs.transitions`` can use them without the
app registry being ready.
"""

from __future__ import annotations

from django.db import models


class JobPostStatus(models.TextChoices):
    OPEN = "OPEN", "Open"
    CLOSED = "CLOSED", "Closed"
    FILLED = "FILLED", "Filled"


class ApplicationStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    SHORTLISTED = "SHORTLISTED", "Shortlisted"
    REJECTED = "REJECTED", "Rejected"


class EmploymentType(models.TextChoices):
    FULL_TIME = "FULL_TIME", "Full-time"
    PART_TIME = "PART_TIME", "Part-time"
    FREELANCE = "FREELANCE", "Freelance"
    INTERNSHIP = "INTERNSHIP", "Internship"


class LocationType(models.TextChoices):
    ONSITE = "ONSITE", "On-site"
    REMOTE = "REMOTE", "Remote"
    HYBRID = "HYBRID", "Hybrid"


# Applicant notification titles keyed by the status that triggers them.
STATUS_NOTIFICATION_TITLES = {
    ApplicationStatus.SHORTLISTED.value: "You have been shortlisted for {title}",
    ApplicationStatus.REJECTED.value: "Application update for {title}",
}
