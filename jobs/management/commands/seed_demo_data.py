import random

from django.contrib.auth import get_user_model
from django.core.files.base import ContentFile
from django.core.management.base import BaseCommand
from django.db import transaction

from accounts.models import Notification
from jobs.constants import ApplicationStatus, EmploymentType, LocationType
from jobs.exceptions import CapacityExceeded, JobsError
from jobs.models import JobPost
from jobs.services import submit_application, transition_application_status

User = get_user_model()


class Command(BaseCommand):
    help = "Seed demo data (posters, applicants, job posts, applications and status changes)."

    def add_arguments(self, parser):
        parser.add_argument("--prefix", type=str, default="demo")
        parser.add_argument("--owners", type=int, default=3)
        parser.add_argument("--applicants", type=int, default=10)
        parser.add_argument("--posts-per-owner", type=int, default=3)
        parser.add_argument("--applications-per-applicant", type=int, default=3)
        parser.add_argument("--password", type=str, default="DemoPass123!")
        parser.add_argument("--seed", type=int, default=42)
        parser.add_argument("--wipe", action="store_true", help="Delete existing users starting with prefix before seeding.")

    def _make_user(self, username, password, **extra):
        user, _ = User.objects.get_or_create(
            username=username,
            defaults={"email": f"{username}@example.com", "is_active": True, **extra},
        )
        # Keep demo credentials predictable.
        user.set_password(password)
        user.save()
        return user

    @transaction.atomic
    def handle(self, *args, **opts):
        rnd = random.Random(opts["seed"])
        prefix = (opts["prefix"] or "demo").strip().lower()
        owners_n = max(1, int(opts["owners"]))
        applicants_n = max(1, int(opts["applicants"]))
        posts_per_owner = max(1, int(opts["posts_per_owner"]))
        apps_per_applicant = max(0, int(opts["applications_per_applicant"]))
        password = opts["password"]

        if opts["wipe"]:
            User.objects.filter(username__startswith=f"{prefix}_").delete()

        company_names = [
            "NorthBridge Labs",
            "Harbor Metrics",
            "BluePeak Systems",
            "CedarStone Digital",
            "OrbitGrid Tech",
        ]
        job_templates = [
            ("Backend Developer", "Build and maintain APIs, background jobs, and PostgreSQL schemas."),
            ("Frontend Engineer", "Develop responsive interfaces with modern JavaScript and API integrations."),
            ("Data Analyst", "Transform product and hiring data into dashboards and actionable insights."),
            ("DevOps Engineer", "Automate CI/CD pipelines, deployments, and runtime monitoring."),
            ("Product Designer", "Prototype user journeys and design system components with Figma."),
        ]
        locations = ["London", "Berlin", "Toronto", "Lisbon", "Remote"]

        posts = []
        for i in range(1, owners_n + 1):
            owner = self._make_user(f"{prefix}_owner_{i}", password, headline="Hiring manager")
            company = company_names[(i - 1) % len(company_names)]
            for j in range(1, posts_per_owner + 1):
                title, details = job_templates[(i + j - 2) % len(job_templates)]
                salary_min = rnd.randint(35_000, 95_000)
                post, _ = JobPost.objects.get_or_create(
                    owner=owner,
                    title=f"{title} - Team {i}.{j}",
                    defaults={
                        "company_name": company,
                        "location": rnd.choice(locations),
                        "location_type": rnd.choice(LocationType.values),
                        "employment_type": rnd.choice(EmploymentType.values),
                        "positions_available": rnd.randint(1, 3),
                        "salary_min": salary_min,
                        "salary_max": salary_min + rnd.randint(8_000, 35_000),
                        "salary_currency": "USD",
                        "details": details,
                        "requirements": "Strong communication\nTeam player",
                    },
                )
                posts.append(post)

        applications = []
        for i in range(1, applicants_n + 1):
            applicant = self._make_user(f"{prefix}_applicant_{i}", password, headline="Software engineer")
            for post in rnd.sample(posts, k=min(apps_per_applicant, len(posts))):
                try:
                    application = submit_application(
                        post.id,
                        applicant,
                        resume=ContentFile(
                            f"Resume for {applicant.username}\n".encode(),
                            name=f"{applicant.username}_resume.pdf",
                        ),
                        resume_letter="I am interested in this role and believe my background is a strong fit.",
                        availability="Two weeks notice",
                    )
                except JobsError as exc:
                    self.stdout.write(f"Skipped application {applicant.username} -> {post.id}: {exc.message}")
                    continue
                applications.append(application)

        shortlisted = rejected = full = 0
        for application in applications:
            target = rnd.choices(
                [ApplicationStatus.PENDING, ApplicationStatus.SHORTLISTED, ApplicationStatus.REJECTED],
                weights=[50, 35, 15],
                k=1,
            )[0]
            if target == ApplicationStatus.PENDING:
                continue
            try:
                transition_application_status(application.id, target)
            except CapacityExceeded:
                full += 1
                continue
            if target == ApplicationStatus.SHORTLISTED:
                shortlisted += 1
            else:
                rejected += 1

        for post in posts:
            Notification.objects.create(
                user=post.owner,
                title="Demo job post ready",
                message=f"{post.title} was seeded with applications.",
                url=f"/api/jobs/posts/{post.id}/applicants/",
            )

        self.stdout.write(self.style.SUCCESS("Seeded demo data successfully."))
        self.stdout.write(f"Job posts: {len(posts)}")
        self.stdout.write(f"Applications: {len(applications)}")
        self.stdout.write(f"Shortlisted: {shortlisted}, rejected: {rejected}, blocked (full): {full}")
        self.stdout.write("")
        self.stdout.write("Sample credentials:")
        for username in [f"{prefix}_owner_1", f"{prefix}_applicant_1"]:
            self.stdout.write(f"  {username} / {password}")
