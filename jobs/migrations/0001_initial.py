# Generated manually (job posts, applications, application timeline)
from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="JobPost",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("company_name", models.CharField(blank=True, max_length=255)),
                ("location", models.CharField(blank=True, max_length=255)),
                ("location_type", models.CharField(blank=True, choices=[("ONSITE", "On-site"), ("REMOTE", "Remote"), ("HYBRID", "Hybrid")], max_length=20)),
                ("employment_type", models.CharField(choices=[("FULL_TIME", "Full-time"), ("PART_TIME", "Part-time"), ("FREELANCE", "Freelance"), ("INTERNSHIP", "Internship")], default="FULL_TIME", max_length=20)),
                ("positions_available", models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ("positions_filled", models.PositiveIntegerField(default=0)),
                ("status", models.CharField(choices=[("OPEN", "Open"), ("CLOSED", "Closed"), ("FILLED", "Filled")], default="OPEN", max_length=20)),
                ("salary_min", models.PositiveIntegerField(blank=True, null=True)),
                ("salary_max", models.PositiveIntegerField(blank=True, null=True)),
                ("salary_currency", models.CharField(blank=True, max_length=3)),
                ("deadline", models.DateTimeField(blank=True, null=True)),
                ("details", models.TextField(blank=True)),
                ("requirements", models.TextField(blank=True, help_text="One requirement per line.")),
                ("allow_external_apply", models.BooleanField(default=False)),
                ("apply_url", models.URLField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("owner", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="job_posts", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("positions_available__gte", 1)), name="jobpost_positions_available_positive"),
                    models.CheckConstraint(condition=models.Q(("positions_filled__lte", models.F("positions_available"))), name="jobpost_positions_filled_within_capacity"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JobApplication",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("resume", models.FileField(upload_to="resumes/%Y/%m/")),
                ("resume_letter", models.TextField(blank=True, null=True)),
                ("expected_salary", models.PositiveIntegerField(blank=True, null=True)),
                ("availability", models.CharField(blank=True, max_length=255, null=True)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("SHORTLISTED", "Shortlisted"), ("REJECTED", "Rejected")], default="PENDING", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("applicant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="job_applications", to=settings.AUTH_USER_MODEL)),
                ("job_post", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="applications", to="jobs.jobpost")),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("job_post", "applicant"), name="unique_application_per_applicant"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JobApplicationEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("SHORTLISTED", "Shortlisted"), ("REJECTED", "Rejected")], max_length=20)),
                ("note", models.CharField(blank=True, max_length=255, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("application", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="events", to="jobs.jobapplication")),
            ],
            options={"ordering": ["created_at", "id"]},
        ),
    ]
