import re

from django import forms
from django.conf import settings

from .models import JobPost

_HTTP_URL_RE = re.compile(r"^https?://.+", re.IGNORECASE)


class JobPostForm(forms.ModelForm):
    class Meta:
        model = JobPost
        fields = [
            "title",
            "company_name",
            "location",
            "location_type",
            "employment_type",
            "positions_available",
            "salary_min",
            "salary_max",
            "salary_currency",
            "deadline",
            "details",
            "requirements",
            "allow_external_apply",
            "apply_url",
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["positions_available"].required = False
        self.fields["employment_type"].required = False

    def clean_positions_available(self):
        value = self.cleaned_data.get("positions_available")
        return 1 if value is None else value

    def clean_employment_type(self):
        return self.cleaned_data.get("employment_type") or JobPost._meta.get_field("employment_type").default

    def clean_salary_currency(self):
        return (self.cleaned_data.get("salary_currency") or "").strip().upper()

    def clean(self):
        cleaned = super().clean()
        salary_min = cleaned.get("salary_min")
        salary_max = cleaned.get("salary_max")
        if salary_min is not None and salary_max is not None and salary_min > salary_max:
            self.add_error("salary_max", "Maximum salary must be greater than or equal to minimum salary.")

        if cleaned.get("allow_external_apply"):
            apply_url = cleaned.get("apply_url") or ""
            if not _HTTP_URL_RE.match(apply_url):
                self.add_error("apply_url", "Valid apply URL required when external apply is enabled")
        return cleaned


class JobApplicationForm(forms.Form):
    resume = forms.FileField()
    resume_letter = forms.CharField(required=False, widget=forms.Textarea)
    expected_salary = forms.IntegerField(required=False, min_value=0)
    availability = forms.CharField(required=False, max_length=255)

    def clean_resume(self):
        resume = self.cleaned_data["resume"]
        allowed = getattr(settings, "JOBS_RESUME_CONTENT_TYPES", [])
        if getattr(resume, "content_type", None) not in allowed:
            raise forms.ValidationError("Invalid file type")
        if resume.size > settings.JOBS_RESUME_MAX_BYTES:
            raise forms.ValidationError("File too large")
        return resume
