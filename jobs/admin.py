from django.contrib import admin

from .models import JobPost, JobApplication, JobApplicationEvent


class JobApplicationInline(admin.TabularInline):
    model = JobApplication
    extra = 0
    fields = ("applicant", "status", "created_at")
    readonly_fields = ("applicant", "status", "created_at")
    can_delete = False


@admin.register(JobPost)
class JobPostAdmin(admin.ModelAdmin):
    list_display = ("title", "owner", "status", "positions_filled", "positions_available", "created_at")
    list_filter = ("status", "employment_type", "location_type")
    search_fields = ("title", "company_name", "owner__username")
    # capacity and status only move through jobs.services
    readonly_fields = ("positions_filled", "status")
    inlines = [JobApplicationInline]

    def get_readonly_fields(self, request, obj=None):
        fields = super().get_readonly_fields(request, obj)
        if obj is not None:
            # positions_available is fixed once the post exists
            fields = (*fields, "positions_available")
        return fields


@admin.register(JobApplication)
class JobApplicationAdmin(admin.ModelAdmin):
    list_display = ("job_post", "applicant", "status", "created_at")
    list_filter = ("status",)
    readonly_fields = ("status",)


admin.site.register(JobApplicationEvent)
