from django.urls import path
from . import views

urlpatterns = [
    path("posts/", views.job_posts, name="job_posts"),
    path("posts/<int:job_post_id>/", views.job_post_detail, name="job_post_detail"),
    path("posts/<int:job_post_id>/close/", views.close_job, name="close_job"),
    path("posts/<int:job_post_id>/reopen/", views.reopen_job, name="reopen_job"),
    path("posts/<int:job_post_id>/apply/", views.apply_job, name="apply_job"),
    path("posts/<int:job_post_id>/applicants/", views.applicants, name="job_applicants"),
    path(
        "posts/<int:job_post_id>/applications/<int:application_id>/",
        views.application_detail,
        name="application_detail",
    ),
]
