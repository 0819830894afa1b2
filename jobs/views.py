import json
import logging
from functools import wraps

from django.conf import settings
from django.core.paginator import Paginator
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from accounts.decorators import api_login_required
from .constants import ApplicationStatus
from .exceptions import InvalidRequest, JobsError, NotFound, Forbidden
from .forms import JobApplicationForm, JobPostForm
from .models import JobApplication, JobPost
from .serializers import serialize_application, serialize_job_post, serialize_user
from .services import (
    close_job_post,
    reopen_job_post,
    submit_application,
    transition_application_status,
)

logger = logging.getLogger(__name__)


def json_errors(failure_message):
    """Answer ``JobsError`` with its status code and anything else with a 500."""
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            try:
                return view_func(request, *args, **kwargs)
            except JobsError as exc:
                logger.info("%s: %s (%s)", view_func.__name__, exc.message, exc.status_code)
                return JsonResponse({"error": exc.message}, status=exc.status_code)
            except Exception:
                logger.exception("%s failed", view_func.__name__)
                return JsonResponse({"error": failure_message}, status=500)
        return _wrapped
    return decorator


def _json_body(request):
    try:
        body = json.loads(request.body or b"{}")
    except (TypeError, ValueError):
        raise InvalidRequest("Invalid JSON body") from None
    if not isinstance(body, dict):
        raise InvalidRequest("Invalid JSON body")
    return body


def _form_errors(form):
    return {field: [str(e) for e in errors] for field, errors in form.errors.items()}


def _owned_job_post(job_post_id, user):
    job_post = JobPost.objects.filter(id=job_post_id).first()
    if job_post is None:
        raise NotFound("Job post not found")
    if job_post.owner_id != user.id:
        raise Forbidden()
    return job_post


def _paginate(request, queryset, per_page):
    paginator = Paginator(queryset, per_page)
    page_obj = paginator.get_page(request.GET.get("page") or 1)
    meta = {
        "page": page_obj.number,
        "pages": paginator.num_pages,
        "total": paginator.count,
    }
    return page_obj, meta


# -----------------------------
# Job posts
# -----------------------------
@api_login_required
@require_http_methods(["GET", "POST"])
@json_errors("Failed to load job posts")
def job_posts(request):
    if request.method == "GET":
        qs = JobPost.objects.select_related("owner").recent()
        if request.GET.get("mine") == "1":
            qs = qs.for_owner(request.user)
        page_obj, meta = _paginate(request, qs, per_page=10)
        return JsonResponse({"jobPosts": [serialize_job_post(p) for p in page_obj.object_list], **meta})

    data = _json_body(request)
    requirements = data.get("requirements", data.get("jobRequirements"))
    if isinstance(requirements, (list, tuple)):
        data["requirements"] = "\n".join(str(r).strip() for r in requirements if str(r).strip())

    form = JobPostForm(data)
    if not form.is_valid():
        return JsonResponse({"error": "Invalid job post", "fields": _form_errors(form)}, status=400)

    job_post = form.save(commit=False)
    job_post.owner = request.user
    job_post.save()
    logger.info("Job post created: job_post_id=%s owner=%s", job_post.id, request.user.username)
    return JsonResponse(serialize_job_post(job_post), status=201)


@api_login_required
@require_GET
@json_errors("Failed to load job post")
def job_post_detail(request, job_post_id):
    job_post = JobPost.objects.select_related("owner").filter(id=job_post_id).first()
    if job_post is None:
        raise NotFound("Job post not found")
    application_status = (
        JobApplication.objects.for_job_post(job_post)
        .for_applicant(request.user)
        .values_list("status", flat=True)
        .first()
    )
    return JsonResponse(
        serialize_job_post(job_post, viewer=request.user, application_status=application_status)
    )


@api_login_required
@require_http_methods(["PATCH", "POST"])
@json_errors("Failed to close job")
def close_job(request, job_post_id):
    job_post = close_job_post(job_post_id, request.user)
    return JsonResponse(serialize_job_post(job_post))


@api_login_required
@require_http_methods(["PATCH", "POST"])
@json_errors("Failed to reopen job")
def reopen_job(request, job_post_id):
    job_post = reopen_job_post(job_post_id, request.user)
    return JsonResponse(serialize_job_post(job_post))


# -----------------------------
# Applying
# -----------------------------
@api_login_required
@require_POST
@json_errors("Failed to apply")
def apply_job(request, job_post_id):
    form = JobApplicationForm(request.POST, request.FILES)
    if not form.is_valid():
        if "resume" in form.errors:
            raise InvalidRequest(form.errors["resume"][0] if request.FILES.get("resume") else "Resume required")
        return JsonResponse({"error": "Invalid application", "fields": _form_errors(form)}, status=400)

    application = submit_application(
        job_post_id,
        request.user,
        resume=form.cleaned_data["resume"],
        resume_letter=form.cleaned_data.get("resume_letter"),
        expected_salary=form.cleaned_data.get("expected_salary"),
        availability=form.cleaned_data.get("availability"),
    )
    return JsonResponse({"success": True, "applicationId": application.id}, status=201)


# -----------------------------
# Owner: applicants + status changes
# -----------------------------
@api_login_required
@require_GET
@json_errors("Failed to fetch applicants")
def applicants(request, job_post_id):
    job_post = _owned_job_post(job_post_id, request.user)

    qs = JobApplication.objects.for_job_post(job_post).select_related("applicant").order_by("-created_at")
    status = (request.GET.get("status") or "ALL").strip().upper()
    if status != "ALL":
        if status not in ApplicationStatus.values:
            raise InvalidRequest(f"Unknown application status: {status}")
        qs = qs.filter(status=status)

    page_obj, meta = _paginate(request, qs, per_page=settings.JOBS_APPLICANT_PAGE_SIZE)
    items = []
    for application in page_obj.object_list:
        item = serialize_application(application)
        item["applicant"] = serialize_user(application.applicant)
        items.append(item)
    return JsonResponse({"jobPost": serialize_job_post(job_post), "applications": items, **meta})


@api_login_required
@require_http_methods(["GET", "PATCH"])
@json_errors("Failed to update application status")
def application_detail(request, job_post_id, application_id):
    _owned_job_post(job_post_id, request.user)

    if request.method == "PATCH":
        data = _json_body(request)
        application = transition_application_status(
            application_id,
            data.get("status"),
            job_post_id=job_post_id,
        )
        return JsonResponse(serialize_application(application))

    application = (
        JobApplication.objects.select_related("applicant")
        .prefetch_related("events")
        .filter(id=application_id)
        .first()
    )
    if application is None:
        raise NotFound("Application not found")
    if application.job_post_id != job_post_id:
        raise InvalidRequest()
    return JsonResponse(serialize_application(application, include_applicant=True, request=request))
