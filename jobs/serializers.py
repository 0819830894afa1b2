def _iso(value):
    return value.isoformat() if value else None


def serialize_user(user, *, include_contact=False):
    data = {
        "id": user.id,
        "username": user.username,
        "headline": user.headline,
        "location": user.location,
    }
    if include_contact:
        data["email"] = user.email
        data["phone"] = user.phone if user.phone_public else None
    return data


def serialize_job_post(job_post, *, viewer=None, application_status=None):
    data = {
        "id": job_post.id,
        "ownerId": job_post.owner_id,
        "title": job_post.title,
        "companyName": job_post.company_name,
        "location": job_post.location,
        "locationType": job_post.location_type or None,
        "employmentType": job_post.employment_type,
        "positionsAvailable": job_post.positions_available,
        "positionsFilled": job_post.positions_filled,
        "positionsRemaining": job_post.positions_remaining,
        "status": job_post.status,
        "displayStatus": job_post.display_status(),
        "salaryMin": job_post.salary_min,
        "salaryMax": job_post.salary_max,
        "salaryCurrency": job_post.salary_currency or None,
        "deadline": _iso(job_post.deadline),
        "jobDetails": job_post.details,
        "jobRequirements": job_post.requirements_list(),
        "allowExternalApply": job_post.allow_external_apply,
        "applyUrl": job_post.apply_url or None,
        "createdAt": _iso(job_post.created_at),
    }
    if viewer is not None:
        data["isOwner"] = viewer.is_authenticated and viewer.id == job_post.owner_id
        data["applicationStatus"] = application_status
    return data


def serialize_application(application, *, include_applicant=False, request=None):
    data = {
        "id": application.id,
        "jobPostId": application.job_post_id,
        "applicantId": application.applicant_id,
        "status": application.status,
        "resumeLetter": application.resume_letter,
        "expectedSalary": application.expected_salary,
        "availability": application.availability,
        "createdAt": _iso(application.created_at),
        "updatedAt": _iso(application.updated_at),
    }
    if include_applicant:
        data["applicant"] = serialize_user(application.applicant, include_contact=True)
        resume_url = application.resume.url if application.resume else None
        if resume_url and request is not None:
            resume_url = request.build_absolute_uri(resume_url)
        data["resumeUrl"] = resume_url
        data["events"] = [
            {"status": e.status, "note": e.note, "createdAt": _iso(e.created_at)}
            for e in application.events.all()
        ]
    return data
