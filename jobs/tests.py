import json
import random
import threading
import time
from datetime import timedelta
from collections import defaultdict
from contextlib import contextmanager
from types import SimpleNamespace
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError, connection
from django.test import SimpleTestCase, TestCase, TransactionTestCase, override_settings, skipUnlessDBFeature
from django.urls import reverse
from django.utils import timezone

from accounts.models import User, Notification
from .constants import ApplicationStatus, JobPostStatus
from .exceptions import CapacityExceeded, InvalidRequest, NotFound, StorageFailure
from .models import JobApplication, JobApplicationEvent, JobPost
from .services import close_job_post, reopen_job_post, transition_application_status
from .store import ApplicationStore
from .transitions import capacity_delta, derive_post_status, parse_status, plan_transition
from .utils import record_application_event

PENDING = ApplicationStatus.PENDING
SHORTLISTED = ApplicationStatus.SHORTLISTED
REJECTED = ApplicationStatus.REJECTED


class TransitionTableTests(SimpleTestCase):
    def test_capacity_delta_table(self):
        self.assertEqual(capacity_delta(PENDING, SHORTLISTED), 1)
        self.assertEqual(capacity_delta(REJECTED, SHORTLISTED), 1)
        self.assertEqual(capacity_delta(SHORTLISTED, REJECTED), -1)
        self.assertEqual(capacity_delta(SHORTLISTED, SHORTLISTED), 0)
        self.assertEqual(capacity_delta(SHORTLISTED, PENDING), 0)
        self.assertEqual(capacity_delta(PENDING, REJECTED), 0)
        self.assertEqual(capacity_delta(REJECTED, PENDING), 0)

    def test_derive_post_status(self):
        self.assertEqual(derive_post_status(JobPostStatus.OPEN, 2, 2), JobPostStatus.FILLED)
        self.assertEqual(derive_post_status(JobPostStatus.FILLED, 1, 2), JobPostStatus.OPEN)
        self.assertEqual(derive_post_status(JobPostStatus.OPEN, 1, 2), JobPostStatus.OPEN)
        self.assertEqual(derive_post_status(JobPostStatus.CLOSED, 2, 2), JobPostStatus.CLOSED)
        self.assertEqual(derive_post_status(JobPostStatus.CLOSED, 0, 2), JobPostStatus.CLOSED)

    def test_shortlist_without_room_raises(self):
        with self.assertRaises(CapacityExceeded):
            plan_transition(PENDING, SHORTLISTED, positions_filled=1, positions_available=1, post_status=JobPostStatus.FILLED)

    def test_shortlist_fills_last_position(self):
        plan = plan_transition(PENDING, SHORTLISTED, positions_filled=0, positions_available=1, post_status=JobPostStatus.OPEN)
        self.assertEqual(plan.delta, 1)
        self.assertEqual(plan.positions_filled, 1)
        self.assertEqual(plan.post_status, JobPostStatus.FILLED)

    def test_reject_never_checks_capacity(self):
        plan = plan_transition(SHORTLISTED, REJECTED, positions_filled=1, positions_available=1, post_status=JobPostStatus.FILLED)
        self.assertEqual(plan.delta, -1)
        self.assertEqual(plan.positions_filled, 0)
        self.assertEqual(plan.post_status, JobPostStatus.OPEN)

    def test_same_status_is_a_no_op_even_when_full(self):
        plan = plan_transition(SHORTLISTED, SHORTLISTED, positions_filled=1, positions_available=1, post_status=JobPostStatus.FILLED)
        self.assertEqual(plan.delta, 0)
        self.assertEqual(plan.positions_filled, 1)
        self.assertFalse(plan.changes_status)

    def test_parse_status(self):
        self.assertEqual(parse_status("shortlisted"), SHORTLISTED)
        self.assertEqual(parse_status(" REJECTED "), REJECTED)
        for bad in (None, "", "HIRED", 3):
            with self.assertRaises(InvalidRequest):
                parse_status(bad)


class InMemoryStore(ApplicationStore):
    """Keeps records as plain objects so the service can run without a database."""

    def __init__(self, applications, postings):
        self.applications = applications
        self.postings = postings
        self.callbacks = []
        self._locks = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()
        self._held = threading.local()
        self.write_delay = 0

    @contextmanager
    def atomic(self):
        self._held.locks = []
        try:
            yield
        finally:
            for lock in reversed(self._held.locks):
                lock.release()
            self._held.locks = []

    def _lock(self, key):
        with self._locks_guard:
            lock = self._locks[key]
        lock.acquire()
        self._held.locks.append(lock)

    def get_application_for_update(self, application_id):
        if application_id not in self.applications:
            raise NotFound("Application not found")
        self._lock(("application", application_id))
        return self.applications[application_id]

    def get_posting_for_update(self, job_post_id):
        if job_post_id not in self.postings:
            raise NotFound("Job post not found")
        self._lock(("posting", job_post_id))
        return self.postings[job_post_id]

    def apply_transition(self, application, posting, plan):
        if self.write_delay:
            time.sleep(self.write_delay)
        application.status = plan.requested_status
        posting.positions_filled = plan.positions_filled
        posting.status = plan.post_status
        return application

    def on_commit(self, callback):
        self.callbacks.append(callback)


class TransitionServiceWithoutDatabaseTests(SimpleTestCase):
    def setUp(self):
        self.posting = SimpleNamespace(id=7, positions_available=1, positions_filled=0, status=JobPostStatus.OPEN)
        self.app_a = SimpleNamespace(id=1, job_post_id=7, status=PENDING)
        self.app_b = SimpleNamespace(id=2, job_post_id=7, status=PENDING)
        self.store = InMemoryStore({1: self.app_a, 2: self.app_b}, {7: self.posting})

    def test_shortlist_then_full(self):
        transition_application_status(1, "SHORTLISTED", store=self.store)
        self.assertEqual(self.posting.positions_filled, 1)
        self.assertEqual(self.posting.status, JobPostStatus.FILLED)
        self.assertEqual(len(self.store.callbacks), 1)

        with self.assertRaises(CapacityExceeded):
            transition_application_status(2, "SHORTLISTED", store=self.store)
        self.assertEqual(self.app_b.status, PENDING)
        self.assertEqual(self.posting.positions_filled, 1)

    def test_missing_posting_is_not_found(self):
        orphan = SimpleNamespace(id=3, job_post_id=99, status=PENDING)
        self.store.applications[3] = orphan
        with self.assertRaises(NotFound):
            transition_application_status(3, "SHORTLISTED", store=self.store)
        self.assertEqual(orphan.status, PENDING)

    def test_missing_application_is_not_found(self):
        with self.assertRaises(NotFound):
            transition_application_status(404, "REJECTED", store=self.store)

    def test_wrong_job_post_is_invalid(self):
        with self.assertRaises(InvalidRequest):
            transition_application_status(1, "SHORTLISTED", job_post_id=8, store=self.store)
        self.assertEqual(self.posting.positions_filled, 0)

    def test_two_concurrent_shortlists_only_one_wins(self):
        self.store.write_delay = 0.05
        barrier = threading.Barrier(2)
        results = []

        def shortlist(application_id):
            barrier.wait()
            try:
                transition_application_status(application_id, "SHORTLISTED", store=self.store)
                results.append("ok")
            except CapacityExceeded:
                results.append("full")
            except Exception as exc:
                results.append(repr(exc))

        threads = [threading.Thread(target=shortlist, args=(app_id,)) for app_id in (1, 2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        self.assertEqual(sorted(results), ["full", "ok"])
        self.assertEqual(self.posting.positions_filled, 1)
        self.assertEqual(self.posting.status, JobPostStatus.FILLED)
        self.assertEqual([a.status for a in (self.app_a, self.app_b)].count(SHORTLISTED), 1)
        self.assertEqual(len(self.store.callbacks), 1)


def _make_user(username):
    return User.objects.create_user(username=username, password="pass", email=f"{username}@example.com")


def _make_post(owner, **extra):
    defaults = {"title": "Backend Developer", "company_name": "ACME", "positions_available": 1}
    defaults.update(extra)
    return JobPost.objects.create(owner=owner, **defaults)


def _make_application(job_post, applicant, status=PENDING):
    return JobApplication.objects.create(job_post=job_post, applicant=applicant, resume="resumes/test.pdf", status=status)


class TransitionServiceTests(TestCase):
    def setUp(self):
        self.owner = _make_user("owner")
        self.post = _make_post(self.owner)
        self.app_a = _make_application(self.post, _make_user("alice"))
        self.app_b = _make_application(self.post, _make_user("bob"))

    def _reload(self):
        self.post.refresh_from_db()
        self.app_a.refresh_from_db()
        self.app_b.refresh_from_db()

    def test_single_position_scenario(self):
        transition_application_status(self.app_a.id, SHORTLISTED)
        self._reload()
        self.assertEqual(self.post.positions_filled, 1)
        self.assertEqual(self.post.status, JobPostStatus.FILLED)

        with self.assertRaises(CapacityExceeded):
            transition_application_status(self.app_b.id, SHORTLISTED)
        self._reload()
        self.assertEqual(self.app_b.status, PENDING)
        self.assertEqual(self.post.positions_filled, 1)
        self.assertEqual(self.post.status, JobPostStatus.FILLED)

        transition_application_status(self.app_a.id, REJECTED)
        self._reload()
        self.assertEqual(self.post.positions_filled, 0)
        self.assertEqual(self.post.status, JobPostStatus.OPEN)

        transition_application_status(self.app_b.id, SHORTLISTED)
        self._reload()
        self.assertEqual(self.app_b.status, SHORTLISTED)
        self.assertEqual(self.post.positions_filled, 1)
        self.assertEqual(self.post.status, JobPostStatus.FILLED)

    def test_same_status_twice_keeps_count(self):
        transition_application_status(self.app_a.id, SHORTLISTED)
        transition_application_status(self.app_a.id, SHORTLISTED)
        self._reload()
        self.assertEqual(self.post.positions_filled, 1)
        self.assertEqual(self.app_a.events.count(), 1)

    def test_closed_post_never_changes_status(self):
        self.post.status = JobPostStatus.CLOSED
        self.post.save(update_fields=["status"])

        transition_application_status(self.app_a.id, SHORTLISTED)
        self._reload()
        self.assertEqual(self.post.positions_filled, 1)
        self.assertEqual(self.post.status, JobPostStatus.CLOSED)

        transition_application_status(self.app_a.id, REJECTED)
        self._reload()
        self.assertEqual(self.post.positions_filled, 0)
        self.assertEqual(self.post.status, JobPostStatus.CLOSED)

    def test_unknown_application(self):
        with self.assertRaises(NotFound):
            transition_application_status(999_999, SHORTLISTED)

    def test_status_change_is_recorded_on_timeline(self):
        transition_application_status(self.app_a.id, SHORTLISTED)
        event = JobApplicationEvent.objects.get(application=self.app_a)
        self.assertEqual(event.status, SHORTLISTED)
        self.assertIn("PENDING to SHORTLISTED", event.note)

    def test_status_change_goes_through_timeline_helper(self):
        with mock.patch("jobs.store.record_application_event", wraps=record_application_event) as record:
            transition_application_status(self.app_a.id, SHORTLISTED)
            transition_application_status(self.app_a.id, SHORTLISTED)
        record.assert_called_once()
        self.assertEqual(record.call_args.args[:2], (self.app_a, SHORTLISTED))
        self.assertEqual(JobApplicationEvent.objects.filter(application=self.app_a).count(), 1)

    def test_applicant_notified_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            transition_application_status(self.app_a.id, SHORTLISTED)
        self.assertEqual(len(callbacks), 1)
        self.assertTrue(
            Notification.objects.filter(user=self.app_a.applicant, title__icontains="shortlisted").exists()
        )

    def test_storage_failure_rolls_back_everything(self):
        with mock.patch("jobs.models.JobApplicationEvent.objects.create", side_effect=DatabaseError("disk full")):
            with self.assertRaises(StorageFailure):
                transition_application_status(self.app_a.id, SHORTLISTED)
        self._reload()
        self.assertEqual(self.app_a.status, PENDING)
        self.assertEqual(self.post.positions_filled, 0)
        self.assertEqual(self.post.status, JobPostStatus.OPEN)

    def test_capacity_invariant_holds_for_random_sequences(self):
        post = _make_post(self.owner, title="Two seats", positions_available=2)
        apps = [_make_application(post, _make_user(f"cand{i}")) for i in range(5)]
        rnd = random.Random(7)
        statuses = [PENDING, SHORTLISTED, REJECTED]
        for _ in range(80):
            try:
                transition_application_status(rnd.choice(apps).id, rnd.choice(statuses))
            except CapacityExceeded:
                pass
            post.refresh_from_db()
            self.assertGreaterEqual(post.positions_filled, 0)
            self.assertLessEqual(post.positions_filled, post.positions_available)
            if post.positions_filled >= post.positions_available:
                self.assertEqual(post.status, JobPostStatus.FILLED)
            else:
                self.assertEqual(post.status, JobPostStatus.OPEN)


class CloseReopenTests(TestCase):
    def setUp(self):
        self.owner = _make_user("owner")
        self.other = _make_user("other")
        self.post = _make_post(self.owner)
        self.client.force_login(self.owner)

    def test_close_then_reopen(self):
        resp = self.client.patch(reverse("close_job", args=[self.post.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "CLOSED")

        resp = self.client.patch(reverse("reopen_job", args=[self.post.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "OPEN")

    def test_reopen_full_post_comes_back_filled(self):
        app = _make_application(self.post, self.other)
        transition_application_status(app.id, SHORTLISTED)
        close_job_post(self.post.id, self.owner)
        post = reopen_job_post(self.post.id, self.owner)
        self.assertEqual(post.status, JobPostStatus.FILLED)

    def test_only_owner_can_close(self):
        self.client.force_login(self.other)
        resp = self.client.patch(reverse("close_job", args=[self.post.id]))
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json(), {"error": "Forbidden"})
        self.post.refresh_from_db()
        self.assertEqual(self.post.status, JobPostStatus.OPEN)


class ApplicationStatusApiTests(TestCase):
    def setUp(self):
        self.owner = _make_user("owner")
        self.post = _make_post(self.owner)
        self.alice = _make_user("alice")
        self.bob = _make_user("bob")
        self.app_a = _make_application(self.post, self.alice)
        self.app_b = _make_application(self.post, self.bob)

    def _patch(self, application, body, post=None):
        url = reverse("application_detail", args=[(post or self.post).id, application.id])
        return self.client.patch(url, data=json.dumps(body), content_type="application/json")

    def test_owner_shortlists(self):
        self.client.force_login(self.owner)
        resp = self._patch(self.app_a, {"status": "SHORTLISTED"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["status"], "SHORTLISTED")
        self.assertEqual(data["id"], self.app_a.id)

    def test_full_post_answers_400(self):
        self.client.force_login(self.owner)
        self._patch(self.app_a, {"status": "SHORTLISTED"})
        resp = self._patch(self.app_b, {"status": "SHORTLISTED"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("filled", resp.json()["error"])

    def test_missing_or_unknown_status(self):
        self.client.force_login(self.owner)
        self.assertEqual(self._patch(self.app_a, {}).status_code, 400)
        self.assertEqual(self._patch(self.app_a, {"status": "HIRED"}).status_code, 400)
        resp = self.client.patch(
            reverse("application_detail", args=[self.post.id, self.app_a.id]),
            data="not json",
            content_type="application/json",
        )
        self.assertEqual(resp.status_code, 400)

    def test_not_owner_is_forbidden(self):
        self.client.force_login(self.alice)
        resp = self._patch(self.app_b, {"status": "SHORTLISTED"})
        self.assertEqual(resp.status_code, 403)
        self.app_b.refresh_from_db()
        self.assertEqual(self.app_b.status, PENDING)

    def test_anonymous_is_unauthorized(self):
        resp = self._patch(self.app_a, {"status": "SHORTLISTED"})
        self.assertEqual(resp.status_code, 401)

    def test_unknown_application_is_404(self):
        self.client.force_login(self.owner)
        url = reverse("application_detail", args=[self.post.id, 999_999])
        resp = self.client.patch(url, data=json.dumps({"status": "REJECTED"}), content_type="application/json")
        self.assertEqual(resp.status_code, 404)

    def test_application_under_other_post_is_400(self):
        other_post = _make_post(self.owner, title="Other role")
        self.client.force_login(self.owner)
        resp = self._patch(self.app_a, {"status": "SHORTLISTED"}, post=other_post)
        self.assertEqual(resp.status_code, 400)
        self.post.refresh_from_db()
        self.assertEqual(self.post.positions_filled, 0)

    def test_owner_reads_application_detail(self):
        transition_application_status(self.app_a.id, SHORTLISTED)
        self.client.force_login(self.owner)
        resp = self.client.get(reverse("application_detail", args=[self.post.id, self.app_a.id]))
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["applicant"]["username"], "alice")
        self.assertEqual([e["status"] for e in data["events"]], ["SHORTLISTED"])
        self.assertTrue(data["resumeUrl"].endswith("resumes/test.pdf"))

    def test_applicants_list_filters_by_status(self):
        transition_application_status(self.app_a.id, SHORTLISTED)
        self.client.force_login(self.owner)
        resp = self.client.get(reverse("job_applicants", args=[self.post.id]), {"status": "shortlisted"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual([a["id"] for a in data["applications"]], [self.app_a.id])
        self.assertEqual(data["jobPost"]["positionsRemaining"], 0)

        resp = self.client.get(reverse("job_applicants", args=[self.post.id]))
        self.assertEqual(resp.json()["total"], 2)

    def test_applicants_list_owner_only(self):
        self.client.force_login(self.bob)
        resp = self.client.get(reverse("job_applicants", args=[self.post.id]))
        self.assertEqual(resp.status_code, 403)
        resp = self.client.get(reverse("job_applicants", args=[999_999]))
        self.assertEqual(resp.status_code, 404)


class ApplyTests(TestCase):
    def setUp(self):
        self.owner = _make_user("owner")
        self.seeker = _make_user("seeker")
        self.post = _make_post(self.owner, positions_available=2)
        self.client.force_login(self.seeker)

    def _resume(self, name="cv.pdf", content=b"%PDF-1.4 demo", content_type="application/pdf"):
        return SimpleUploadedFile(name, content, content_type=content_type)

    def _apply(self, **fields):
        data = {"resume": self._resume(), "resume_letter": "Hello", "expected_salary": "50000"}
        data.update(fields)
        return self.client.post(reverse("apply_job", args=[self.post.id]), data)

    def test_apply_creates_pending_application(self):
        with self.captureOnCommitCallbacks(execute=True):
            resp = self._apply()
        self.assertEqual(resp.status_code, 201)
        app = JobApplication.objects.get(id=resp.json()["applicationId"])
        self.assertEqual(app.status, PENDING)
        self.assertEqual(app.expected_salary, 50000)
        self.assertEqual(app.events.get().status, PENDING)
        self.assertTrue(Notification.objects.filter(user=self.owner, title__icontains="New application").exists())

    def test_second_application_rejected(self):
        self._apply()
        resp = self._apply()
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Already applied")
        self.assertEqual(JobApplication.objects.count(), 1)

    def test_resume_required_and_validated(self):
        resp = self.client.post(reverse("apply_job", args=[self.post.id]), {"resume_letter": "Hi"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Resume required")

        resp = self._apply(resume=self._resume(name="cv.png", content_type="image/png"))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Invalid file type")

    @override_settings(JOBS_RESUME_MAX_BYTES=4)
    def test_resume_too_large(self):
        resp = self._apply()
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "File too large")

    def test_closed_or_expired_post_rejects_applications(self):
        self.post.status = JobPostStatus.CLOSED
        self.post.save(update_fields=["status"])
        self.assertEqual(self._apply().status_code, 400)

        self.post.status = JobPostStatus.OPEN
        self.post.deadline = timezone.now() - timedelta(days=1)
        self.post.save(update_fields=["status", "deadline"])
        resp = self._apply()
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "This job is not accepting applications")

    def test_owner_cannot_apply(self):
        self.client.force_login(self.owner)
        self.assertEqual(self._apply().status_code, 400)

    def test_unknown_post(self):
        resp = self.client.post(reverse("apply_job", args=[999_999]), {"resume": self._resume()})
        self.assertEqual(resp.status_code, 404)


class JobPostApiTests(TestCase):
    def setUp(self):
        self.owner = _make_user("owner")
        self.client.force_login(self.owner)

    def _create(self, **fields):
        body = {"title": "Data Analyst", "employment_type": "FULL_TIME"}
        body.update(fields)
        return self.client.post(reverse("job_posts"), data=json.dumps(body), content_type="application/json")

    def test_create_defaults(self):
        resp = self._create(requirements=["SQL", "Python", " "])
        self.assertEqual(resp.status_code, 201)
        data = resp.json()
        self.assertEqual(data["status"], "OPEN")
        self.assertEqual(data["positionsAvailable"], 1)
        self.assertEqual(data["positionsFilled"], 0)
        self.assertEqual(data["jobRequirements"], ["SQL", "Python"])
        self.assertEqual(JobPost.objects.get().owner, self.owner)

    def test_create_validation(self):
        resp = self._create(positions_available=0)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("positions_available", resp.json()["fields"])

        resp = self._create(salary_min=90000, salary_max=50000)
        self.assertIn("salary_max", resp.json()["fields"])

        resp = self._create(allow_external_apply=True, apply_url="")
        self.assertIn("apply_url", resp.json()["fields"])

        resp = self._create(title="")
        self.assertIn("title", resp.json()["fields"])
        self.assertEqual(JobPost.objects.count(), 0)

    def test_detail_shows_viewer_state(self):
        post = _make_post(self.owner, positions_available=3, deadline=timezone.now() - timedelta(hours=1))
        seeker = _make_user("seeker")
        _make_application(post, seeker)

        self.client.force_login(seeker)
        data = self.client.get(reverse("job_post_detail", args=[post.id])).json()
        self.assertEqual(data["status"], "OPEN")
        self.assertEqual(data["displayStatus"], "CLOSED")
        self.assertEqual(data["positionsRemaining"], 3)
        self.assertFalse(data["isOwner"])
        self.assertEqual(data["applicationStatus"], "PENDING")

    def test_list_mine(self):
        _make_post(self.owner, title="Mine")
        _make_post(_make_user("someone"), title="Theirs")
        data = self.client.get(reverse("job_posts"), {"mine": "1"}).json()
        self.assertEqual([p["title"] for p in data["jobPosts"]], ["Mine"])


class JobPostAdminTests(TestCase):
    def setUp(self):
        self.admin_user = User.objects.create_superuser(username="admin", password="pass", email="admin@example.com")
        self.client.force_login(self.admin_user)
        self.post = _make_post(_make_user("owner"), positions_available=2)
        self.application = _make_application(self.post, _make_user("alice"))
        transition_application_status(self.application.id, SHORTLISTED)

    def _change_form(self, **overrides):
        data = {
            "owner": self.post.owner_id,
            "title": self.post.title,
            "company_name": self.post.company_name,
            "location": "",
            "location_type": "",
            "employment_type": self.post.employment_type,
            "positions_available": 1,
            "salary_min": "",
            "salary_max": "",
            "salary_currency": "",
            "deadline_0": "",
            "deadline_1": "",
            "details": "",
            "requirements": "",
            "apply_url": "",
            "applications-TOTAL_FORMS": 1,
            "applications-INITIAL_FORMS": 1,
            "applications-MIN_NUM_FORMS": 0,
            "applications-MAX_NUM_FORMS": 1000,
            "applications-0-id": self.application.id,
            "applications-0-job_post": self.post.id,
            "_save": "Save",
        }
        data.update(overrides)
        return data

    def test_capacity_cannot_be_edited_after_creation(self):
        url = reverse("admin:jobs_jobpost_change", args=[self.post.id])
        resp = self.client.post(url, self._change_form(title="Renamed"))
        self.assertEqual(resp.status_code, 302)

        self.post.refresh_from_db()
        self.assertEqual(self.post.title, "Renamed")
        self.assertEqual(self.post.positions_available, 2)
        self.assertEqual(self.post.positions_filled, 1)
        self.assertEqual(self.post.status, JobPostStatus.OPEN)

    def test_capacity_is_editable_when_adding(self):
        resp = self.client.get(reverse("admin:jobs_jobpost_add"))
        self.assertContains(resp, 'name="positions_available"')
        resp = self.client.get(reverse("admin:jobs_jobpost_change", args=[self.post.id]))
        self.assertNotContains(resp, 'name="positions_available"')


@skipUnlessDBFeature("has_select_for_update")
class ConcurrentShortlistTests(TransactionTestCase):
    def test_only_one_of_two_concurrent_shortlists_wins(self):
        owner = _make_user("owner")
        post = _make_post(owner, positions_available=1)
        apps = [_make_application(post, _make_user(name)) for name in ("alice", "bob")]

        barrier = threading.Barrier(len(apps))
        results = []

        def shortlist(application_id):
            try:
                barrier.wait()
                transition_application_status(application_id, SHORTLISTED)
                results.append("ok")
            except CapacityExceeded:
                results.append("full")
            finally:
                connection.close()

        threads = [threading.Thread(target=shortlist, args=(app.id,)) for app in apps]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        self.assertEqual(sorted(results), ["full", "ok"])
        post.refresh_from_db()
        self.assertEqual(post.positions_filled, 1)
        self.assertEqual(post.status, JobPostStatus.FILLED)
        self.assertEqual(JobApplication.objects.filter(job_post=post, status=SHORTLISTED).count(), 1)
