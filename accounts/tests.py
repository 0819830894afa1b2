from django.test import TestCase
from django.urls import reverse

from .models import User, Notification


class NotificationApiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="u1", password="pass", email="u1@example.com")
        self.other = User.objects.create_user(username="u2", password="pass", email="u2@example.com")
        self.first = Notification.objects.create(user=self.user, title="First")
        self.second = Notification.objects.create(user=self.user, title="Second")
        Notification.objects.create(user=self.other, title="Not yours")

    def test_requires_login(self):
        resp = self.client.get(reverse("notifications_list"))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Unauthorized"})

    def test_list_only_own_notifications(self):
        self.client.force_login(self.user)
        data = self.client.get(reverse("notifications_list")).json()
        self.assertEqual(data["unread"], 2)
        self.assertEqual({n["title"] for n in data["notifications"]}, {"First", "Second"})

    def test_mark_read(self):
        self.client.force_login(self.user)
        resp = self.client.post(reverse("notification_mark_read", args=[self.first.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["isRead"])
        self.first.refresh_from_db()
        self.assertTrue(self.first.is_read)

    def test_cannot_mark_someone_elses_notification(self):
        self.client.force_login(self.other)
        resp = self.client.post(reverse("notification_mark_read", args=[self.first.id]))
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Not found"})
        self.first.refresh_from_db()
        self.assertFalse(self.first.is_read)

    def test_mark_all_read(self):
        self.client.force_login(self.user)
        resp = self.client.post(reverse("notifications_mark_all_read"))
        self.assertEqual(resp.json(), {"updated": 2})
        self.assertFalse(Notification.objects.for_user(self.user).unread().exists())
        self.assertTrue(Notification.objects.for_user(self.other).unread().exists())
