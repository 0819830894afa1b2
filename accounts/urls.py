from django.urls import path
from . import views

urlpatterns = [
    path("notifications/", views.notifications_list, name="notifications_list"),
    path("notifications/mark-all-read/", views.notifications_mark_all_read, name="notifications_mark_all_read"),
    path("notifications/<int:notification_id>/read/", views.notification_mark_read, name="notification_mark_read"),
]
