import logging

from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from .decorators import api_login_required
from .models import Notification

logger = logging.getLogger(__name__)


@api_login_required
@require_GET
def notifications_list(request):
    qs = Notification.objects.for_user(request.user)
    unread = qs.unread().count()
    recent = [n.to_dict() for n in qs[:50]]
    return JsonResponse({"notifications": recent, "unread": unread})


@api_login_required
@require_POST
def notification_mark_read(request, notification_id):
    notif = Notification.objects.for_user(request.user).filter(id=notification_id).first()
    if notif is None:
        return JsonResponse({"error": "Not found"}, status=404)
    notif.is_read = True
    notif.save(update_fields=["is_read"])
    return JsonResponse(notif.to_dict())


@api_login_required
@require_POST
def notifications_mark_all_read(request):
    updated = Notification.objects.for_user(request.user).unread().update(is_read=True)
    logger.info("Notifications marked read: user=%s count=%s", request.user.username, updated)
    return JsonResponse({"updated": updated})
