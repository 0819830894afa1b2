from functools import wraps

from django.http import JsonResponse


def api_login_required(view_func):
    """Like ``login_required`` but answers 401 JSON instead of redirecting."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return JsonResponse({"error": "Unauthorized"}, status=401)
        return view_func(request, *args, **kwargs)
    return _wrapped
