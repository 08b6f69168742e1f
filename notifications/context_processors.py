from .services import unread_count


def unread_notifications(request):
    """Expose the unread badge count to every template."""

    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return {"unread_notification_count": 0}
    return {"unread_notification_count": unread_count(user)}
