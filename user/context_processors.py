from api.dto import is_driver

from .session import display_name, get_session_user


def current_user(request):
    user = get_session_user(request)
    return {
        'current_user': user,
        'is_logged_in': bool(user),
        'current_user_name': display_name(user) if user else '',
        'current_user_is_driver': is_driver(user),
    }
