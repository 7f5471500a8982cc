"""Signed-in user state kept in the Django session.

The backend owns authentication; the client only remembers the user DTO that
``/user`` returned, next to the backend's cookies.
"""
from functools import wraps

from django.contrib import messages
from django.shortcuts import redirect

from api.dto import is_driver, user_name

SESSION_USER_KEY = 'safar_user'


def store_user(request, user):
    request.session[SESSION_USER_KEY] = user


def get_session_user(request):
    return request.session.get(SESSION_USER_KEY)


def clear_session_user(request):
    request.session.pop(SESSION_USER_KEY, None)


def is_logged_in(request):
    return bool(get_session_user(request))


def display_name(user):
    return user_name(user) or 'Unknown User'


def backend_login_required(view_func):
    """Send anonymous visitors to the login page."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not is_logged_in(request):
            messages.error(request, 'Please log in to continue.')
            return redirect('user:login')
        return view_func(request, *args, **kwargs)
    return _wrapped


def anonymous_required(view_func):
    """Send signed-in users straight to their trips."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if is_logged_in(request):
            return redirect('trip:trips')
        return view_func(request, *args, **kwargs)
    return _wrapped


def driver_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not is_driver(get_session_user(request)):
            messages.error(request, 'Only drivers can manage cabs.')
            return redirect('user:profile')
        return view_func(request, *args, **kwargs)
    return backend_login_required(_wrapped)
