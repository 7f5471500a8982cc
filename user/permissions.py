from rest_framework.permissions import BasePermission

from .session import is_logged_in


class IsBackendAuthenticated(BasePermission):
    """Allow JSON views only to visitors holding a backend session."""
    message = 'Please log in to continue.'

    def has_permission(self, request, view):
        return is_logged_in(request)
