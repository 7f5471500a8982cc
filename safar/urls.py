"""
URL configuration for the Safar web client.

Every page talks to the Safar backend through the `api` package; this project
keeps no records of its own.
"""

from django.urls import path, include, re_path
from django.conf import settings
import os
from django.views.static import serve

urlpatterns = [
    path('trips/', include('trip.urls')),  # Handles all URLs starting with /trips/
    path('', include('user.urls')),  # Landing, auth, profile and cab pages
]

# Development helper: serve static files directly from the `static/` dirs when
# DEBUG=True or when the environment variable SERVE_STATIC_ALWAYS=true. This
# avoids running `collectstatic` for quick local testing. Do NOT enable this
# in production.
if settings.DEBUG or os.environ.get('SERVE_STATIC_ALWAYS', '').lower() == 'true':
    docroot = settings.STATICFILES_DIRS[0] if getattr(settings, 'STATICFILES_DIRS', None) else settings.STATIC_ROOT
    urlpatterns += [
        re_path(r'^static/(?P<path>.*)$', serve, {'document_root': docroot}),
    ]
