"""Thin wrappers around the Safar backend's REST endpoints."""

from .client import BackendClient, BackendError
from .envelope import ApiResponse

__all__ = ('BackendClient', 'BackendError', 'ApiResponse')
