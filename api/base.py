import logging
from typing import Any

from .client import BackendClient, BackendError, read_payload
from .envelope import ApiResponse, failure_from_error

logger = logging.getLogger(__name__)


class BackendResource:
    """Base for endpoint groups whose calls answer with bare DTOs rather than envelopes."""

    def __init__(self, client: BackendClient):
        self.client = client

    def _call(self, method: str, path: str, success_message: str, failure_message: str,
              json: Any = None) -> ApiResponse:
        """Make one backend call and wrap its body in an envelope.

        Errors never escape: the backend's message is reported when it sent one,
        otherwise ``failure_message``.
        """
        try:
            response = self.client.request(method, path, json=json)
        except BackendError as e:
            logger.error('%s %s failed: %s', method, path, e)
            return failure_from_error(e, failure_message)
        return ApiResponse.ok(success_message, read_payload(response))
