import logging
from typing import Any, Dict, Optional
from urllib.parse import unquote

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

# Django session key holding the backend's cookie jar for the signed-in user
COOKIE_SESSION_KEY = 'backend_cookies'
XSRF_COOKIE = 'XSRF-TOKEN'
XSRF_HEADER = 'X-XSRF-TOKEN'


class BackendError(Exception):
    """Raised when the Safar backend is unreachable or answers with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def backend_message(self) -> Optional[str]:
        """The ``message`` field of the backend's error body, if it sent one."""
        if isinstance(self.payload, dict):
            message = self.payload.get('message')
            if message:
                return str(message)
        return None

    @classmethod
    def from_response(cls, response: requests.Response) -> 'BackendError':
        payload = read_payload(response)
        error = cls(
            f'{response.request.method if response.request else "HTTP"} {response.url} '
            f'returned {response.status_code}',
            status_code=response.status_code,
            payload=payload,
        )
        if error.backend_message:
            error.message = error.backend_message
        return error


def read_payload(response: requests.Response) -> Any:
    """Return the decoded JSON body, else the text body, else None."""
    try:
        return response.json()
    except ValueError:
        text = response.text
        return text if text else None


class BackendClient:
    """Cookie-carrying HTTP client for the Safar backend.

    The backend authenticates with a session cookie and protects writes with an
    ``XSRF-TOKEN`` cookie that must be echoed back as the ``X-XSRF-TOKEN`` header.
    When built with :meth:`for_request` the cookie jar is round-tripped through
    the user's Django session so it survives between page views.
    """

    def __init__(self, base_url: Optional[str] = None, cookies: Optional[Dict[str, str]] = None,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.SAFAR_API_BASE_URL).rstrip('/')
        self.timeout = timeout or settings.SAFAR_API_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })
        if cookies:
            self.session.cookies.update(cookies)
        self._django_session = None

    @classmethod
    def for_request(cls, request) -> 'BackendClient':
        client = cls(cookies=request.session.get(COOKIE_SESSION_KEY))
        client._django_session = request.session
        return client

    def cookie_dict(self) -> Dict[str, str]:
        return requests.utils.dict_from_cookiejar(self.session.cookies)

    def clear_cookies(self) -> None:
        self.session.cookies.clear()
        if self._django_session is not None:
            self._django_session.pop(COOKIE_SESSION_KEY, None)

    def _persist_cookies(self) -> None:
        if self._django_session is not None:
            self._django_session[COOKIE_SESSION_KEY] = self.cookie_dict()

    def _xsrf_headers(self) -> Dict[str, str]:
        token = self.cookie_dict().get(XSRF_COOKIE)
        if token:
            return {XSRF_HEADER: unquote(token)}
        return {}

    def request(self, method: str, path: str, json: Any = None, **kwargs) -> requests.Response:
        url = f'{self.base_url}{path}'
        headers = self._xsrf_headers()
        headers.update(kwargs.pop('headers', None) or {})

        logger.debug('%s %s', method, url)
        try:
            response = self.session.request(
                method,
                url,
                json=json,
                headers=headers,
                timeout=self.timeout,
                **kwargs
            )
        except requests.RequestException as e:
            logger.error('Backend request %s %s failed: %s', method, url, e)
            raise BackendError(f'Could not reach the Safar backend: {e}') from e

        self._persist_cookies()

        if response.status_code >= 400:
            error = BackendError.from_response(response)
            logger.warning('Backend %s %s -> %s: %s', method, path, response.status_code, error.message)
            raise error
        return response

    def get(self, path: str, **kwargs) -> requests.Response:
        return self.request('GET', path, **kwargs)

    def post(self, path: str, json: Any = None, **kwargs) -> requests.Response:
        return self.request('POST', path, json=json, **kwargs)

    def put(self, path: str, json: Any = None, **kwargs) -> requests.Response:
        return self.request('PUT', path, json=json, **kwargs)

    def delete(self, path: str, **kwargs) -> requests.Response:
        return self.request('DELETE', path, **kwargs)
