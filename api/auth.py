import logging
from typing import Any, Dict

from .base import BackendResource
from .client import BackendError, read_payload
from .envelope import ApiResponse, failure_from_error

logger = logging.getLogger(__name__)

AUTO_LOGIN_FAILED = 'Registration successful but automatic login failed. Please log in manually.'
PROFILE_FETCH_FAILED = 'Login successful but failed to fetch user data'


class AuthApi(BackendResource):
    """Registration, session and profile endpoints."""

    def register(self, data: Dict[str, Any]) -> ApiResponse:
        """Register, then log in with the same credentials and fetch the new profile.

        The backend does not open a session on registration, so a second login
        call is needed before ``/user`` answers.
        """
        try:
            response = self.client.post('/register', json=data)
        except BackendError as e:
            return failure_from_error(e, 'Registration failed')

        payload = read_payload(response)
        if isinstance(payload, dict) and payload.get('success') is False:
            return ApiResponse.from_payload(payload)

        try:
            login_response = self.client.post('/login', json={
                'userName': data.get('userName'),
                'pswd': data.get('pswd'),
            })
            login_payload = read_payload(login_response)
            if not (isinstance(login_payload, dict) and login_payload.get('success')):
                return ApiResponse.failure(AUTO_LOGIN_FAILED)

            user_response = self.client.get('/user')
        except BackendError as e:
            logger.error('Auto-login after registration failed: %s', e)
            return ApiResponse.failure(AUTO_LOGIN_FAILED)

        return ApiResponse.ok('Registration and login successful', read_payload(user_response))

    def login(self, username: str, password: str) -> ApiResponse:
        # The backend expects userName/pswd rather than username/password
        payload = {
            'userName': username,
            'pswd': password,
        }
        try:
            response = self.client.post('/login', json=payload)
        except BackendError as e:
            return failure_from_error(e, 'Invalid username or password')

        body = read_payload(response)
        if not (isinstance(body, dict) and body.get('success')):
            if isinstance(body, dict):
                return ApiResponse.failure(body.get('message') or 'Invalid username or password')
            return ApiResponse.failure('Invalid username or password')

        try:
            user_response = self.client.get('/user')
        except BackendError as e:
            logger.error('Failed to fetch user after login: %s', e)
            return ApiResponse.failure(PROFILE_FETCH_FAILED)

        return ApiResponse.ok(body.get('message') or 'Login successful', read_payload(user_response))

    def logout(self) -> ApiResponse:
        """End the backend session; local cookies are dropped whatever the backend says."""
        try:
            response = self.client.get('/logout')
            return ApiResponse.from_payload(read_payload(response))
        except BackendError as e:
            return failure_from_error(e, 'Failed to logout')
        finally:
            self.client.clear_cookies()

    def get_current_user(self) -> ApiResponse:
        # /user answers with the bare user object, not an envelope
        try:
            response = self.client.get('/user')
        except BackendError as e:
            return failure_from_error(e, 'Failed to fetch user')
        return ApiResponse.ok('User fetched successfully', read_payload(response))

    def update_user(self, changes: Dict[str, Any]) -> ApiResponse:
        try:
            response = self.client.put('/updateuser', json=changes)
        except BackendError as e:
            return failure_from_error(e, 'Failed to update profile')
        return ApiResponse.from_payload(read_payload(response))

    def delete_user(self) -> ApiResponse:
        try:
            response = self.client.delete('/deleteuser')
        except BackendError as e:
            return failure_from_error(e, 'Failed to delete account')
        return ApiResponse.from_payload(read_payload(response))
