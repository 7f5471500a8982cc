from unittest import mock

from django.test import SimpleTestCase

from api.auth import AUTO_LOGIN_FAILED, PROFILE_FETCH_FAILED, AuthApi
from api.client import BackendClient, BackendError
from .fakes import make_response

USER = {'userId': 7, 'userName': 'asha', 'userType': 'STUDENT'}


def backend_error(message=None, status_code=400):
    payload = {'success': False, 'message': message} if message else None
    return BackendError('HTTP error', status_code=status_code, payload=payload)


class LoginTest(SimpleTestCase):
    def setUp(self):
        self.backend = mock.Mock(spec=BackendClient)
        self.api = AuthApi(self.backend)

    def test_login_then_fetches_user(self):
        self.backend.post.return_value = make_response(200, {'success': True, 'message': 'Welcome'})
        self.backend.get.return_value = make_response(200, USER)

        response = self.api.login('asha', 'secret')

        self.backend.post.assert_called_once_with('/login', json={'userName': 'asha', 'pswd': 'secret'})
        self.backend.get.assert_called_once_with('/user')
        self.assertTrue(response.success)
        self.assertEqual(response.message, 'Welcome')
        self.assertEqual(response.data, USER)

    def test_login_default_message(self):
        self.backend.post.return_value = make_response(200, {'success': True})
        self.backend.get.return_value = make_response(200, USER)
        self.assertEqual(self.api.login('asha', 'secret').message, 'Login successful')

    def test_backend_refusal_is_returned(self):
        self.backend.post.return_value = make_response(200, {'success': False, 'message': 'Bad credentials'})
        response = self.api.login('asha', 'wrong')
        self.assertFalse(response.success)
        self.assertEqual(response.message, 'Bad credentials')
        self.backend.get.assert_not_called()

    def test_error_status_uses_backend_message(self):
        self.backend.post.side_effect = backend_error('User not found', 401)
        self.assertEqual(self.api.login('ghost', 'x').message, 'User not found')

    def test_network_error_uses_default(self):
        self.backend.post.side_effect = backend_error()
        self.assertEqual(self.api.login('asha', 'x').message, 'Invalid username or password')

    def test_profile_fetch_failure(self):
        self.backend.post.return_value = make_response(200, {'success': True})
        self.backend.get.side_effect = backend_error(status_code=500)
        response = self.api.login('asha', 'secret')
        self.assertFalse(response.success)
        self.assertEqual(response.message, PROFILE_FETCH_FAILED)


class RegisterTest(SimpleTestCase):
    def setUp(self):
        self.backend = mock.Mock(spec=BackendClient)
        self.api = AuthApi(self.backend)
        self.data = {'userName': 'asha', 'pswd': 'secret', 'mobileNum': '9876543210', 'userType': 'STUDENT'}

    def test_register_logs_in_and_fetches_user(self):
        self.backend.post.side_effect = [
            make_response(200, {'success': True, 'message': 'Registered'}),
            make_response(200, {'success': True}),
        ]
        self.backend.get.return_value = make_response(200, USER)

        response = self.api.register(self.data)

        self.assertTrue(response.success)
        self.assertEqual(response.message, 'Registration and login successful')
        self.assertEqual(response.data, USER)
        self.assertEqual(
            self.backend.post.call_args_list[1],
            mock.call('/login', json={'userName': 'asha', 'pswd': 'secret'}),
        )

    def test_backend_failure_envelope_returned_as_is(self):
        self.backend.post.return_value = make_response(200, {'success': False, 'message': 'Username taken'})
        response = self.api.register(self.data)
        self.assertFalse(response.success)
        self.assertEqual(response.message, 'Username taken')
        self.assertEqual(self.backend.post.call_count, 1)

    def test_register_error_default_message(self):
        self.backend.post.side_effect = backend_error(status_code=500)
        self.assertEqual(self.api.register(self.data).message, 'Registration failed')

    def test_auto_login_refused(self):
        self.backend.post.side_effect = [
            make_response(200, {'success': True}),
            make_response(200, {'success': False, 'message': 'nope'}),
        ]
        response = self.api.register(self.data)
        self.assertFalse(response.success)
        self.assertEqual(response.message, AUTO_LOGIN_FAILED)

    def test_auto_login_error(self):
        self.backend.post.side_effect = [make_response(200, {'success': True}), backend_error()]
        self.assertEqual(self.api.register(self.data).message, AUTO_LOGIN_FAILED)

    def test_user_fetch_error_after_registration(self):
        self.backend.post.side_effect = [make_response(200, {'success': True}), make_response(200, {'success': True})]
        self.backend.get.side_effect = backend_error(status_code=500)
        self.assertEqual(self.api.register(self.data).message, AUTO_LOGIN_FAILED)


class AccountTest(SimpleTestCase):
    def setUp(self):
        self.backend = mock.Mock(spec=BackendClient)
        self.api = AuthApi(self.backend)

    def test_logout_clears_cookies_on_success(self):
        self.backend.get.return_value = make_response(200, {'success': True, 'message': 'Logged out'})
        response = self.api.logout()
        self.assertTrue(response.success)
        self.backend.clear_cookies.assert_called_once_with()

    def test_logout_clears_cookies_on_failure(self):
        self.backend.get.side_effect = backend_error(status_code=500)
        response = self.api.logout()
        self.assertFalse(response.success)
        self.assertEqual(response.message, 'Failed to logout')
        self.backend.clear_cookies.assert_called_once_with()

    def test_get_current_user(self):
        self.backend.get.return_value = make_response(200, USER)
        response = self.api.get_current_user()
        self.assertEqual(response.message, 'User fetched successfully')
        self.assertEqual(response.data, USER)

    def test_get_current_user_failure(self):
        self.backend.get.side_effect = backend_error(status_code=401)
        self.assertEqual(self.api.get_current_user().message, 'Failed to fetch user')

    def test_update_user_passes_envelope_through(self):
        self.backend.put.return_value = make_response(200, {'success': True, 'message': 'Updated'})
        response = self.api.update_user({'mobileNum': '9999999999'})
        self.backend.put.assert_called_once_with('/updateuser', json={'mobileNum': '9999999999'})
        self.assertEqual(response.message, 'Updated')

    def test_update_user_default_failure(self):
        self.backend.put.side_effect = backend_error()
        self.assertEqual(self.api.update_user({}).message, 'Failed to update profile')

    def test_delete_user(self):
        self.backend.delete.return_value = make_response(200, {'success': True, 'message': 'Deleted'})
        self.assertTrue(self.api.delete_user().success)
        self.backend.delete.side_effect = backend_error('Cannot delete host with trips')
        self.assertEqual(self.api.delete_user().message, 'Cannot delete host with trips')
