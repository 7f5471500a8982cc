import logging

from django.contrib import messages
from django.shortcuts import render, redirect
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.http import require_POST

from api.auth import AUTO_LOGIN_FAILED, AuthApi
from api.cabs import CabApi
from api.client import BackendClient
from api.media import MediaConfigurationError, MediaUploadError, upload_image
from .forms import CabForm, DeleteUserForm, LoginForm, RegisterForm, UpdateUserForm
from .session import (
    anonymous_required,
    backend_login_required,
    clear_session_user,
    display_name,
    driver_required,
    get_session_user,
    store_user,
)

logger = logging.getLogger(__name__)

FEATURES = [
    {'title': 'Easy Ride Sharing',
     'description': 'Connect with fellow travelers and share rides to save money and reduce environmental impact.'},
    {'title': 'Trusted Community',
     'description': 'Join a community of verified users for safe and reliable transportation.'},
    {'title': 'Safe & Secure',
     'description': 'Your safety is our priority with verified profiles and secure payment systems.'},
    {'title': 'Real-time Updates',
     'description': 'Get live updates about your rides, pickup times, and route changes.'},
    {'title': 'Flexible Routes',
     'description': 'Create custom routes or join existing ones that match your travel plans.'},
    {'title': 'Cost Effective',
     'description': 'Split costs with other passengers and save money on your daily commute.'},
]


def _upload_profile_image(request, form):
    """Upload the optional picture; returns (url, ok). Failures are reported as messages."""
    image = form.cleaned_data.get('profile_image')
    if not image:
        return '', True
    try:
        return upload_image(image), True
    except (MediaConfigurationError, MediaUploadError) as e:
        messages.error(request, str(e))
        return '', False


class LandingPage(View):
    template_name = 'user/landing.html'

    def get(self, request):
        return render(request, self.template_name, {'features': FEATURES})


@method_decorator(anonymous_required, name='dispatch')
class Login(View):
    template_name = 'user/login.html'

    def get(self, request):
        return render(request, self.template_name, {'form': LoginForm()})

    def post(self, request):
        form = LoginForm(request.POST)
        if not form.is_valid():
            return render(request, self.template_name, {'form': form})

        response = AuthApi(BackendClient.for_request(request)).login(
            form.cleaned_data['username'],
            form.cleaned_data['password'],
        )
        if response.success and response.data:
            store_user(request, response.data)
            messages.success(request, f"Welcome back, {display_name(response.data)}!")
            return redirect('trip:trips')

        logger.info('Login failed for %s: %s', form.cleaned_data['username'], response.message)
        messages.error(request, response.message or "Invalid username or password.")
        return render(request, self.template_name, {'form': form})


@method_decorator(anonymous_required, name='dispatch')
class RegisterPage(View):
    template_name = 'user/register.html'

    def get(self, request):
        return render(request, self.template_name, {'form': RegisterForm()})

    def post(self, request):
        form = RegisterForm(request.POST, request.FILES)
        if not form.is_valid():
            return render(request, self.template_name, {'form': form})

        profile_img, uploaded = _upload_profile_image(request, form)
        if not uploaded:
            return render(request, self.template_name, {'form': form})

        response = AuthApi(BackendClient.for_request(request)).register(form.to_payload(profile_img))
        if response.success and response.data:
            store_user(request, response.data)
            messages.success(request, "Registration successful. Welcome to Safar!")
            return redirect('user:profile')

        if response.message == AUTO_LOGIN_FAILED:
            messages.warning(request, AUTO_LOGIN_FAILED)
            return redirect('user:login')

        messages.error(request, "Registration failed. Username or mobile number might already be taken.")
        return render(request, self.template_name, {'form': form})


@require_POST
def logout_view(request):
    response = AuthApi(BackendClient.for_request(request)).logout()
    if not response.success:
        logger.warning('Backend logout failed: %s', response.message)
    # Client state goes regardless of what the backend said
    clear_session_user(request)
    messages.info(request, "You have been logged out.")
    return redirect('user:landing')


@method_decorator(backend_login_required, name='dispatch')
class ProfilePage(View):
    template_name = 'user/profile.html'

    def get(self, request):
        response = AuthApi(BackendClient.for_request(request)).get_current_user()
        if not (response.success and response.data):
            clear_session_user(request)
            messages.error(request, "Your session has expired. Please log in again.")
            return redirect('user:login')

        store_user(request, response.data)
        context = {
            'user': response.data,
            'display_name': display_name(response.data),
        }
        return render(request, self.template_name, context)


@method_decorator(backend_login_required, name='dispatch')
class UpdateProfile(View):
    template_name = 'user/update_user.html'

    def get(self, request):
        form = UpdateUserForm.for_user(get_session_user(request))
        return render(request, self.template_name, {'form': form})

    def post(self, request):
        user = get_session_user(request)
        form = UpdateUserForm.for_user(user, request.POST, request.FILES)
        if not form.is_valid():
            return render(request, self.template_name, {'form': form})

        profile_img, uploaded = _upload_profile_image(request, form)
        if not uploaded:
            return render(request, self.template_name, {'form': form})

        changes = form.changes_for(user, profile_img)
        if not changes:
            messages.info(request, "No changes were made to update.")
            return redirect('user:profile')

        auth_api = AuthApi(BackendClient.for_request(request))
        response = auth_api.update_user(changes)
        if not response.success:
            messages.error(request, response.message or "Failed to update profile")
            return render(request, self.template_name, {'form': form})

        refreshed = auth_api.get_current_user()
        if refreshed.success and refreshed.data:
            store_user(request, refreshed.data)
        messages.success(request, "Your profile has been updated successfully!")
        return redirect('user:profile')


@method_decorator(backend_login_required, name='dispatch')
class DeleteAccount(View):
    template_name = 'user/delete_user.html'

    def get(self, request):
        return render(request, self.template_name, {'form': DeleteUserForm()})

    def post(self, request):
        form = DeleteUserForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Please type 'DELETE' to confirm account deletion")
            return render(request, self.template_name, {'form': form})

        auth_api = AuthApi(BackendClient.for_request(request))
        response = auth_api.delete_user()
        if not response.success:
            messages.error(request, response.message or "Failed to delete account")
            return redirect('user:profile')

        auth_api.logout()
        clear_session_user(request)
        messages.success(request, "Your account has been deleted successfully")
        return redirect('user:login')


@method_decorator(driver_required, name='dispatch')
class CabList(View):
    template_name = 'user/cabs.html'

    def get(self, request):
        response = CabApi(BackendClient.for_request(request)).get_cabs()
        cabs = []
        if response.success:
            cabs = response.data or []
        else:
            messages.error(request, response.message or "Failed to fetch cabs")
        return render(request, self.template_name, {'cabs': cabs, 'form': CabForm()})


@method_decorator(driver_required, name='dispatch')
class AddCab(View):
    template_name = 'user/add_cab.html'

    def get(self, request):
        return render(request, self.template_name, {'form': CabForm()})

    def post(self, request):
        form = CabForm(request.POST)
        if not form.is_valid():
            for error in form.errors.get('cabType', []):
                messages.error(request, error)
            return render(request, self.template_name, {'form': form})

        response = CabApi(BackendClient.for_request(request)).add_cab(form.to_payload())
        if response.success:
            messages.success(request, "Cab added successfully!")
            return redirect('user:cabs')

        messages.error(request, response.message or "Failed to add cab")
        return render(request, self.template_name, {'form': form})
