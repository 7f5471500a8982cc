import re

from django import forms
from django.core.exceptions import ValidationError

from api.dto import USER_TYPES, user_name


MOBILE_PATTERN = r'^\d{10}$'
PASSWORD_MIN_LENGTH = 5

CAB_TYPES = (
    ('', 'Select cab type'),
    ('suv', 'SUV'),
    ('sedan', 'Sedan'),
)


def _clean_mobile(mobile):
    if mobile and not re.match(MOBILE_PATTERN, mobile):
        raise ValidationError('Mobile number must be exactly 10 digits')
    return mobile


class LoginForm(forms.Form):
    username = forms.CharField(
        max_length=150,
        required=True,
        widget=forms.TextInput(attrs={
            'placeholder': 'Username',
            'class': 'form-control'
        })
    )
    password = forms.CharField(
        required=True,
        widget=forms.PasswordInput(attrs={
            'placeholder': 'Password',
            'class': 'form-control'
        })
    )


class RegisterForm(forms.Form):
    userName = forms.CharField(
        max_length=150,
        required=True,
        widget=forms.TextInput(attrs={
            'placeholder': 'Choose a username'
        })
    )
    mobileNum = forms.CharField(
        max_length=10,
        required=True,
        help_text="Format: 10 digits",
        widget=forms.TextInput(attrs={
            'pattern': r'[0-9]{10}',
            'inputmode': 'numeric',
            'maxlength': '10',
            'placeholder': 'Mobile number'
        })
    )
    pswd = forms.CharField(
        min_length=PASSWORD_MIN_LENGTH,
        required=True,
        widget=forms.PasswordInput(attrs={
            'minlength': PASSWORD_MIN_LENGTH,
            'placeholder': 'Enter a password'
        })
    )
    userType = forms.ChoiceField(choices=USER_TYPES, initial='STUDENT')
    profile_image = forms.FileField(
        required=False,
        widget=forms.ClearableFileInput(attrs={'accept': 'image/*'})
    )

    def clean_userName(self):
        name = self.cleaned_data.get('userName', '').strip()
        if not name:
            raise ValidationError('Username is required.')
        return name

    def clean_mobileNum(self):
        return _clean_mobile(self.cleaned_data.get('mobileNum', ''))

    def to_payload(self, profile_img=''):
        """Registration body in the backend's field names."""
        return {
            'userName': self.cleaned_data['userName'],
            'mobileNum': self.cleaned_data['mobileNum'],
            'pswd': self.cleaned_data['pswd'],
            'userType': self.cleaned_data['userType'],
            'profileImg': profile_img or '',
        }


class UpdateUserForm(forms.Form):
    userName = forms.CharField(max_length=150, required=False)
    mobileNum = forms.CharField(
        max_length=10,
        required=False,
        widget=forms.TextInput(attrs={
            'pattern': r'[0-9]{10}',
            'inputmode': 'numeric',
            'maxlength': '10',
        })
    )
    pswd = forms.CharField(
        required=False,
        help_text='Leave blank to keep your current password',
        widget=forms.PasswordInput(attrs={'placeholder': 'New password'})
    )
    userType = forms.ChoiceField(choices=USER_TYPES, required=False)
    profile_image = forms.FileField(
        required=False,
        widget=forms.ClearableFileInput(attrs={'accept': 'image/*'})
    )

    @classmethod
    def for_user(cls, user, *args, **kwargs):
        kwargs.setdefault('initial', {
            'userName': user_name(user),
            'mobileNum': user.get('mobileNum') or '',
            'userType': user.get('userType') or '',
        })
        return cls(*args, **kwargs)

    def clean_mobileNum(self):
        return _clean_mobile(self.cleaned_data.get('mobileNum', ''))

    def clean_pswd(self):
        pswd = self.cleaned_data.get('pswd', '')
        if pswd and len(pswd) < PASSWORD_MIN_LENGTH:
            raise ValidationError(f'Password must be at least {PASSWORD_MIN_LENGTH} characters')
        return pswd

    def changes_for(self, user, profile_img=None):
        """Only the fields that differ from ``user``; the password only when a new one was typed."""
        data = self.cleaned_data
        changes = {}
        current_name = user_name(user)
        if data.get('userName') and data['userName'] != current_name:
            changes['userName'] = data['userName']
        if data.get('mobileNum') and data['mobileNum'] != (user.get('mobileNum') or ''):
            changes['mobileNum'] = data['mobileNum']
        if data.get('pswd'):
            changes['pswd'] = data['pswd']
        if data.get('userType') and data['userType'] != user.get('userType'):
            changes['userType'] = data['userType']
        if profile_img and profile_img != user.get('profileImg'):
            changes['profileImg'] = profile_img
        return changes


class DeleteUserForm(forms.Form):
    confirm = forms.CharField(
        required=True,
        widget=forms.TextInput(attrs={
            'placeholder': "Type DELETE to confirm",
            'autocomplete': 'off'
        })
    )

    def clean_confirm(self):
        confirm = self.cleaned_data.get('confirm')
        if confirm != 'DELETE':
            raise ValidationError("Please type 'DELETE' to confirm account deletion")
        return confirm


class CabForm(forms.Form):
    cabNumber = forms.CharField(
        max_length=32,
        required=True,
        widget=forms.TextInput(attrs={'placeholder': 'Cab number', 'required': True})
    )
    cabName = forms.CharField(
        max_length=64,
        required=True,
        widget=forms.TextInput(attrs={'placeholder': 'Cab name', 'required': True})
    )
    cabColor = forms.CharField(
        max_length=32,
        required=True,
        widget=forms.TextInput(attrs={'placeholder': 'Cab color', 'required': True})
    )
    cabType = forms.CharField(
        required=False,
        widget=forms.Select(choices=CAB_TYPES)
    )

    def clean_cabNumber(self):
        number = self.cleaned_data.get('cabNumber', '').strip()
        if not number:
            raise ValidationError('Cab number is required.')
        return number

    def clean_cabType(self):
        cab_type = (self.cleaned_data.get('cabType') or '').strip().lower()
        if cab_type not in ('suv', 'sedan'):
            raise ValidationError('Please select a valid cab type (SUV or Sedan)')
        return cab_type

    def to_payload(self):
        return {
            'cabNumber': self.cleaned_data['cabNumber'],
            'cabName': self.cleaned_data['cabName'],
            'cabColor': self.cleaned_data['cabColor'],
            'cabType': self.cleaned_data['cabType'],
        }
