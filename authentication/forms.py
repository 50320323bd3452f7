# authentication/forms.py
from django import forms
from django.contrib.auth import get_user_model

User = get_user_model()

MIN_PASSWORD_LENGTH = 6


class SignInForm(forms.Form):
    email = forms.EmailField(
        max_length=254,
        required=True,
        error_messages={
            'required': 'Please input your email!',
            'invalid': 'Please enter a valid email!',
        }
    )
    password = forms.CharField(
        max_length=255,
        strip=False,
        required=True,
        error_messages={
            'required': 'Please input your password!',
        }
    )

    def clean_email(self):
        return self.cleaned_data['email'].strip().lower()

    def authenticate(self):
        if not self.is_valid():
            return None
        try:
            user = User.objects.get(username=self.cleaned_data['email'])
        except User.DoesNotExist:
            return None
        if user.is_active and user.check_password(self.cleaned_data['password']):
            return user
        return None


class SignUpForm(forms.Form):
    email = forms.EmailField(
        max_length=254,
        required=True,
        error_messages={
            'required': 'Please input your email!',
            'invalid': 'Please enter a valid email!',
        }
    )
    password = forms.CharField(
        max_length=255,
        min_length=MIN_PASSWORD_LENGTH,
        strip=False,
        required=True,
        error_messages={
            'required': 'Please input your password!',
            'min_length': f'Password must be at least {MIN_PASSWORD_LENGTH} characters!',
        }
    )

    def clean_email(self):
        email = self.cleaned_data['email'].strip().lower()
        if User.objects.filter(username=email).exists():
            raise forms.ValidationError('User already registered')
        return email
