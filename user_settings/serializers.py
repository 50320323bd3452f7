from django import forms

from .services.profiles import DISPLAY_NAME_MAX_LENGTH


class DisplayNameSerializer(forms.Form):
    """
    Serializer for a display-name update request.
    Leading and trailing whitespace is stripped before validation.
    """
    display_name = forms.CharField(
        max_length=DISPLAY_NAME_MAX_LENGTH,
        strip=True,
        required=True,
        error_messages={
            'required': 'Display name is required',
            'max_length': f'Display name must be {DISPLAY_NAME_MAX_LENGTH} characters or less',
        },
        help_text="Name shown in the chat header",
    )
