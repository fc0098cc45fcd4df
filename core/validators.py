"""
Field validators shared by the Campus Connect models and serializers.
"""

import re

from django.conf import settings
from django.core.exceptions import ValidationError


PROFILE_IMAGE_MAX_BYTES = 5 * 1024 * 1024
PROFILE_IMAGE_EXTENSIONS = ['jpg', 'jpeg', 'png', 'webp']
PROFILE_IMAGE_CONTENT_TYPES = ['image/jpeg', 'image/png', 'image/webp']


def validate_phone_number(value):
    """
    Validate a student's phone number.

    Accepts local (0241234567) and international (+233 24 123 4567) formats
    with optional spaces, dashes and parentheses. Requires 10 to 15 digits.

    Raises:
        ValidationError: If phone number format is invalid
    """
    if not value:
        return

    if not re.match(r'^[\d\s\-\+\(\)]+$', value):
        raise ValidationError(
            'Phone number can only contain digits, spaces, dashes, parentheses, and plus sign.',
            code='invalid_phone_chars'
        )

    if '+' in value[1:]:
        raise ValidationError(
            'The plus sign is only allowed at the start of the phone number.',
            code='invalid_phone_chars'
        )

    digits = re.sub(r'\D', '', value)

    if len(digits) < 10 or len(digits) > 15:
        raise ValidationError(
            'Phone number must contain between 10 and 15 digits.',
            code='invalid_phone_length'
        )

    if len(set(digits)) == 1:
        raise ValidationError(
            'Phone number cannot be all the same digit.',
            code='invalid_phone_pattern'
        )


def validate_campus_email(value):
    """
    Only addresses on the configured campus domain may register.

    The domain comes from settings.CAMPUS_EMAIL_DOMAIN; an empty setting
    disables the check.
    """
    domain = getattr(settings, 'CAMPUS_EMAIL_DOMAIN', '')
    if not domain or not value:
        return

    if not value.strip().lower().endswith(f'@{domain}'):
        raise ValidationError(
            f'Only campus student emails (@{domain}) are allowed.',
            code='invalid_campus_email'
        )


def validate_profile_image(image):
    """
    Validate an uploaded profile image (max 5MB; jpg, jpeg, png or webp).

    Raises:
        ValidationError: If image is invalid
    """
    if not image:
        return

    if image.size > PROFILE_IMAGE_MAX_BYTES:
        raise ValidationError(
            f'Image file size cannot exceed 5MB. Current size: {image.size / (1024 * 1024):.2f}MB',
            code='image_too_large'
        )

    file_name = image.name.lower()
    if not any(file_name.endswith(f'.{ext}') for ext in PROFILE_IMAGE_EXTENSIONS):
        raise ValidationError(
            f'Invalid image format. Allowed formats: {", ".join(PROFILE_IMAGE_EXTENSIONS)}',
            code='invalid_image_format'
        )

    content_type = getattr(image, 'content_type', None)
    if content_type and content_type not in PROFILE_IMAGE_CONTENT_TYPES:
        raise ValidationError(
            f'Invalid image content type: {content_type}',
            code='invalid_content_type'
        )
