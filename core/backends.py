"""
Email sign-in for the Django admin and ``authenticate()`` calls.

Students sign in with their campus email address; the username field only
exists because AbstractUser requires one.
"""

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend


class EmailBackend(ModelBackend):
    """
    Authenticate with ``email`` (or ``username`` holding an email) and password.

    Lookup is case-insensitive. Inactive accounts are refused through
    ``user_can_authenticate``.
    """

    def authenticate(self, request, username=None, password=None, email=None, **kwargs):
        User = get_user_model()
        login = email or username

        if not login or password is None:
            return None

        try:
            user = User.objects.get(email__iexact=login.strip())
        except User.DoesNotExist:
            # Hash anyway to keep timing uniform
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
