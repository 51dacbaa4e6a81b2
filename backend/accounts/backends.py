"""
Custom authentication backend for identifier-based login.

Allows users to authenticate using either their ``username`` or their
``email`` together with their ``password``.

This backend is registered in ``settings.AUTHENTICATION_BACKENDS``
so that Django's ``authenticate()`` call dispatches to it.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.db.models import Q

User = get_user_model()


class UsernameOrEmailBackend(ModelBackend):
    """
    Authenticate against username or email.

    When ``django.contrib.auth.authenticate(identifier=..., password=...)``
    is called, this backend resolves the user from the ``identifier``
    keyword argument.  Plain ``username=`` calls (Django admin) keep
    working through ``ModelBackend``.
    """

    def authenticate(self, request, identifier=None, password=None, **kwargs):
        if identifier is None:
            return super().authenticate(request, password=password, **kwargs)
        if password is None:
            return None

        try:
            user = User.objects.get(Q(username=identifier) | Q(email__iexact=identifier))
        except User.DoesNotExist:
            # Run the default password hasher to mitigate timing attacks
            User().set_password(password)
            return None
        except User.MultipleObjectsReturned:
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
