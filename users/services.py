# users/services.py
from django.contrib.auth import get_user_model
from rest_framework.exceptions import NotAuthenticated

from core.exceptions import NotFoundError

User = get_user_model()


def verify_user(request):
    """
    Resolve the authenticated caller to its User row.

    Raises NotAuthenticated for anonymous requests and NotFoundError when the
    identity no longer maps to a stored user.
    """
    identity = getattr(request, "user", None)
    if identity is None or not identity.is_authenticated:
        raise NotAuthenticated("Unauthenticated call")

    try:
        return User.objects.get(pk=identity.pk)
    except User.DoesNotExist:
        raise NotFoundError("The user does not exist")
