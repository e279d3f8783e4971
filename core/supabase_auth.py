# core/supabase_auth.py
# Custom DRF authentication class to verify Supabase JWTs

import os
import logging
import jwt
from django.contrib.auth import get_user_model
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

logger = logging.getLogger("compete.auth")

User = get_user_model()


class SupabaseJWTAuthentication(BaseAuthentication):
    """
    Custom authentication class that validates Supabase JWTs.

    This authenticator:
    1. Extracts the JWT from the Authorization header
    2. Verifies the token signature using the Supabase JWT secret
    3. Looks up or creates a user based on the token's email claim
    """

    def authenticate(self, request):
        auth_header = request.headers.get("Authorization", "")

        if not auth_header.startswith("Bearer "):
            return None  # Let other auth backends handle it

        token = auth_header.split(" ")[1]

        supabase_jwt_secret = os.environ.get("SUPABASE_JWT_SECRET")
        if not supabase_jwt_secret:
            logger.debug("SUPABASE_JWT_SECRET not configured")
            return None

        try:
            # Supabase uses HS256 by default
            payload = jwt.decode(
                token,
                supabase_jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationFailed("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid Supabase token: {e}")
            return None  # Let other auth backends try

        if not payload.get("sub"):
            raise AuthenticationFailed("Invalid token: missing user ID")

        user = self._get_or_create_user(payload)
        return (user, payload)

    def authenticate_header(self, request):
        return "Bearer"

    def _get_or_create_user(self, payload: dict):
        """
        Get or create a user for the token's email.

        New users take their display name and avatar from the token's
        user_metadata when present.
        """
        email = payload.get("email")
        if not email:
            raise AuthenticationFailed("Token missing email claim")

        try:
            return User.objects.get(email=email)
        except User.DoesNotExist:
            pass

        username = email.split("@")[0]
        # Ensure unique username
        base_username = username
        counter = 1
        while User.objects.filter(username=username).exists():
            username = f"{base_username}_{counter}"
            counter += 1

        metadata = payload.get("user_metadata") or {}
        user = User.objects.create(
            username=username,
            email=email,
            display_name=metadata.get("full_name") or metadata.get("name") or "",
            profile_picture=metadata.get("avatar_url"),
        )
        user.set_unusable_password()
        user.save(update_fields=["password"])
        logger.info(f"Created new user from Supabase: {email}")

        return user
