"""
JWT authentication that resolves tokens to UserAccount rows.
"""
import logging

import sentry_sdk
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.settings import api_settings

from .models import UserAccount

logger = logging.getLogger(__name__)


class UserJWTAuthentication(JWTAuthentication):
    """
    Custom JWT Authentication that works with the UserAccount model
    """
    def get_user(self, validated_token):
        """
        Get the user from the token, looking up by user_id
        """
        sentry_sdk.add_breadcrumb(
            message="JWT token validation attempt",
            category="auth",
            level="info"
        )

        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            logger.error("Token contained no recognizable user identification")
            sentry_sdk.capture_message(
                "JWT token missing user_id",
                level="error",
                extras={"token_keys": list(validated_token.keys())}
            )
            raise InvalidToken('Token contained no recognizable user identification')

        try:
            user = UserAccount.objects.select_related('batch').get(user_id=user_id)
        except UserAccount.DoesNotExist:
            logger.warning(f"User with ID {user_id} does not exist")
            sentry_sdk.capture_message(
                "JWT authentication failed - user not found",
                level="warning",
                extras={"user_id": user_id}
            )
            raise InvalidToken('User not found')

        if not user.is_active:
            logger.warning(f"Inactive user {user_id} presented a token")
            raise InvalidToken('User is inactive')

        sentry_sdk.add_breadcrumb(
            message="JWT authentication successful",
            category="auth",
            level="info",
            data={"user_id": user.user_id, "role": user.role}
        )
        return user
