from __future__ import annotations

import logging
from datetime import datetime, timezone

from recipegen.app.domain.errors import AuthenticationError, EmailAlreadyRegisteredError
from recipegen.app.domain.models import AuthSession, UserProfile
from recipegen.app.infra.auth.base import AuthGateway
from recipegen.app.infra.db.base import UserRepository

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(self, gateway: AuthGateway, users: UserRepository):
        self._gateway = gateway
        self._users = users

    def register(self, name: str, email: str, password: str) -> AuthSession:
        email = normalize_email(email)
        if self._users.get_profile_by_email(email) is not None:
            raise EmailAlreadyRegisteredError(email)

        identity = self._gateway.create_user(email, password, name.strip())
        try:
            profile = self._users.create_profile(identity.user_id, name.strip(), email)
        except Exception:
            logger.exception("auth.profile_fail user=%s", identity.user_id)
            self._gateway.delete_user(identity.user_id)
            raise
        session = self._gateway.sign_in(email, password)
        logger.info("auth.register user=%s", profile.id)
        return AuthSession(user=profile, token=session.access_token or "")

    def login(self, email: str, password: str) -> AuthSession:
        email = normalize_email(email)
        identity = self._gateway.sign_in(email, password)

        profile = self._users.get_profile(identity.user_id)
        if profile is None:
            raise AuthenticationError()
        if not profile.is_active:
            raise AuthenticationError("User account is deactivated")

        updated = self._users.update_profile(
            profile.id, {"last_login": datetime.now(timezone.utc).isoformat()}
        )
        logger.info("auth.login user=%s", profile.id)
        return AuthSession(user=updated or profile, token=identity.access_token or "")

    def authenticate(self, token: str) -> UserProfile:
        """
        Resolve a bearer token to an active profile.

        Raises:
            AuthenticationError: Token invalid/expired, profile missing or inactive
        """
        identity = self._gateway.verify_token(token)
        if identity is None:
            raise AuthenticationError("Invalid or expired token")
        profile = self._users.get_profile(identity.user_id)
        if profile is None:
            raise AuthenticationError("User not found")
        if not profile.is_active:
            raise AuthenticationError("User account is deactivated")
        return profile
