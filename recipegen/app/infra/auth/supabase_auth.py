from __future__ import annotations

import logging
from typing import Callable, Optional

from supabase import AuthApiError, Client

from recipegen.app.domain.errors import AuthenticationError, EmailAlreadyRegisteredError
from recipegen.app.infra.auth.base import AuthGateway, AuthIdentity

logger = logging.getLogger(__name__)


def _is_duplicate_email(error: AuthApiError) -> bool:
    code = getattr(error, "code", None)
    if code in ("email_exists", "user_already_exists"):
        return True
    return "already" in str(error).lower()


class SupabaseAuthGateway(AuthGateway):
    """
    Supabase Auth backed identities.

    `admin_client` must use the service-role key. Each password sign-in uses
    a fresh client from `session_client_factory`; a sign-in keeps the user's
    session on the client that performed it.
    """

    def __init__(self, admin_client: Client, session_client_factory: Callable[[], Client]):
        self._admin = admin_client
        self._session_client_factory = session_client_factory

    def create_user(self, email: str, password: str, name: str) -> AuthIdentity:
        try:
            response = self._admin.auth.admin.create_user(
                {
                    "email": email,
                    "password": password,
                    "email_confirm": True,
                    "user_metadata": {"name": name},
                }
            )
        except AuthApiError as error:
            if _is_duplicate_email(error):
                raise EmailAlreadyRegisteredError(email) from error
            raise

        user = response.user
        logger.info("Auth user created: id=%s", user.id)
        return AuthIdentity(user_id=str(user.id), email=user.email)

    def sign_in(self, email: str, password: str) -> AuthIdentity:
        client = self._session_client_factory()
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthApiError as error:
            raise AuthenticationError() from error

        if not response.user or not response.session:
            raise AuthenticationError()
        return AuthIdentity(
            user_id=str(response.user.id),
            email=response.user.email,
            access_token=response.session.access_token,
        )

    def verify_token(self, token: str) -> Optional[AuthIdentity]:
        try:
            response = self._admin.auth.get_user(token)
        except AuthApiError:
            return None
        user = getattr(response, "user", None) if response else None
        if not user:
            return None
        return AuthIdentity(user_id=str(user.id), email=user.email, access_token=token)

    def delete_user(self, user_id: str) -> None:
        self._admin.auth.admin.delete_user(user_id)
        logger.info("Auth user deleted: id=%s", user_id)
