# recipegen/app/infra/auth/base.py
"""
Abstract identity provider.
Credential storage, password hashing and token issuance stay with the provider.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class AuthIdentity:
    user_id: str
    email: Optional[str] = None
    access_token: Optional[str] = None


class AuthGateway(ABC):
    """
    Abstract interface for the identity provider.

    Implementations:
    - SupabaseAuthGateway: Supabase Auth (GoTrue)
    """

    @abstractmethod
    def create_user(self, email: str, password: str, name: str) -> AuthIdentity:
        """
        Register credentials with the provider.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken
        """
        pass

    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthIdentity:
        """
        Exchange credentials for an access token.

        Raises:
            AuthenticationError: If the credentials are rejected
        """
        pass

    @abstractmethod
    def verify_token(self, token: str) -> Optional[AuthIdentity]:
        """Return the identity behind a bearer token, or None if it is invalid/expired."""
        pass

    @abstractmethod
    def delete_user(self, user_id: str) -> None:
        pass
