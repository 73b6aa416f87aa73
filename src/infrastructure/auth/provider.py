"""Identity provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """Represents an identity extracted from an access token."""

    id: UUID
    email: str
    display_name: Optional[str] = None


@dataclass
class AuthSession:
    """A signed-in identity as issued by the provider."""

    access_token: str
    user: TokenUser
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"


class IIdentityProvider(Protocol):
    """Protocol for the managed identity provider."""

    async def register(self, email: str, password: str, display_name: str) -> TokenUser:
        """
        Create a new email/password identity.

        Raises:
            EmailInUseError: If the email is already registered
            WeakPasswordError: If the provider rejects the password
        """
        ...

    async def authenticate(self, email: str, password: str) -> AuthSession:
        """
        Exchange email and password for a session.

        Raises:
            InvalidCredentialsError: If the pair is rejected
        """
        ...

    async def change_password(self, access_token: str, new_password: str) -> None:
        """Set a new password for the identity owning ``access_token``."""
        ...

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind ``access_token``."""
        ...

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an access token.

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        ...
