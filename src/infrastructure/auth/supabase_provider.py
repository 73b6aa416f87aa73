"""Supabase Auth (GoTrue) identity provider.

Account operations go to the Supabase Auth REST API. Access tokens are
validated locally: ES256 tokens against the project's JWKS, HS256 tokens
against the shared secret (local development and tests).

Supabase JWT payload structure:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "role": "authenticated",
        "user_metadata": { "display_name": "Jane" },
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from core.exceptions import (
    AuthenticationError,
    EmailInUseError,
    ErrorCode,
    IdentityProviderError,
    InvalidCredentialsError,
    WeakPasswordError,
)
from infrastructure.auth.provider import AuthSession, TokenUser

logger = logging.getLogger(__name__)

_EMAIL_TAKEN_CODES = {"user_already_exists", "email_exists"}
_BAD_CREDENTIAL_CODES = {"invalid_credentials", "invalid_grant"}

# kid -> JWK, fetched once and refreshed when an unknown kid shows up
_jwks_cache: dict[str, Any] | None = None


async def _load_jwks(client: httpx.AsyncClient | None = None) -> dict[str, Any]:
    """Fetch and cache the project's JWKS signing keys."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    jwks_url = settings.supabase_jwks_url
    if not jwks_url:
        return {}

    try:
        if client is not None:
            response = await client.get(jwks_url, timeout=settings.identity_timeout_seconds)
        else:
            async with httpx.AsyncClient() as owned:
                response = await owned.get(jwks_url, timeout=settings.identity_timeout_seconds)
        response.raise_for_status()
        _jwks_cache = {
            key["kid"]: key for key in response.json().get("keys", []) if key.get("kid")
        }
        logger.info("Fetched %d JWKS keys", len(_jwks_cache))
        return _jwks_cache
    except (httpx.HTTPError, ValueError):
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}


def _error_code(body: dict[str, Any]) -> str:
    return str(body.get("error_code") or body.get("error") or "")


def _error_message(body: dict[str, Any]) -> str:
    return str(
        body.get("msg")
        or body.get("error_description")
        or body.get("message")
        or "Identity provider request failed"
    )


class SupabaseIdentityProvider:
    """Identity provider backed by Supabase Auth."""

    def __init__(
        self,
        auth_url: str = settings.supabase_auth_url,
        api_key: str = settings.supabase_anon_key,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._auth_url = auth_url.rstrip("/")
        self._api_key = api_key
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._http_client = http_client

    # ------------------------------------------------------------------
    # Account operations
    # ------------------------------------------------------------------

    async def register(self, email: str, password: str, display_name: str) -> TokenUser:
        """Create an email/password identity and return it."""
        response = await self._request(
            "POST",
            "/signup",
            json={
                "email": email,
                "password": password,
                "data": {"display_name": display_name},
            },
        )
        body = self._json(response)
        if response.is_error:
            code = _error_code(body)
            message = _error_message(body)
            if code in _EMAIL_TAKEN_CODES or "already registered" in message.lower():
                raise EmailInUseError(email)
            if code == "weak_password":
                raise WeakPasswordError("The password is too weak.")
            logger.warning("Signup rejected: status=%s code=%s", response.status_code, code)
            raise IdentityProviderError(f"Failed to register: {message}")

        # With email confirmation on, GoTrue returns the bare user object.
        user_data = body.get("user") or body
        return self._token_user(user_data, fallback_email=email)

    async def authenticate(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""
        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        body = self._json(response)
        if response.is_error:
            if _error_code(body) in _BAD_CREDENTIAL_CODES or response.status_code in (400, 401):
                raise InvalidCredentialsError()
            raise IdentityProviderError(_error_message(body))

        access_token = body.get("access_token")
        if not access_token:
            raise IdentityProviderError("Identity provider returned no access token")

        return AuthSession(
            access_token=access_token,
            refresh_token=body.get("refresh_token"),
            expires_in=body.get("expires_in"),
            token_type=body.get("token_type", "bearer"),
            user=self._token_user(body.get("user") or {}, fallback_email=email),
        )

    async def change_password(self, access_token: str, new_password: str) -> None:
        """Replace the password of the identity owning the token."""
        response = await self._request(
            "PUT",
            "/user",
            json={"password": new_password},
            access_token=access_token,
        )
        if not response.is_error:
            return

        body = self._json(response)
        code = _error_code(body)
        if code == "weak_password":
            raise WeakPasswordError("New password is too weak.")
        if code == "same_password":
            raise WeakPasswordError("New password should be different from the old password.")
        if response.status_code in (401, 403):
            raise AuthenticationError(
                message="This operation requires recent authentication. Please log in again.",
                error_code=ErrorCode.INVALID_TOKEN,
            )
        raise IdentityProviderError(_error_message(body))

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session. An already-revoked session is not an error."""
        response = await self._request("POST", "/logout", access_token=access_token)
        if response.status_code in (401, 403, 404):
            logger.info("Sign-out for an already expired session (status=%s)", response.status_code)
            return
        if response.is_error:
            raise IdentityProviderError(_error_message(self._json(response)))

    # ------------------------------------------------------------------
    # Token validation
    # ------------------------------------------------------------------

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an access token and extract the identity.

        The signing algorithm is read from the token header:
        - ES256 (Supabase): verified with the JWKS public key
        - HS256 (local/test): verified with the shared secret
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "ES256":
                payload = await self._decode_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if not payload or not payload.get("sub") or not payload.get("email"):
            return None

        try:
            return self._token_user(
                {
                    "id": payload["sub"],
                    "email": payload["email"],
                    "user_metadata": payload.get("user_metadata") or {},
                }
            )
        except IdentityProviderError:
            return None

    def create_token(self, user: TokenUser) -> str:
        """Issue an HS256 token for a user (local development and tests)."""
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "email": user.email,
            "aud": "authenticated",
            "role": "authenticated",
            "exp": expire,
            "user_metadata": {"display_name": user.display_name},
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    async def _decode_es256(self, token: str, header: dict[str, Any]) -> Optional[dict[str, Any]]:
        global _jwks_cache
        kid = header.get("kid")
        if not kid:
            return None

        key_data = (await _load_jwks(self._http_client)).get(kid)
        if not key_data:
            # Signing key rotated since the cache was filled
            _jwks_cache = None
            key_data = (await _load_jwks(self._http_client)).get(kid)
            if not key_data:
                logger.warning("JWKS key not found for kid=%s", kid)
                return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        access_token: str | None = None,
    ) -> httpx.Response:
        if not self._auth_url:
            raise IdentityProviderError("Identity provider is not configured")

        headers = {"apikey": self._api_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        url = f"{self._auth_url}{path}"
        try:
            if self._http_client is not None:
                return await self._http_client.request(
                    method,
                    url,
                    json=json,
                    params=params,
                    headers=headers,
                    timeout=settings.identity_timeout_seconds,
                )
            async with httpx.AsyncClient(timeout=settings.identity_timeout_seconds) as client:
                return await client.request(method, url, json=json, params=params, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Identity provider unreachable: %s %s (%s)", method, path, exc)
            raise IdentityProviderError("Identity provider is unreachable") from exc

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _token_user(data: dict[str, Any], fallback_email: str = "") -> TokenUser:
        user_id = data.get("id")
        if not user_id:
            raise IdentityProviderError("Identity provider returned no user id")

        metadata = data.get("user_metadata") or {}
        display_name = (
            metadata.get("display_name")
            or metadata.get("name")
            or metadata.get("full_name")
        )
        try:
            return TokenUser(
                id=UUID(str(user_id)),
                email=data.get("email") or fallback_email,
                display_name=display_name,
            )
        except ValueError as exc:
            raise IdentityProviderError("Identity provider returned a malformed user id") from exc
