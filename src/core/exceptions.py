"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    ROLE_REQUIRED = "ROLE_REQUIRED"
    ROLE_NOT_ALLOWED = "ROLE_NOT_ALLOWED"
    SELLER_NOT_APPROVED = "SELLER_NOT_APPROVED"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    SELLER_NOT_FOUND = "SELLER_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    WEAK_PASSWORD = "WEAK_PASSWORD"

    # Payment errors (402)
    PAYMENT_FAILED = "PAYMENT_FAILED"

    # Conflict errors (409)
    EMAIL_IN_USE = "EMAIL_IN_USE"
    SELLER_UNAVAILABLE = "SELLER_UNAVAILABLE"
    STOCK_CHANGED = "STOCK_CHANGED"
    CONCURRENT_UPDATE = "CONCURRENT_UPDATE"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    PURCHASE_FAILED = "PURCHASE_FAILED"

    # Upstream errors (502)
    IDENTITY_PROVIDER_ERROR = "IDENTITY_PROVIDER_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class InvalidCredentialsError(AuthenticationError):
    """Email/password pair rejected by the identity provider."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message=message, error_code=ErrorCode.INVALID_CREDENTIALS)


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class RoleRequiredError(AppException):
    """The caller's role is not allowed to perform the operation."""

    def __init__(self, required_role: str) -> None:
        super().__init__(
            error_code=ErrorCode.ROLE_REQUIRED,
            message=f"This action requires the {required_role} role",
            status_code=403,
            details={"required_role": required_role},
        )


class RoleNotAllowedError(AppException):
    """Self-registration with this role is disabled."""

    def __init__(self, role: str) -> None:
        super().__init__(
            error_code=ErrorCode.ROLE_NOT_ALLOWED,
            message=f"Registration with the {role} role is not allowed",
            status_code=403,
            details={"role": role},
        )


class SellerNotApprovedError(AppException):
    """Seller account is still under review."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.SELLER_NOT_APPROVED,
            message=(
                "Your seller account is currently under review. "
                "You can manage stock and location once approved."
            ),
            status_code=403,
        )


class ProfileNotFoundError(AppException):
    """No profile exists for an identity."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class SellerNotFoundError(AppException):
    """Seller not found (or the profile is not a seller)."""

    def __init__(self, seller_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.SELLER_NOT_FOUND,
            message=f"Seller not found: {seller_id}",
            status_code=404,
            details={"seller_id": seller_id},
        )


class SellerUnavailableError(AppException):
    """Seller exists but cannot take purchases right now."""

    def __init__(self, seller_id: str, reason: str) -> None:
        super().__init__(
            error_code=ErrorCode.SELLER_UNAVAILABLE,
            message=reason,
            status_code=409,
            details={"seller_id": seller_id},
        )


class StockChangedError(AppException):
    """Seller stock no longer covers the requested quantity."""

    def __init__(self, seller_id: str, requested: int, available: int | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.STOCK_CHANGED,
            message=(
                "Not enough stock available. The seller might have updated "
                "their stock, please retry."
            ),
            status_code=409,
            details={
                "seller_id": seller_id,
                "requested": requested,
                "available": available,
            },
        )


class ConcurrentUpdateError(AppException):
    """A conditional write lost against a concurrent writer."""

    def __init__(self, entity_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CONCURRENT_UPDATE,
            message="The record was modified concurrently",
            status_code=409,
            details={"entity_id": entity_id},
        )


class PaymentFailedError(AppException):
    """Payment gateway declined, failed or timed out."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.PAYMENT_FAILED,
            message=(
                "Your payment could not be processed. Please check your "
                "details or try another card."
            ),
            status_code=402,
        )


class PurchaseFailedError(AppException):
    """Unexpected store failure while committing a purchase."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.PURCHASE_FAILED,
            message="An unexpected error occurred during purchase",
            status_code=500,
        )


class WeakPasswordError(AppException):
    """Password does not satisfy the password policy."""

    def __init__(
        self,
        message: str = (
            "Password is not strong enough. Ensure it has uppercase, lowercase, "
            "number, special character, and is at least 8 characters long."
        ),
    ) -> None:
        super().__init__(
            error_code=ErrorCode.WEAK_PASSWORD,
            message=message,
            status_code=400,
        )


class EmailInUseError(AppException):
    """Email already registered with the identity provider."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.EMAIL_IN_USE,
            message="This email address is already in use",
            status_code=409,
            details={"email": email},
        )


class IdentityProviderError(AppException):
    """The identity provider returned an unexpected response."""

    def __init__(self, message: str = "Identity provider request failed") -> None:
        super().__init__(
            error_code=ErrorCode.IDENTITY_PROVIDER_ERROR,
            message=message,
            status_code=502,
        )


class ValidationFailedError(AppException):
    """Domain-level validation failure outside request parsing."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=422,
            details={"field": field} if field else None,
        )
