"""Exception hierarchy for Babui."""


class BabuiError(Exception):
    """Base exception for all Babui errors."""


class AuthenticationError(BabuiError):
    """Raised when the auth backend rejects a request."""


class InvalidCredentialsError(AuthenticationError):
    """Raised when email/password do not match an account."""


class DuplicateRegistrationError(AuthenticationError):
    """Raised when signing up with an email that is already registered."""


class NotAuthenticatedError(AuthenticationError):
    """Raised when an operation needs a signed-in user and there is none."""


class BackendError(BabuiError):
    """Raised when a backend table call fails."""


class StorageError(BackendError):
    """Raised when an object storage upload fails."""


class ExternalServiceError(BabuiError):
    """Raised when a third-party HTTP service fails."""


class GeocodingError(ExternalServiceError):
    """Raised when the geocoder cannot be reached or answers with an error."""


class RouteNotFoundError(ExternalServiceError):
    """Raised when the directions service returns no route."""


class ListingValidationError(BabuiError):
    """Raised when a listing form does not satisfy its property type's fields."""

    def __init__(self, errors):
        self.errors = list(errors)
        fields = ", ".join(e.field for e in self.errors)
        super().__init__(f"Invalid listing fields: {fields}")


class NotFoundError(BabuiError):
    """Raised when a record does not exist or is not visible to the user."""
