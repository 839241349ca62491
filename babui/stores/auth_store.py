"""
Auth store: sign-up/sign-in, the current session user, guest mode,
favorites and the user's profile row.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

import structlog
from supabase import Client
from supabase_auth.errors import AuthError

from babui.config import Settings, get_settings
from babui.db.client import new_auth_client
from babui.db.mapping import row_to_user
from babui.db.repository import UserRepository
from babui.exceptions import (
    AuthenticationError,
    BackendError,
    DuplicateRegistrationError,
    InvalidCredentialsError,
    NotAuthenticatedError,
)
from babui.models.user import SessionUser, UserProfile
from babui.services.storage import StorageService, avatar_path
from babui.utils.bangladesh import validate_bangladeshi_phone

logger = structlog.get_logger()

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

# Columns a user may change on their own profile
PROFILE_FIELDS = {
    "name_en",
    "name_bn",
    "phone",
    "gender",
    "location_en",
    "location_bn",
    "bio_en",
    "bio_bn",
    "profile_picture_url",
}


@dataclass
class SignUpResult:
    user_id: str
    confirmation_required: bool


def _auth_message(error: AuthError) -> str:
    return getattr(error, "message", None) or str(error)


def _session_user(user: Any) -> SessionUser:
    metadata = getattr(user, "user_metadata", None) or {}
    return SessionUser(
        id=str(user.id),
        name=metadata.get("name", ""),
        email=getattr(user, "email", None) or "",
        phone=metadata.get("phone", ""),
        favorites=[],
    )


class AuthStore:
    """
    Current-session auth state.

    Auth calls go through a client owned by this store; a sign-in there sets
    that client's Authorization header, so it is never the shared one.
    """

    def __init__(
        self,
        users: UserRepository,
        storage: StorageService | None = None,
        settings: Settings | None = None,
        auth_client_factory: Callable[[], Client] = new_auth_client,
    ):
        self.auth_client_factory = auth_client_factory
        self._auth_client: Optional[Client] = None
        self.users = users
        self.storage = storage
        self.settings = settings or get_settings()
        self.user: Optional[SessionUser] = None
        self.guest_mode = False
        self.profile: Optional[UserProfile] = None
        self.session: Any = None

    @property
    def auth(self):
        """Auth API of this store's own client, created on first use."""
        if self._auth_client is None:
            self._auth_client = self.auth_client_factory()
        return self._auth_client.auth

    # ──────────────────────────────────────────────
    # Session
    # ──────────────────────────────────────────────

    def sign_up(
        self,
        email: str,
        password: str,
        confirm_password: str,
        name: str,
        phone: str = "",
        gender: str = "",
    ) -> SignUpResult:
        """
        Register an account and create its `users` row.

        Returns:
            SignUpResult; `confirmation_required` is True when the backend
            issued no session and the email must be confirmed first.

        Raises:
            AuthenticationError: On missing fields, mismatched passwords or a
                rejected registration
            DuplicateRegistrationError: If the email is already registered
            BackendError: If the profile row could not be written
        """
        if not email or not password or not name or not gender:
            raise AuthenticationError("All required fields must be filled")
        if password != confirm_password:
            raise AuthenticationError("Passwords do not match")
        if phone and not validate_bangladeshi_phone(phone):
            raise AuthenticationError("Invalid phone number")

        try:
            response = self.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"name": name, "phone": phone, "gender": gender}},
            })
        except AuthError as e:
            message = _auth_message(e)
            if "user already registered" in message.lower():
                raise DuplicateRegistrationError(
                    "This email is already registered. Please sign in or use a different email."
                ) from e
            logger.warning("Sign up rejected", email=email, error=message)
            raise AuthenticationError(message) from e

        if response.user is None:
            raise AuthenticationError("Sign up failed")

        user_id = str(response.user.id)
        self.users.create(user_id, name=name, email=email, phone=phone, gender=gender)
        logger.info("Signed up", user_id=user_id, confirmed=response.session is not None)

        return SignUpResult(user_id=user_id, confirmation_required=response.session is None)

    def sign_in(self, email: str, password: str) -> SessionUser:
        """
        Sign in with email and password.

        Raises:
            InvalidCredentialsError: If the credentials are wrong
            AuthenticationError: For any other rejection
        """
        try:
            response = self.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            message = _auth_message(e)
            if "invalid" in message.lower():
                raise InvalidCredentialsError("Invalid email or password") from e
            raise AuthenticationError(message) from e

        if response.session is None:
            raise AuthenticationError("Email not confirmed")

        self.handle_auth_event(SIGNED_IN, response.session)
        self.load_favorites()
        return self.user

    def sign_out(self) -> None:
        self.auth.sign_out()
        self.handle_auth_event(SIGNED_OUT, None)

    def request_password_reset(self, email: str) -> None:
        if not email:
            raise AuthenticationError("Email is required")
        try:
            self.auth.reset_password_for_email(email)
        except AuthError as e:
            raise AuthenticationError(_auth_message(e)) from e
        logger.info("Password reset requested", email=email)

    def handle_auth_event(self, event: str, session: Any) -> None:
        """Apply a session-change event from the auth backend."""
        if event == SIGNED_IN and session is not None and getattr(session, "user", None):
            self.user = _session_user(session.user)
            self.session = session
            self.guest_mode = False
            logger.info("Session started", user_id=self.user.id)
        elif event == SIGNED_OUT:
            self.user = None
            self.session = None
            self.profile = None

    def listen(self):
        """Follow the auth backend's session-change stream."""
        return self.auth.on_auth_state_change(self.handle_auth_event)

    def set_guest_mode(self, enabled: bool) -> None:
        self.guest_mode = enabled

    def require_user(self) -> SessionUser:
        if self.user is None:
            raise NotAuthenticatedError("Sign in required")
        return self.user

    # ──────────────────────────────────────────────
    # Favorites
    # ──────────────────────────────────────────────

    def load_favorites(self) -> list[str]:
        user = self.require_user()
        row = self.users.get(user.id)
        favorites = list((row or {}).get("favorites") or [])
        self.user = user.model_copy(update={"favorites": favorites})
        return favorites

    def _set_favorites(self, favorites: list[str]) -> None:
        user = self.require_user()
        previous = user.favorites
        self.user = user.model_copy(update={"favorites": favorites})
        try:
            self.users.set_favorites(user.id, favorites)
        except BackendError:
            self.user = self.user.model_copy(update={"favorites": previous})
            logger.warning("Rolled back favorites", user_id=user.id)
            raise

    def add_favorite(self, property_id: str) -> None:
        favorites = self.require_user().favorites
        if property_id in favorites:
            return
        self._set_favorites([*favorites, property_id])

    def remove_favorite(self, property_id: str) -> None:
        favorites = self.require_user().favorites
        if property_id not in favorites:
            return
        self._set_favorites([f for f in favorites if f != property_id])

    def is_favorite(self, property_id: str) -> bool:
        return self.user is not None and property_id in self.user.favorites

    # ──────────────────────────────────────────────
    # Profile
    # ──────────────────────────────────────────────

    def fetch_profile(self) -> Optional[UserProfile]:
        user = self.require_user()
        row = self.users.get(user.id)
        self.profile = row_to_user(row) if row else None
        return self.profile

    def update_profile(self, **changes) -> UserProfile:
        user = self.require_user()
        updates = {k: v for k, v in changes.items() if k in PROFILE_FIELDS}
        if not updates:
            raise ValueError("No valid fields to update")
        if updates.get("phone") and not validate_bangladeshi_phone(updates["phone"]):
            raise ValueError("Invalid phone number")

        row = self.users.update(user.id, **updates)
        if row is None:
            raise BackendError("Profile not found")
        self.profile = row_to_user(row)
        logger.info("Updated profile", user_id=user.id, fields=list(updates))
        return self.profile

    def upload_profile_picture(self, filename: str, data: bytes, content_type: str | None = None) -> str:
        """Store a new avatar and point the profile at it."""
        user = self.require_user()
        if self.storage is None:
            raise BackendError("Storage is not configured")

        url = self.storage.upload(
            self.settings.profile_pictures_bucket,
            avatar_path(user.id, filename),
            data,
            content_type=content_type,
            upsert=True,
        )
        self.update_profile(profile_picture_url=url)
        return url
