"""Auth store: sign-up/sign-in mapping, session events, favorites, profile."""

from types import SimpleNamespace

import pytest

from babui.db.repository import UserRepository
from babui.exceptions import (
    AuthenticationError,
    BackendError,
    DuplicateRegistrationError,
    InvalidCredentialsError,
    NotAuthenticatedError,
)
from babui.services.storage import StorageService
from babui.stores.auth_store import SIGNED_IN, SIGNED_OUT, AuthStore
from conftest import FakeAuthError


def auth_user(user_id="user-1", name="Karim"):
    return SimpleNamespace(
        id=user_id,
        email="karim@example.com",
        user_metadata={"name": name, "phone": "01812345678"},
    )


@pytest.fixture
def store(supabase, settings):
    return AuthStore(UserRepository(supabase), StorageService(supabase), settings, lambda: supabase)


@pytest.fixture
def signed_in(store, supabase):
    supabase.tables["users"].append({"id": "user-1", "name_en": "Karim", "favorites": ["1"]})
    store.handle_auth_event(SIGNED_IN, SimpleNamespace(user=auth_user()))
    store.load_favorites()
    return store


# ══════════════════════════════════════════════════════════
# Sign up / sign in
# ══════════════════════════════════════════════════════════


def test_sign_up_inserts_profile_row(store, supabase):
    supabase.auth.sign_up_response = SimpleNamespace(user=auth_user(), session=None)

    result = store.sign_up("karim@example.com", "secret1", "secret1", "Karim", "01812345678", "male")

    assert result.user_id == "user-1"
    assert result.confirmation_required is True
    assert supabase.tables["users"] == [
        {"id": "user-1", "name_en": "Karim", "email": "karim@example.com", "phone": "01812345678", "gender": "male"}
    ]
    credentials = supabase.auth.calls[0][1][0]
    assert credentials["options"]["data"] == {"name": "Karim", "phone": "01812345678", "gender": "male"}


def test_sign_up_checks_fields_locally(store, supabase):
    with pytest.raises(AuthenticationError, match="required"):
        store.sign_up("a@b.com", "pw", "pw", "", gender="male")
    with pytest.raises(AuthenticationError, match="do not match"):
        store.sign_up("a@b.com", "pw", "other", "Karim", gender="male")
    assert supabase.auth.calls == []


def test_duplicate_registration(store, supabase):
    supabase.auth.error = FakeAuthError("User already registered")
    with pytest.raises(DuplicateRegistrationError):
        store.sign_up("a@b.com", "pw", "pw", "Karim", gender="male")
    assert supabase.tables["users"] == []


def test_sign_in_maps_invalid_credentials(store, supabase):
    supabase.auth.error = FakeAuthError("Invalid login credentials")
    with pytest.raises(InvalidCredentialsError):
        store.sign_in("a@b.com", "wrong")
    assert store.user is None


def test_sign_in_sets_user_and_favorites(store, supabase):
    supabase.tables["users"].append({"id": "user-1", "favorites": ["2", "3"]})
    supabase.auth.sign_in_response = SimpleNamespace(
        user=auth_user(), session=SimpleNamespace(user=auth_user(), access_token="tok")
    )
    store.set_guest_mode(True)

    user = store.sign_in("karim@example.com", "secret1")

    assert user.name == "Karim"
    assert user.favorites == ["2", "3"]
    assert store.guest_mode is False
    assert store.session.access_token == "tok"


def test_signed_out_event_clears_user(signed_in):
    signed_in.handle_auth_event(SIGNED_OUT, None)
    assert signed_in.user is None


def test_sign_out_calls_backend(signed_in, supabase):
    signed_in.sign_out()
    assert ("sign_out", ()) in supabase.auth.calls
    assert signed_in.user is None


def test_listen_registers_callback(store, supabase):
    store.listen()
    supabase.auth.listeners[0](SIGNED_IN, SimpleNamespace(user=auth_user("u9")))
    assert store.user.id == "u9"


# ══════════════════════════════════════════════════════════
# Favorites
# ══════════════════════════════════════════════════════════


def test_add_and_remove_favorite(signed_in, supabase):
    signed_in.add_favorite("2")
    assert signed_in.is_favorite("2")
    assert supabase.tables["users"][0]["favorites"] == ["1", "2"]

    signed_in.remove_favorite("1")
    assert not signed_in.is_favorite("1")
    assert supabase.tables["users"][0]["favorites"] == ["2"]


def test_favorite_rolls_back_on_failure(signed_in, supabase):
    supabase.fail("users", "update")
    with pytest.raises(BackendError):
        signed_in.add_favorite("2")
    assert signed_in.user.favorites == ["1"]


def test_favorites_need_a_user(store):
    with pytest.raises(NotAuthenticatedError):
        store.add_favorite("1")
    assert store.is_favorite("1") is False


# ══════════════════════════════════════════════════════════
# Profile
# ══════════════════════════════════════════════════════════


def test_update_profile_filters_fields(signed_in, supabase):
    profile = signed_in.update_profile(bio_en="Hello", favorites=["hack"])
    assert profile.bio_en == "Hello"
    assert profile.favorites == ["1"]


def test_upload_profile_picture(signed_in, supabase):
    url = signed_in.upload_profile_picture("me.PNG", b"png-bytes", "image/png")

    assert url == "https://cdn.example.test/profile-pictures/public/user-1/avatar.png"
    assert ("profile-pictures", "public/user-1/avatar.png") in supabase.storage.objects
    assert signed_in.fetch_profile().profile_picture_url == url
