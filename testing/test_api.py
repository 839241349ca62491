"""HTTP surface, exercised with FastAPI's TestClient over fake backends."""

import time
from types import SimpleNamespace

import httpx
import jwt
import pytest
from fastapi.testclient import TestClient

from babui.config import get_settings
from babui.context import AppContext
from babui.main import app
from babui.services.geocoding import GeocodingClient
from conftest import FakeAuthError, FakeSupabase


def token_for(user_id, expires_in=3600):
    payload = {"sub": user_id, "aud": "authenticated", "exp": int(time.time()) + expires_in}
    return jwt.encode(payload, get_settings().supabase_jwt_secret, algorithm="HS256")


def auth_header(user_id):
    return {"Authorization": f"Bearer {token_for(user_id)}"}


def geo_handler(request):
    if request.url.path == "/search":
        return httpx.Response(200, json=[{"place_id": 1, "display_name": "Banani", "lat": "23.79", "lon": "90.40"}])
    return httpx.Response(404)


@pytest.fixture
def user_tokens():
    return []


@pytest.fixture
def client(supabase, realtime, settings, resolver, user_tokens):
    supabase.tables["users"].append({"id": "owner-9", "name_en": "Salma", "favorites": None, "myproperties": None})

    def user_client(token):
        user_tokens.append(token)
        return supabase

    app.state.context = AppContext(
        settings=settings,
        client=supabase,
        resolver=resolver,
        geocoder=GeocodingClient(settings, transport=httpx.MockTransport(geo_handler)),
        realtime=realtime,
        auth_client_factory=lambda: supabase,
        user_client_factory=user_client,
    )
    return TestClient(app)


def ids(response):
    assert response.status_code == 200, response.text
    return [p["id"] for p in response.json()]


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_location_cascade(client):
    assert len(client.get("/api/locations/divisions").json()) == 8
    districts = client.get("/api/locations/divisions/6/districts").json()
    assert "Gazipur" in [d["name"] for d in districts]
    assert client.get("/api/locations/districts/unknown/upazilas").json() == []
    assert "Banani" in client.get("/api/locations/upazilas/602/areas").json()


def test_search_with_query_filters(client):
    assert ids(client.get("/api/properties")) == ["1", "2", "3"]
    assert ids(client.get("/api/properties", params={"type": "room"})) == ["2"]
    assert ids(client.get("/api/properties", params={"maxPrice": "25000", "bedrooms": "2"})) == ["1"]
    assert ids(client.get("/api/properties", params=[("amenities", "wifi"), ("amenities", "gas")])) == ["1"]


def test_bad_filter_value(client):
    assert client.get("/api/properties", params={"bedrooms": "many"}).status_code == 400


def test_get_property(client):
    response = client.get("/api/properties/1")
    assert response.json()["title"] == "Sunny 2-bed flat"
    assert client.get("/api/properties/404").status_code == 404


def test_nearby(client):
    assert ids(client.get("/api/properties/nearby", params={"lat": 23.75, "lng": 90.38, "radius_km": 2})) == ["1"]
    # catalog order is 1, 2; closer to the second listing
    assert ids(client.get("/api/properties/nearby", params={"lat": 23.80, "lng": 90.37, "radius_km": 20})) == ["2", "1"]


def test_listing_schema(client):
    body = client.get("/api/properties/schema/parking").json()
    assert "parking_type" in [f["name"] for f in body["fields"]]
    assert body["amenities"] == ["security", "cctv"]


LISTING = {
    "type": "room",
    "division": "6",
    "district": "47",
    "areaName": "Banani",
    "price": 9000,
    "roomQuantity": 1,
    "amenities": ["wifi"],
    "contactName": "Salma",
    "contactPhone": "01912345678",
}


def test_create_listing_needs_auth(client):
    assert client.post("/api/properties", json=LISTING).status_code in (401, 403)


def test_create_listing(client, supabase):
    response = client.post("/api/properties", json=LISTING, headers=auth_header("owner-9"))

    assert response.status_code == 201, response.text
    created = response.json()
    assert created["type"] == "room"
    assert created["landlord"]["id"] == "owner-9"
    owner = next(u for u in supabase.tables["users"] if u["id"] == "owner-9")
    assert owner["myproperties"] == [created["id"]]


def test_invalid_listing_reports_fields(client):
    response = client.post("/api/properties", json={**LISTING, "contactPhone": "999"}, headers=auth_header("owner-9"))
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "contact_phone"


def test_upload_listing_image(client, supabase):
    response = client.post(
        "/api/properties/images",
        params={"filename": "front.jpg"},
        content=b"jpeg-bytes",
        headers={**auth_header("owner-9"), "Content-Type": "image/jpeg"},
    )
    assert response.status_code == 201
    assert response.json()["url"].startswith("https://cdn.example.test/property-images/")


def test_expired_token(client):
    headers = {"Authorization": f"Bearer {token_for('owner-9', expires_in=-60)}"}
    response = client.get("/api/profile", headers=headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "Token has expired"


def test_favorites(client):
    headers = auth_header("owner-9")
    assert client.put("/api/profile/favorites/2", headers=headers).json() == {"favorites": ["2"]}
    assert ids(client.get("/api/profile/favorites", headers=headers)) == ["2"]
    assert client.delete("/api/profile/favorites/2", headers=headers).json() == {"favorites": []}


def test_profile(client):
    headers = auth_header("owner-9")
    assert client.get("/api/profile", headers=headers).json()["name_en"] == "Salma"
    updated = client.patch("/api/profile", json={"location_en": "Banani"}, headers=headers).json()
    assert updated["location_en"] == "Banani"
    assert client.patch("/api/profile", json={"id": "x"}, headers=headers).status_code == 400


def test_chat_flow(client):
    tenant = auth_header("tenant-7")
    chat_id = client.post("/api/chats", json={"property_id": "1", "owner_id": "owner-1"}, headers=tenant).json()["chat_id"]

    sent = client.post(f"/api/chats/{chat_id}/messages", json={"text": "Is it available?"}, headers=tenant)
    assert sent.status_code == 201
    assert sent.json()["receiver_id"] == "owner-1"

    owner = auth_header("owner-1")
    assert [c["id"] for c in client.get("/api/chats", headers=owner).json()] == [chat_id]
    messages = client.get(f"/api/chats/{chat_id}/messages", headers=owner).json()
    assert [m["text"] for m in messages] == ["Is it available?"]

    # not a participant
    assert client.get(f"/api/chats/{chat_id}/messages", headers=auth_header("stranger")).status_code == 404


def test_sign_up_duplicate_maps_to_conflict(client, supabase):
    supabase.auth.error = FakeAuthError("User already registered")
    response = client.post(
        "/api/auth/signup",
        json={"email": "a@b.com", "password": "pw", "confirm_password": "pw", "name": "A", "gender": "female"},
    )
    assert response.status_code == 409


def test_geo_search(client):
    response = client.get("/api/geo/search", params={"q": "banani"})
    assert response.json()[0]["display_name"] == "Banani"


def test_sign_in_leaves_shared_client_untouched(supabase, realtime, settings, resolver):
    auth_clients = []

    def fresh_auth_client():
        client = FakeSupabase()
        client.auth.sign_in_response = SimpleNamespace(
            user=SimpleNamespace(id="user-a", email="a@b.com", user_metadata={"name": "A"}),
            session=SimpleNamespace(
                user=SimpleNamespace(id="user-a", email="a@b.com", user_metadata={"name": "A"}),
                access_token="user-a-jwt",
                refresh_token="r",
            ),
        )
        auth_clients.append(client)
        return client

    app.state.context = AppContext(
        settings=settings,
        client=supabase,
        resolver=resolver,
        geocoder=GeocodingClient(settings),
        realtime=realtime,
        auth_client_factory=fresh_auth_client,
    )
    client = TestClient(app)

    for _ in range(2):
        response = client.post("/api/auth/signin", json={"email": "a@b.com", "password": "pw"})
        assert response.status_code == 200
        assert response.json()["access_token"] == "user-a-jwt"

    assert supabase.options.headers["Authorization"] == "Bearer service-key"
    assert supabase.auth.calls == []
    assert len(auth_clients) == 2
    assert auth_clients[0].options.headers["Authorization"] == "Bearer user-a-jwt"


def test_user_requests_run_on_token_client(client, user_tokens):
    token = token_for("owner-9")
    client.put("/api/profile/favorites/2", headers={"Authorization": f"Bearer {token}"})
    assert user_tokens == [token]

    client.get("/api/properties")
    assert user_tokens == [token]
