"""
Application context.

Holds the long-lived collaborators (settings, Supabase client, location
resolver, repositories, geocoder) and builds the per-session stores on top
of them. Passed explicitly; there are no module-level stores.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from supabase import AsyncClient, Client

from babui.config import Settings, get_settings
from babui.db.client import get_supabase_client, get_supabase_client_with_token, new_auth_client
from babui.db.repository import ChatRepository, MessageRepository, PropertyRepository, UserRepository
from babui.listings.service import ListingService
from babui.locations.resolver import LocationResolver, get_location_resolver
from babui.models.user import SessionUser
from babui.search.session import SearchSession
from babui.services.autocomplete import PlaceAutocomplete
from babui.services.geocoding import GeocodingClient
from babui.services.storage import StorageService
from babui.stores.auth_store import AuthStore
from babui.stores.chat_store import ChatStore
from babui.stores.property_store import PropertyStore


@dataclass
class Session:
    """Stores belonging to one user session."""

    auth: AuthStore
    properties: PropertyStore
    chats: ChatStore
    search: SearchSession
    storage: StorageService
    listings: ListingService

    async def close(self) -> None:
        self.properties.close()
        await self.chats.close()


@dataclass
class AppContext:
    settings: Settings
    client: Client
    resolver: LocationResolver
    geocoder: GeocodingClient
    realtime: Optional[AsyncClient] = None
    auth_client_factory: Callable[[], Client] = new_auth_client
    user_client_factory: Callable[[str], Client] = get_supabase_client_with_token
    property_repo: PropertyRepository = field(init=False)

    def __post_init__(self):
        self.property_repo = PropertyRepository(self.client)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "AppContext":
        settings = settings or get_settings()
        return cls(
            settings=settings,
            client=get_supabase_client(),
            resolver=get_location_resolver(),
            geocoder=GeocodingClient(settings),
        )

    def new_session(self, user_id: Optional[str] = None, access_token: Optional[str] = None) -> Session:
        """
        Fresh stores for one session.

        `user_id` attaches an already-verified user, None is a guest. With an
        `access_token` every table and storage call runs as that user under RLS.
        Auth calls get their own client so a sign-in never touches `self.client`.
        """
        client = self.user_client_factory(access_token) if access_token else self.client
        users = UserRepository(client)
        properties_repo = PropertyRepository(client)
        storage = StorageService(client)

        auth = AuthStore(users, storage, self.settings, self.auth_client_factory)
        if user_id:
            auth.user = SessionUser(id=user_id)
        else:
            auth.set_guest_mode(True)
        properties = PropertyStore(properties_repo)
        return Session(
            auth=auth,
            properties=properties,
            chats=ChatStore(auth, ChatRepository(client), MessageRepository(client), self.realtime),
            search=SearchSession(properties, self.resolver),
            storage=storage,
            listings=ListingService(properties_repo, users, storage, self.settings),
        )

    def new_autocomplete(self) -> PlaceAutocomplete:
        return PlaceAutocomplete(self.geocoder, delay=self.settings.autocomplete_debounce_seconds)
