from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Server
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = False

    # Supabase
    supabase_url: str
    supabase_anon_key: str
    supabase_service_key: str = ""
    supabase_jwt_secret: str = ""

    # Storage buckets
    property_images_bucket: str = "property-images"
    profile_pictures_bucket: str = "profile-pictures"

    # Geocoding / directions
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    osrm_base_url: str = "https://router.project-osrm.org"
    geocoder_user_agent: str = "babui/0.1 (rental search)"
    geocoder_country_codes: str = "bd"
    http_timeout_seconds: float = 15.0

    # Search
    autocomplete_debounce_seconds: float = 0.4
    nearby_radius_km: float = 5.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
