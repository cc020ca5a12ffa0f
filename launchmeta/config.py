from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# CACHE LIMITS
# =============================================================================

# Raw payloads (jars, asset blobs, documents) are kept in an LRU region
# bounded by entry count. Parsed documents are kept without bound.
DEFAULT_PAYLOAD_CACHE_CAPACITY = 256


class Settings(BaseSettings):
    """Library settings loaded from environment (LAUNCHMETA_* variables)."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="LAUNCHMETA_", extra="ignore")

    app_name: str = "launchmeta"

    manifest_url: str = "https://launchermeta.mojang.com/mc/game/version_manifest.json"
    resource_url: str = "https://resources.download.minecraft.net"

    user_agent: str = "launchmeta/1.0"

    # Seconds; applies to connect, read and write
    request_timeout: float = 30.0

    payload_cache_capacity: int = DEFAULT_PAYLOAD_CACHE_CAPACITY


settings = Settings()
