"""
Configuration module for the members API.

Environment variables are read exactly once, when a Settings object is
constructed at startup. The resulting object is handed to the record store,
the media uploader and the keep-alive pinger, which only ever see their own
config group.
"""

import os
from dataclasses import dataclass
from urllib.parse import urlsplit

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
LOOPBACK_HOSTS = ("127.0.0.1", "localhost", "::1", "0.0.0.0")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _default_ping_url(port: int) -> str:
    # Render publishes the service's public address in RENDER_EXTERNAL_URL.
    public_url = os.getenv("RENDER_EXTERNAL_URL", "").strip()
    if public_url:
        return f"{public_url.rstrip('/')}/ping"
    return f"http://127.0.0.1:{port}/ping"


@dataclass(frozen=True)
class MongoConfig:
    """
    Immutable configuration for the MongoDB connection.

    Attributes:
        uri: Connection string passed to the driver
        database: Database name used when the URI does not name one
        collection: Collection holding member documents
        server_selection_timeout_ms: How long the driver waits for a server
    """
    uri: str = "mongodb://localhost:27017"
    database: str = "members"
    collection: str = "members"
    server_selection_timeout_ms: int = 5000


@dataclass(frozen=True)
class MediaHostConfig:
    """
    Credentials and endpoint of the Cloudinary media host.

    Attributes:
        cloud_name: Cloudinary account (cloud) name
        api_key: Public API key sent with each signed upload
        api_secret: Secret used to sign uploads, never sent over the wire
        api_base: Base URL of the Cloudinary upload API
        timeout: Timeout for a single upload request (seconds)
    """
    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""
    api_base: str = "https://api.cloudinary.com/v1_1"
    timeout: float = 30.0

    @property
    def upload_url(self) -> str:
        """Upload endpoint with automatic resource-type detection."""
        return f"{self.api_base.rstrip('/')}/{self.cloud_name}/auto/upload"

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


@dataclass(frozen=True)
class KeepAliveConfig:
    """
    Configuration for the self-ping loop.

    Attributes:
        url: Public URL of this service's /ping route
        interval: Seconds between two pings
        timeout: Timeout for a single ping request (seconds)
        enabled: Whether the loop is started with the application
    """
    url: str
    interval: float = 300.0
    timeout: float = 10.0
    enabled: bool = True

    @property
    def is_loopback(self) -> bool:
        """True when pings never leave the host, so they cannot keep it awake."""
        return urlsplit(self.url).hostname in LOOPBACK_HOSTS


class Settings:
    """
    Central settings object that aggregates all configuration.

    Loads configuration from environment variables with fallbacks
    to development defaults. Build one instance at startup and pass
    it to create_app().
    """

    def __init__(self):
        self.server_port = int(os.getenv("PORT", "3000"))
        log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
        self.log_level = log_level if log_level in LOG_LEVELS else "INFO"
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]

        self.mongo = MongoConfig(
            uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
            database=os.getenv("MONGO_DB", "members"),
            collection=os.getenv("MONGO_COLLECTION", "members"),
            server_selection_timeout_ms=int(os.getenv("MONGO_TIMEOUT_MS", "5000"))
        )

        self.media = MediaHostConfig(
            cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME", ""),
            api_key=os.getenv("CLOUDINARY_API_KEY", ""),
            api_secret=os.getenv("CLOUDINARY_API_SECRET", ""),
            api_base=os.getenv("CLOUDINARY_API_BASE", "https://api.cloudinary.com/v1_1"),
            timeout=float(os.getenv("CLOUDINARY_TIMEOUT", "30"))
        )

        self.keep_alive = KeepAliveConfig(
            url=os.getenv("KEEP_ALIVE_URL") or _default_ping_url(self.server_port),
            interval=float(os.getenv("KEEP_ALIVE_INTERVAL", "300")),
            timeout=float(os.getenv("KEEP_ALIVE_TIMEOUT", "10")),
            enabled=_env_bool("KEEP_ALIVE_ENABLED", True)
        )

    @property
    def api_title(self) -> str:
        """API title for OpenAPI documentation."""
        return "Members API"

    @property
    def api_version(self) -> str:
        """API version string."""
        return "1.0.0"

    @property
    def api_description(self) -> str:
        """API description for OpenAPI documentation."""
        return (
            "REST backend for member records stored in MongoDB, with photo "
            "uploads to Cloudinary and a keep-alive self ping."
        )

    def summary(self) -> dict:
        """Loggable view of the configuration, without secrets."""
        return {
            "port": self.server_port,
            "mongo_database": self.mongo.database,
            "mongo_collection": self.mongo.collection,
            "media_host_configured": self.media.configured,
            "keep_alive_enabled": self.keep_alive.enabled,
            "keep_alive_url": self.keep_alive.url,
            "keep_alive_interval": self.keep_alive.interval,
        }
