"""Typed JSON-over-HTTP client.

Typical wiring::

    from jsonclient import (
        JsonNetworkClient, Settings, SettingsLocal, configure_root, initialize, shutdown_now,
    )

    configure_root()  # honors JSONCLIENT_LOG_LEVEL / JSONCLIENT_DEBUG
    settings = SettingsLocal(app_dir).load_settings() or Settings(
        cache_directory="/tmp/http-cache", max_cache_size_bytes=10_000_000
    )
    initialize(settings)
    client = JsonNetworkClient()
    user = client.execute("https://api.example.com/users/1", "GET", [], None, User)
    shutdown_now()
"""

from .adapters.json_codec import PydanticJsonCodec
from .adapters.json_network_client import JsonNetworkClient
from .adapters.settings_local import SettingsLocal
from .app.lifecycle import ClientLifecycle, default_lifecycle, initialize, shutdown_now
from .domain import (
    ClientRuntimeError,
    CodecError,
    ErrorKind,
    Header,
    JsonCodec,
    NetworkClient,
    NetworkError,
    NoConnectionError,
    NotInitializedError,
    ResponseStatusError,
    Settings,
)
from .utils.logging import configure_root

__version__ = "0.1.0"

__all__ = [
    "ClientLifecycle",
    "ClientRuntimeError",
    "CodecError",
    "ErrorKind",
    "Header",
    "JsonCodec",
    "JsonNetworkClient",
    "NetworkClient",
    "NetworkError",
    "NoConnectionError",
    "NotInitializedError",
    "PydanticJsonCodec",
    "ResponseStatusError",
    "Settings",
    "SettingsLocal",
    "configure_root",
    "default_lifecycle",
    "initialize",
    "shutdown_now",
]
