"""Core module for the RES Bridge registry client."""

from res_bridge.core.config import get_config, reload_config, BridgeConfig
from res_bridge.core.errors import (
    RegistryProtocolError,
    RegistryTransportError,
    RegistryUnavailableError,
)
from res_bridge.core.wire import REGISTRY_WIRE

__all__ = [
    "get_config",
    "reload_config",
    "BridgeConfig",
    "REGISTRY_WIRE",
    "RegistryUnavailableError",
    "RegistryProtocolError",
    "RegistryTransportError",
]
