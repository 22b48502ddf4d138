"""HTTP surface of the relay."""

from .channel import ResponseChannel
from .routes import setup_routes
from .server import RelayServer, create_app

__all__ = ["RelayServer", "ResponseChannel", "create_app", "setup_routes"]
