"""HTTP gateway."""

from newsbot.gateway.server import build_server, create_app

__all__ = ["create_app", "build_server"]
