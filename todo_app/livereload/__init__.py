"""Live reload: channel registry, build identity and asset broadcasts."""

from todo_app.livereload.broadcaster import StyleBroadcaster
from todo_app.livereload.build_identity import BuildIdentity, build_identity
from todo_app.livereload.channel import WebSocketChannel
from todo_app.livereload.registry import Channel, ConnectionRegistry

__all__ = [
    "BuildIdentity",
    "Channel",
    "ConnectionRegistry",
    "StyleBroadcaster",
    "WebSocketChannel",
    "build_identity",
]
