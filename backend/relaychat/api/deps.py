"""Dependency injection for routes and socket handlers."""

from starlette.requests import HTTPConnection

from relaychat.api.ws.manager import ConnectionManager
from relaychat.config import Settings
from relaychat.services.broadcast_service import BroadcastEngine
from relaychat.services.message_backend import MessageBackend


def get_app_settings(conn: HTTPConnection) -> Settings:
    return conn.app.state.settings


def get_connection_manager(conn: HTTPConnection) -> ConnectionManager:
    return conn.app.state.connection_manager


def get_message_backend(conn: HTTPConnection) -> MessageBackend:
    return conn.app.state.message_backend


def get_broadcast_engine(conn: HTTPConnection) -> BroadcastEngine:
    return conn.app.state.broadcast_engine
