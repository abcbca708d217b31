"""
WebSocket server and event handling for the Tresillo game.
"""

from .events import *
from .server import app, create_app

__all__ = ["app", "create_app"]
