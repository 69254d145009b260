"""
FastAPI dependency functions for objects held in application state.
"""

from fastapi import Request

from arena.judge.piston import PistonClient
from arena.realtime import ConnectionManager


def get_executor(request: Request) -> PistonClient:
    """
    Get the code execution client from application state.

    Args:
        request: FastAPI request object

    Returns:
        PistonClient: Shared execution API client
    """
    return request.app.state.executor


def get_connections(request: Request) -> ConnectionManager:
    """
    Get the WebSocket connection manager from application state.

    Args:
        request: FastAPI request object

    Returns:
        ConnectionManager: Broadcast hub for connected clients
    """
    return request.app.state.connections
