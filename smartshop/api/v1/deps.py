"""Shared FastAPI dependencies."""
from fastapi import Request

from smartshop.context import AppContext


def get_context(request: Request) -> AppContext:
    """The application context created in the lifespan handler."""
    return request.app.state.ctx
