"""
Shared FastAPI dependencies.
"""
from fastapi import Request

from .scheduling import SchedulingCore


def get_scheduling(request: Request) -> SchedulingCore:
    """The scheduling core created in the application lifespan."""
    return request.app.state.scheduling
