from .user import User
from .event import Event
from .event_post import EventPost
from .applicant import Applicant

__all__ = [
    "User",
    "Event",
    "EventPost",
    "Applicant",
]
