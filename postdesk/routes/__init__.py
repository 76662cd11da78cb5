from .schedules import router as schedules_router
from .reminders import router as reminders_router
from .calendar import router as calendar_router
from .event_posts import router as event_posts_router
from .hiring import router as hiring_router

__all__ = [
    "schedules_router",
    "reminders_router",
    "calendar_router",
    "event_posts_router",
    "hiring_router",
]
