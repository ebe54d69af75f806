from badge_request.models.badge_request import BadgeRequest
from badge_request.models.settings import Settings

__all__ = [
    "BadgeRequest",
    "Settings",
]
