from seenlog.models.collection import Collection, CollectionMembership, DefaultCollection
from seenlog.models.media import MediaItem, MediaLot
from seenlog.models.review import Review, Visibility
from seenlog.models.seen import SeenRecord
from seenlog.models.summary import Summary
from seenlog.models.user import User

__all__ = [
    "Collection",
    "CollectionMembership",
    "DefaultCollection",
    "MediaItem",
    "MediaLot",
    "Review",
    "SeenRecord",
    "Summary",
    "User",
    "Visibility",
]
"""SQLAlchemy ORM models for the Seenlog API."""
