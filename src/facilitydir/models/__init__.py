from __future__ import annotations

from facilitydir.models.cache import CacheEntry, PaginationCursor
from facilitydir.models.facility import Facility, ThumbnailKey
from facilitydir.models.resource import Error, Loading, Resource, Success

__all__ = [
    # facility
    "Facility",
    "ThumbnailKey",
    # cache
    "CacheEntry",
    "PaginationCursor",
    # resource
    "Resource",
    "Loading",
    "Success",
    "Error",
]
