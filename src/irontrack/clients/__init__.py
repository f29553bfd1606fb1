"""Data service clients for IronTrack."""

from .base import DataService, Filter, FilterOp, OrderBy, Query, Session

__all__ = [
    "DataService",
    "Filter",
    "FilterOp",
    "OrderBy",
    "Query",
    "Session",
]
