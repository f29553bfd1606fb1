"""Supabase-backed data service."""

from .client import SupabaseDataService

__all__ = ["SupabaseDataService"]
