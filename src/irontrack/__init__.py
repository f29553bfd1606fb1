"""IronTrack: fitness tracking client.

Exercise library search, routines, workout sessions and onboarding on top of
a hosted data service (Supabase) or a local SQLite backend.
"""

__version__ = "0.1.0"
