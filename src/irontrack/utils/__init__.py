"""Shared helpers for IronTrack."""
