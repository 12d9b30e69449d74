"""Ambient context shown next to the composer (current weather)."""
