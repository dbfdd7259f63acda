"""Organizer-only endpoints for syncing, importing, and reviewing submissions."""
