"""Speaker sessions and the speaker-facing submission flow."""
