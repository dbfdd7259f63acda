"""Projects, project settings, and per-project field definitions."""
