"""Command-line interface for skillsync."""
