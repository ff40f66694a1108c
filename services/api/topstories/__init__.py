"""HN Top Stories API."""
