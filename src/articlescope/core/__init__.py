"""Core extraction engine, collaborators, and configuration."""
