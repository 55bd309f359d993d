"""Small parsing and logging helpers."""
