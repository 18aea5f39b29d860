"""Distribute AI-assistant assets from a vault into local coding tools."""
