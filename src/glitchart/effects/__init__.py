"""Glitch effects: the eight fx algorithms and their ordered registry."""
