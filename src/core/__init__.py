"""Planner core: configuration, constraint checks, validation, persistence."""
