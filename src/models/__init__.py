"""Planner data models."""
