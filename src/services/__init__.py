"""Planner services: store, calendar export, reports."""
