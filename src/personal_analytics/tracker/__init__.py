"""Orchestration of fetch, setup and report operations."""

from .time_tracker import TimeTracker

__all__ = ["TimeTracker"]
