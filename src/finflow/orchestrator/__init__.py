"""Orchestration module."""
from .tracker import FinanceTracker

__all__ = ["FinanceTracker"]
