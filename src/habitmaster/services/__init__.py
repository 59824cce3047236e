"""Service module exports."""

from . import analytics, habits, notifications, recurrence

__all__ = ["analytics", "habits", "notifications", "recurrence"]
