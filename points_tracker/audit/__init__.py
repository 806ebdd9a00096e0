"""Audit logging package."""

from points_tracker.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
