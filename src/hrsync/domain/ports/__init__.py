"""Ports through which the domain services reach external systems."""

from __future__ import annotations

from .sources import AuthoritativeSource
from .stores import WorkflowStore

__all__ = ["AuthoritativeSource", "WorkflowStore"]
