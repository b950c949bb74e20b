"""Application layer."""

from gencli.application.engine import Engine, HealthReport

__all__ = ["Engine", "HealthReport"]
