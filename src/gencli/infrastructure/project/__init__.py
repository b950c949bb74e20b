"""Project context scanning."""

from gencli.infrastructure.project.scanner import ProjectContextScanner

__all__ = ["ProjectContextScanner"]
