"""Persistent quiz library."""

from .store import QuizStore

__all__ = ["QuizStore"]
