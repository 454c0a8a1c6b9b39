"""Workspace management commands for quizmaster."""
