"""Application shell."""

from .app import ApplicationShell, Screen, ShellDependencies, create_shell

__all__ = ["ApplicationShell", "Screen", "ShellDependencies", "create_shell"]
