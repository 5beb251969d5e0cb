# Area: Shared
"""
Shared utilities used by the engine, the session layer and the CLI.
"""

from .logging_config import setup_logging, TerminalFormatter, JSONFormatter

__all__ = [
    "setup_logging",
    "TerminalFormatter",
    "JSONFormatter",
]
