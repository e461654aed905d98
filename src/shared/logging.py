"""
Logging setup with per-export run IDs.

Provides a consistent logging setup for the server and CLI
so that a single export can be followed through traversal and rendering.
"""

import logging
import uuid


def setup_logging(component_name: str, level: str = "INFO") -> logging.Logger:
    """
    Configure logging for a component.

    Args:
        component_name: Name of the component (used as logger name).
        level: Log level string (e.g. 'INFO', 'DEBUG').

    Returns:
        Configured logger instance.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
    )
    return logging.getLogger(component_name)


def generate_run_id() -> str:
    """Generate a short ID that tags every log line of one export run."""
    return uuid.uuid4().hex[:12]
