"""
Operator-facing observability helpers.
"""

from .console_links import ConsoleLinkBuilder, console_domain

__all__ = [
    "ConsoleLinkBuilder",
    "console_domain",
]
