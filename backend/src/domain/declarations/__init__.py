"""Declarations domain module - template placeholder rendering"""

from .placeholders import (
    render_placeholders,
    find_tokens,
    format_postal_code,
    format_long_date,
    build_placeholder_values,
)

__all__ = [
    "render_placeholders",
    "find_tokens",
    "format_postal_code",
    "format_long_date",
    "build_placeholder_values",
]
