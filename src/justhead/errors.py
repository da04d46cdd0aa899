"""Centralized diagnostic message definitions and helpers.

Nothing in justhead raises for bad input. Malformed declarations are logged,
reported as a :class:`JustHeadWarning` and then ignored.
"""

from __future__ import annotations

import logging
import warnings

logger = logging.getLogger(__name__)


class JustHeadWarning(UserWarning):
    """Emitted when a declaration is ignored because of its shape or position."""


def generate_error_message(
    code: str,
    field: str | None = None,
    expected: str | None = None,
    actual: str | None = None,
) -> str:
    """Generate a human-readable message from a diagnostic code.

    Args:
        code: The diagnostic code string (kebab-case format)
        field: The declaration field the diagnostic is about
        expected: Name of the expected type
        actual: Name of the type that was found

    Returns:
        Human-readable message string
    """
    messages = {
        "invalid-field-type": f'{field} should be of type "{expected}". Instead found type "{actual}"',
        "invalid-tag-type": f'{field} entries should be of type "{expected}". Instead found type "{actual}"',
        "invalid-attribute-value": f'{field} attribute values should be of type "{expected}". '
        f'Instead found type "{actual}"',
        "unknown-field": f'Unknown head field "{field}" ignored',
        "nested-instance": (
            "You may be attempting to nest head declarations within each other, which is not allowed. "
            "The nested declaration is ignored."
        ),
    }

    # Return message or fall back to the code itself if not found
    return messages.get(code, code)


def report(
    code: str,
    *,
    field: str | None = None,
    expected: str | None = None,
    actual: str | None = None,
    level: int = logging.ERROR,
    stacklevel: int = 3,
) -> str:
    """Log the diagnostic ``code`` and emit it as a :class:`JustHeadWarning`."""
    message = generate_error_message(code, field, expected, actual)
    logger.log(level, "%s: %s", code, message)
    warnings.warn(message, JustHeadWarning, stacklevel=stacklevel)
    return message
