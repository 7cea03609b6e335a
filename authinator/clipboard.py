"""Copy a derived code to the system clipboard."""

import logging

import pyperclip

logger = logging.getLogger(__name__)


def copy_code(code: str) -> bool:
    """Returns False (and logs) when no clipboard mechanism is available."""
    try:
        pyperclip.copy(code)
    except pyperclip.PyperclipException as e:
        logger.warning("Failed to copy code to clipboard: %s", e)
        return False
    return True
