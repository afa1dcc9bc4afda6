"""
Clipboard access.
Copy failures are never shown to the user, the code stays visible in the panel.
"""
import logging

from PySide6.QtGui import QGuiApplication

logger = logging.getLogger(__name__)


def copy_to_clipboard(text: str) -> bool:
    """Put `text` on the system clipboard. Returns False if that was not possible."""
    try:
        clipboard = QGuiApplication.clipboard()
        if clipboard is None:
            return False
        clipboard.setText(text)
        return True
    except Exception as e:
        logger.debug(f"Could not copy to clipboard: {e}")
        return False
