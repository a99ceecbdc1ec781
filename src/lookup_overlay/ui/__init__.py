"""UI layer - PySide6 presentation components."""

from .popup_window import PopupBridge, PopupWindow

__all__ = ["PopupBridge", "PopupWindow"]
