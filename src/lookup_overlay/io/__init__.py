"""I/O layer - process boundaries: HTTP listener, mpv pipe and parent watch."""

from .http_listener import RelayCommands, RelayListener, bind_listener, create_app
from .mpv_pipe import MpvPipe, build_script_message
from .parent_monitor import ParentMonitor

__all__ = [
    "MpvPipe",
    "ParentMonitor",
    "RelayCommands",
    "RelayListener",
    "bind_listener",
    "build_script_message",
    "create_app",
]
