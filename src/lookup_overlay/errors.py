"""Exception types shared across the overlay."""


class LookupOverlayError(Exception):
    """Base class for overlay errors."""


class ListenerBindError(LookupOverlayError):
    """The relay listener could not bind its port (another instance is running)."""

    def __init__(self, host: str, port: int, reason: str = ""):
        self.host = host
        self.port = port
        message = f"Cannot listen on {host}:{port}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class DictionaryServiceUnavailable(LookupOverlayError):
    """Both dictionary service endpoints failed."""
