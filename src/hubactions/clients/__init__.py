from hubactions.clients.base import ApiResponse, PermanentHTTPError, RetryableHTTPError
from hubactions.clients.controller import ControllerClient
from hubactions.clients.hub import HubClient

__all__ = [
    "ApiResponse",
    "ControllerClient",
    "HubClient",
    "PermanentHTTPError",
    "RetryableHTTPError",
]
