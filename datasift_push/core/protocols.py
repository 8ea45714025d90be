"""Protocol definitions (interfaces) for the push client.

The subscription layer never talks HTTP itself; it depends on these
interfaces so any authenticated transport, or a fake in tests, can be
plugged in.
"""

from typing import Protocol, Dict, Any


class APISession(Protocol):
    """Authenticated access to the API, owned by the caller."""

    def call_api(self, endpoint: str, params: Dict[str, str]) -> Dict[str, Any]:
        """Call an API endpoint and return its decoded JSON body.

        Args:
            endpoint: Endpoint path, e.g. ``push/get``
            params: Request parameters, all values already strings

        Returns:
            The decoded JSON object

        Raises:
            APIError: If the request fails or the response cannot be decoded
            AccessDeniedError: If the credentials are rejected
        """
        ...
