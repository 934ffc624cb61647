"""
Known HTTP status codes from the Steam Community Market and what they mean
for a price lookup.
"""

from typing import Dict, Optional

STEAM_RESPONSES: Dict[int, str] = {
    400: "Bad request. Check the item name, app id and currency.",
    401: "Unauthorized. Steam rejected the request.",
    403: "Forbidden. Steam refused to serve this request.",
    404: "Item not found on the Steam Community Market.",
    429: "Too many requests. Steam is rate limiting this client, slow down.",
    500: "Steam internal server error. Is Steam having issues?",
    502: "Bad gateway. Steam is having issues.",
    503: "Steam is temporarily unavailable.",
    504: "Steam gateway timeout.",
}


def describe_status(status_code: int) -> Optional[str]:
    """Return the known meaning of a status code, or None."""
    return STEAM_RESPONSES.get(status_code)


def unsuccessful_response(status_code: int) -> str:
    """Message for a non-200 status, falling back to a generic one."""
    return describe_status(status_code) or (
        f"Unsuccessful response ({status_code}). Is Steam having issues?"
    )
