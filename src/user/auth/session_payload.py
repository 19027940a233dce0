from typing import NotRequired, TypedDict


class SessionTokenPayload(TypedDict):
    """Claims carried by a session token"""

    sub: str  # User ID
    iat: int  # Issued-at timestamp
    exp: int  # Absolute expiration timestamp
    lastActivity: NotRequired[int]  # Epoch seconds of the last refresh
