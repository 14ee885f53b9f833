"""Anonymous voter identity.

A voter is identified by a salted SHA-256 of the apparent client address and
user agent. Clients control both headers, so this only deters casual abuse;
it is not authentication.
"""

import hashlib

from fastapi import Request

from dytto_api.app.config import settings

UNKNOWN = "unknown"


def client_ip(request: Request) -> str:
    return (
        request.headers.get("x-forwarded-for")
        or request.headers.get("x-real-ip")
        or UNKNOWN
    )


def derive_voter_hash(ip: str, user_agent: str, salt: str) -> str:
    return hashlib.sha256(f"{ip}{user_agent}{salt}".encode()).hexdigest()


def get_voter_hash(request: Request) -> str:
    """FastAPI dependency: the caller's voter hash."""
    user_agent = request.headers.get("user-agent") or UNKNOWN
    return derive_voter_hash(client_ip(request), user_agent, settings.voter_salt)
