"""Caller identity for API routes.

Authentication is handled upstream; by the time a request reaches these
routes the gateway has put the authenticated user id in ``X-User-Id``.
"""

from fastapi import Header, HTTPException


async def current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()
