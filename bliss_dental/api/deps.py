from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from bliss_dental.clock import Clock, get_clock
from bliss_dental.database import get_db
from bliss_dental.exceptions import AuthenticationError

DBSession = Annotated[AsyncSession, Depends(get_db)]
ClockDep = Annotated[Clock, Depends(get_clock)]


async def bearer_token(authorization: str | None = Header(None)) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise AuthenticationError("No token provided")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationError("Invalid authorization header format")
    return token


BearerToken = Annotated[str, Depends(bearer_token)]
