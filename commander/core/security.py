# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Bearer identity: verifies the caller's JWT and exposes who is acting.

Tokens are issued elsewhere; this module only reads them.
"""

from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from commander.core.config import settings

COMMANDER_ROLE = "Commander"

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Actor:
    professional_id: str
    role: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_commander(self) -> bool:
        return self.role == COMMANDER_ROLE


def decode_token(token: str) -> Actor:
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    # The two token flavours in circulation spell the id claim differently.
    professional_id = claims.get("professional_id") or claims.get("professionalId")
    if not professional_id:
        raise HTTPException(status_code=401, detail="Invalid token")
    return Actor(
        professional_id=str(professional_id),
        role=claims.get("role"),
        email=claims.get("email"),
    )


def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Actor:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="No token provided")
    return decode_token(credentials.credentials)
