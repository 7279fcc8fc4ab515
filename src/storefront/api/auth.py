"""Bearer-token principal extraction for the Storefront API.

Tokens have the form ``<role>:<subject>`` where role is ``user`` or
``admin``; issuing and signing them belongs to the identity service in front
of this API.
"""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException

_ROLES = {"user", "admin"}


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def current_principal(authorization: str = Header(default="")) -> Principal:
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Missing or invalid bearer token")

    role, sep, subject = token.strip().partition(":")
    if not sep or role not in _ROLES or not subject:
        raise HTTPException(status_code=401, detail="Missing or invalid bearer token")

    return Principal(user_id=subject, role=role)


def admin_principal(principal: Principal = Depends(current_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return principal
