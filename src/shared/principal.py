"""The authenticated caller, as attached to each request upstream.

An authenticating proxy verifies the shopper's identity and forwards it in
headers. The checkout API trusts these headers and only reads them.

    X-User-Id     required, the owner of carts and orders
    X-User-Role   user | admin (default: user)
    X-User-Type   personal | wholesale (default: personal)
"""

from dataclasses import dataclass
from enum import Enum

from fastapi import Depends, Header, HTTPException


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


class BuyerType(Enum):
    PERSONAL = "personal"
    WHOLESALE = "wholesale"


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: Role = Role.USER
    buyer_type: BuyerType = BuyerType.PERSONAL

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_wholesale_buyer(self) -> bool:
        return self.buyer_type == BuyerType.WHOLESALE


def get_principal(
    x_user_id: str = Header(default=""),
    x_user_role: str = Header(default=Role.USER.value),
    x_user_type: str = Header(default=BuyerType.PERSONAL.value),
) -> Principal:
    if not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        role = Role(x_user_role.lower())
        buyer_type = BuyerType(x_user_type.lower())
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid principal") from None
    return Principal(user_id=x_user_id.strip(), role=role, buyer_type=buyer_type)


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return principal
