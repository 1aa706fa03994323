"""
Authenticated principal
"""

from typing import List, Optional
from pydantic import BaseModel

ADMIN_ROLE = "admin"


class User(BaseModel):
    """Claims read from a verified bearer token"""

    id: Optional[str] = None
    email: Optional[str] = None
    roles: List[str] = []

    @classmethod
    def from_claims(cls, claims: dict) -> "User":
        """Build a principal from token claims; `id` wins over `sub`"""
        roles = claims.get("roles") or []
        if isinstance(roles, str):
            roles = [roles]
        return cls(
            id=claims.get("id") or claims.get("sub"),
            email=claims.get("email"),
            roles=roles,
        )

    def has_role(self, role: str) -> bool:
        return role.lower() in {r.lower() for r in self.roles}

    def is_admin(self) -> bool:
        return self.has_role(ADMIN_ROLE)
