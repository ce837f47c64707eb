"""
Authorization Schemas
Roles, actions and the role -> permission table.
"""
from pydantic import BaseModel
from typing import Dict, List, Literal


UserRole = Literal["admin", "employee"]
Action = Literal["read", "write", "delete", "import", "export"]


class Permission(BaseModel):
    """Actions a role may perform on one resource."""
    resource: str
    actions: List[Action]


ROLE_PERMISSIONS: Dict[str, List[Permission]] = {
    "admin": [
        Permission(resource="employees", actions=["read", "write", "delete", "import", "export"]),
    ],
    "employee": [
        Permission(resource="employees", actions=["read"]),
    ],
}


class CurrentUser(BaseModel):
    """Caller identity attached to a request."""
    id: str
    role: UserRole

    def can(self, resource: str, action: str) -> bool:
        return any(
            p.resource == resource and action in p.actions
            for p in ROLE_PERMISSIONS.get(self.role, [])
        )
