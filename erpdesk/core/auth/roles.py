"""Role hierarchy used for page authorization (ADMIN > MANAGER > USER)."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union


class Role(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    USER = "USER"

    @property
    def level(self) -> int:
        return _LEVELS[self]

    @classmethod
    def parse(cls, value: Union["Role", str, None]) -> Optional["Role"]:
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None

    @classmethod
    def require(cls, value: Union["Role", str]) -> "Role":
        """Parse a role named in code; unknown names are a programming error."""
        role = cls.parse(value)
        if role is None:
            raise ValueError(f"Unknown role: {value!r}")
        return role


_LEVELS = {Role.ADMIN: 3, Role.MANAGER: 2, Role.USER: 1}


def role_satisfies(actual: Optional[Role], required: Role) -> bool:
    """True when ``actual`` sits at or above ``required``; no role never passes."""
    if actual is None:
        return False
    return actual.level >= required.level
