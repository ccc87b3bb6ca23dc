# linkforge/models/enums.py
"""
Closed role/status vocabularies shared by the models and the authorization policy.
"""
from enum import Enum


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    FOUNDER = "FOUNDER"


class Status(str, Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    INACTIVE = "INACTIVE"


# Roles that may manage other accounts
STAFF_ROLES = frozenset({Role.ADMIN, Role.FOUNDER})
