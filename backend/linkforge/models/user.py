# linkforge/models/user.py
"""
Database model for users.
Represents an account: credentials, public handle, role and status.
"""
import uuid
from tortoise import fields, models

from linkforge.models.enums import Role, Status

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has one Profile (one-to-one, via related_name="profile")
    - Has many Visits and Activities (one-to-many, cascade on delete)

    Security:
    - Password is stored as an argon2 hash
    - Email and username are unique across all users
    - Role and status gate what the account may do (see services.policy)
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    email = fields.CharField(max_length=256, unique=True, index=True)
    username = fields.CharField(max_length=32, unique=True, index=True)  # Public page handle
    name = fields.CharField(max_length=100, null=True)  # Display name
    bio = fields.CharField(max_length=160, null=True)
    password_hash = fields.CharField(max_length=255)
    role = fields.CharEnumField(Role, max_length=16, default=Role.USER)
    status = fields.CharEnumField(Status, max_length=16, default=Status.ACTIVE)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"

    def __str__(self) -> str:
        return self.username
