# linkforge/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: Account, credentials, role and status
- Profile: Public link page settings and view counters (one per User)
- Link: Ordered outbound link on a Profile
- Visit: Raw page-view log entry
- Activity: Dashboard activity log entry
"""
from .enums import Role, Status
from .user import User
from .profile import Profile
from .link import Link
from .visit import Visit
from .activity import Activity
