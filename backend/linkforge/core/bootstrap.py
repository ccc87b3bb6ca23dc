# linkforge/core/bootstrap.py
"""
Bootstrap module for application initialization.
Handles initial setup tasks such as creating the founder account on first startup.
"""
import os
import logging
from linkforge.models.enums import Role, Status
from linkforge.models.user import User
from linkforge.core.security import hash_password
from linkforge.services.profiles import find_or_create_default

logger = logging.getLogger("uvicorn.error")

async def ensure_default_founder() -> None:
    """
    If no founder exists in the database, create one based on environment variables.
    Only takes effect under the following conditions:
      - Currently no user with role=FOUNDER
      - And FOUNDER_PASSWORD is set (to avoid using a default weak password)
    Environment variables:
      FOUNDER_USERNAME (default: "founder")
      FOUNDER_EMAIL    (default: "founder@example.com")
      FOUNDER_PASSWORD (required, otherwise won't create)
    If an account with FOUNDER_EMAIL already exists it is promoted instead.
    """
    if await User.filter(role=Role.FOUNDER).exists():
        return

    founder_password = os.getenv("FOUNDER_PASSWORD")
    if not founder_password:
        logger.warning("[bootstrap] No founder present, but FOUNDER_PASSWORD not set -> skip creating founder.")
        return

    founder_username = os.getenv("FOUNDER_USERNAME", "founder")
    founder_email = os.getenv("FOUNDER_EMAIL", "founder@example.com")

    existing = await User.get_or_none(email=founder_email)
    if existing:
        existing.role = Role.FOUNDER
        existing.status = Status.ACTIVE
        await existing.save(update_fields=["role", "status", "updated_at"])
        logger.warning("[bootstrap] Promoted existing account to founder -> username=%s id=%s",
                       existing.username, existing.id)
        return

    # If username is already taken, create a non-conflicting name
    base_username = founder_username
    suffix = 1
    while await User.filter(username=founder_username).exists():
        suffix += 1
        founder_username = f"{base_username}{suffix}"

    u = await User.create(
        username=founder_username,
        email=founder_email,
        name=founder_username,
        password_hash=hash_password(founder_password),
        role=Role.FOUNDER,
        status=Status.ACTIVE,
    )
    await find_or_create_default(u)
    logger.warning("[bootstrap] Created founder -> username=%s email=%s id=%s",
                   u.username, u.email, u.id)
