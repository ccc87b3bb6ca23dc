from fastapi import Depends, Header, HTTPException, Request, status
from linkforge.config import settings
from linkforge.core.db import guarded
from linkforge.core.security import decode_access_token
from linkforge.models.user import User
from linkforge.services import policy

_DENIAL_MESSAGES = {
    policy.NOT_AUTHENTICATED: "Sign in required",
    policy.ACCOUNT_INACTIVE: "Account is not active",
    policy.FORBIDDEN_ROLE_ESCALATION: "Not allowed for your role",
    policy.FORBIDDEN_TARGET_ROLE: "Not allowed for this account",
    policy.FORBIDDEN_SELF_ONLY: "You can only change your own account",
}

def raise_for_decision(decision: policy.Decision) -> None:
    """
    Translate a policy denial into an HTTP error; do nothing when allowed.

    NOT_AUTHENTICATED maps to 401, every other reason to 403.
    """
    if decision.allowed:
        return
    code = status.HTTP_401_UNAUTHORIZED if decision.reason == policy.NOT_AUTHENTICATED else status.HTTP_403_FORBIDDEN
    raise HTTPException(
        status_code=code,
        detail={"code": decision.reason, "message": _DENIAL_MESSAGES.get(decision.reason, "Forbidden")},
    )

def _token_from(request: Request, authorization: str | None) -> str | None:
    token = None
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    # 2) Secondly HttpOnly Cookie
    if not token:
        token = request.cookies.get(settings.access_cookie_name)
    return token

async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> User:
    """
    FastAPI dependency to get the current authenticated, active user.

    The JWT is read from the Authorization header (Bearer) or, failing that,
    the HttpOnly access cookie. The user row is reloaded on every request so
    role and status changes take effect immediately.

    Raises:
        HTTPException (401): AUTH_REQUIRED / AUTH_INVALID_TOKEN / AUTH_USER_NOT_FOUND
        HTTPException (403): ACCOUNT_INACTIVE for suspended or inactive accounts
    """
    token = _token_from(request, authorization)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_REQUIRED")

    try:
        payload = decode_access_token(token)
        user_id: str = payload.get("sub")
    except Exception:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_INVALID_TOKEN")

    try:
        user = await guarded(User.get_or_none(id=user_id))
    except ValueError:
        # Malformed subject claim
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_INVALID_TOKEN")
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_USER_NOT_FOUND")

    raise_for_decision(policy.require_active_session(user))
    return user

async def require_staff(current: User = Depends(get_current_user)) -> User:
    """
    FastAPI dependency for user-management endpoints (ADMIN or FOUNDER).

    Raises:
        HTTPException (403): FORBIDDEN_ROLE_ESCALATION for USER accounts
    """
    raise_for_decision(policy.can_list_users(current))
    return current
