# linkforge/api/v1/routers/auth.py
from fastapi import APIRouter, HTTPException, Response, status, Depends
from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from linkforge.config import settings
from linkforge.core.db import guarded
from linkforge.core.errors import Conflict
from linkforge.core.security import verify_password, create_access_token, hash_password
from linkforge.api.v1.deps import get_current_user
from linkforge.api.v1.serializers import ensure_unique, user_to_dict
from linkforge.models.enums import Role, Status
from linkforge.models.profile import Profile
from linkforge.models.user import User
from linkforge.schemas.auth import LoginRequest, RegisterIn
from linkforge.services import policy
from linkforge.services.profiles import default_profile_fields

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register")
async def register(body: RegisterIn):
    """
    Register a new user account.

    Creates the account (role USER, status ACTIVE) together with its default
    link page in one transaction. Username and email must be unique.

    Returns:
        dict: success envelope with the new user's id, username and email

    Raises:
        HTTPException (409): USERNAME_EXISTS / EMAIL_EXISTS
        HTTPException (422): invalid username, email or password
    """
    await ensure_unique(username=body.username, email=body.email)
    try:
        async with in_transaction() as conn:
            u = await User.create(
                username=body.username,
                email=body.email,
                name=body.name or body.username,
                password_hash=hash_password(body.password),
                role=Role.USER,
                status=Status.ACTIVE,
                using_db=conn,
            )
            await Profile.create(user_id=u.id, using_db=conn, **default_profile_fields(u))
    except IntegrityError:
        # Lost a race with a concurrent registration of the same handle/email
        raise Conflict("Username or email already registered")
    return {"success": True, "data": {"id": str(u.id), "username": u.username, "email": u.email}}

@router.post("/login")
async def login(payload: LoginRequest, response: Response):
    """
    Authenticate by email and password and issue an access token.

    The token is returned in the body and also set as an HttpOnly cookie for
    browser clients.

    Raises:
        HTTPException (401): AUTH_INVALID_CREDENTIALS
        HTTPException (403): ACCOUNT_INACTIVE for suspended or inactive accounts
    """
    user = await guarded(User.get_or_none(email=payload.email))
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail={"code": "AUTH_INVALID_CREDENTIALS", "message": "Incorrect email or password"})
    if not policy.require_active_session(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail={"code": policy.ACCOUNT_INACTIVE, "message": "Account is not active"})
    token = create_access_token(str(user.id), Role(user.role).value)
    response.set_cookie(settings.access_cookie_name, token, httponly=True,
                        secure=settings.cookie_secure, samesite="lax")
    return {"success": True, "data": {"user": user_to_dict(user), "accessToken": token}}

@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    """
    Get current authenticated user information.

    Raises:
        HTTPException (401): If user is not authenticated
    """
    return {"success": True, "data": user_to_dict(user)}

@router.post("/logout")
async def logout(response: Response):
    """
    Log out by clearing the access token cookie.

    Always succeeds. The JWT itself stays valid until it expires.
    """
    response.delete_cookie(settings.access_cookie_name)
    return {"success": True}
