"""FastAPI dependencies: get_current_user, require_admin_user.

Usage in any protected router:
    from src.auc_gateway.auth.dependencies import get_current_user

    @router.get("/protected")
    async def protected(user: UserModel = Depends(get_current_user)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select

from config.settings import settings
from src.auc_common.errors import AccountDisabledError, AdminRequiredError, InvalidCredentialsError
from src.auc_common.store import LedgerStore, get_store
from src.auc_gateway.auth.jwt_handler import decode_token
from src.auc_gateway.user.db_models import UserModel

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    store: LedgerStore = Depends(get_store),
) -> UserModel:
    """Extract and validate the JWT Bearer token, return the UserModel.

    Raises HTTP 401 if the token is missing, invalid, or expired, or the
    user no longer exists. Raises AccountDisabledError for disabled users.

    The lookup runs in its own session, closed before the handler starts, so
    a request never holds this connection while waiting on another.
    """
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    user_id: str | None = payload.get("sub")
    if not user_id:
        raise _CREDENTIALS_EXCEPTION

    async with store.session() as db:
        result = await db.execute(select(UserModel).where(UserModel.id == user_id))
        user = result.scalar_one_or_none()
    if user is None:
        raise _CREDENTIALS_EXCEPTION

    if not user.is_active:
        raise AccountDisabledError()

    return user


async def require_admin_user(
    current_user: UserModel = Depends(get_current_user),
) -> UserModel:
    """Allow only usernames listed in settings.ADMIN_USERNAMES."""
    if current_user.username not in settings.ADMIN_USERNAMES:
        raise AdminRequiredError()
    return current_user
