"""
Askwell Backend — Route Dependencies
====================================

What:  Resolves the acting user for endpoints that change state on a user's
       behalf.
How:   Authentication itself is handled upstream (identity provider /
       gateway), which forwards the signed-in user's id in `X-User-ID`.
       The id must name a user already known to this service.
"""

from typing import Optional

from fastapi import Depends, Header, Path
from sqlalchemy.ext.asyncio import AsyncSession

from askwell.database import get_db_session
from askwell.exceptions import AuthenticationRequiredError, UnauthorizedError
from askwell.services.user_service import user_service


async def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-ID"),
    db: AsyncSession = Depends(get_db_session),
) -> str:
    """
    Raises:
        AuthenticationRequiredError: header missing, blank or naming an unknown user (401)
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise AuthenticationRequiredError()
    if not await user_service.user_exists(db, user_id):
        raise AuthenticationRequiredError(
            message="Unknown user. Sign in again.",
            context={"user_id": user_id},
        )
    return user_id


async def require_profile_owner(
    user_id: str = Path(min_length=1, max_length=255),
    x_user_id: Optional[str] = Header(default=None, alias="X-User-ID"),
) -> str:
    """
    Guards profile writes. The caller may not have a row yet (first sign-in),
    so only the forwarded identity is compared, not the users table.

    Raises:
        AuthenticationRequiredError: header missing or blank (401)
        UnauthorizedError:           header names a different user (403)
    """
    caller_id = (x_user_id or "").strip()
    if not caller_id:
        raise AuthenticationRequiredError()
    if caller_id != user_id:
        raise UnauthorizedError(
            message="You can only update your own profile",
            context={"user_id": user_id, "caller_id": caller_id},
        )
    return user_id
