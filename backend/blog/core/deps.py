"""
FastAPI 依赖注入工具 - 权限控制和用户认证
"""

from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from blog.core.config import settings
from blog.db.database import get_db
from blog.models.core import ROLE_ADMIN
from blog.services.auth import InvalidTokenError, get_user_by_id, token_user_id, verify_token

# OAuth2 配置，auto_error=False 以便自定义未提供令牌时的响应
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False)

NO_TOKEN_MESSAGE = "Access denied. No token provided."
INVALID_TOKEN_MESSAGE = "Invalid token."
INACTIVE_USER_MESSAGE = "Invalid token or user deactivated."


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def authenticate(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """
    获取当前认证用户（必须有有效的Bearer令牌）

    返回:
        用户信息字典（不含密码）

    异常:
        401: 未提供令牌、令牌无效/过期/缺少用户ID、用户不存在或已停用
    """
    if not token:
        raise _unauthorized(NO_TOKEN_MESSAGE)

    try:
        payload = verify_token(token)
    except InvalidTokenError:
        raise _unauthorized(INVALID_TOKEN_MESSAGE)

    user_id = token_user_id(payload)
    if user_id is None:
        raise _unauthorized(INVALID_TOKEN_MESSAGE)

    user = await get_user_by_id(db, user_id)
    if not user or not user.is_active:
        raise _unauthorized(INACTIVE_USER_MESSAGE)

    return user.to_dict()


async def require_admin(
    current_user: Dict[str, Any] = Depends(authenticate)
) -> Dict[str, Any]:
    """
    要求用户必须是管理员

    异常:
        403: 权限不足
    """
    if current_user.get("role_code") != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user


def can_modify(current_user: Dict[str, Any], author_id: int) -> bool:
    """作者本人或管理员可修改"""
    return author_id == current_user.get("id") or current_user.get("role_code") == ROLE_ADMIN
