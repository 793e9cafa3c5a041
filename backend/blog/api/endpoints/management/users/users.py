"""
用户管理 API（仅管理员）
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from loguru import logger
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog.core.config import settings
from blog.core.deps import require_admin
from blog.db.database import get_db
from blog.models import User
from blog.models.base import MAX_ID
from blog.schemas.core import UserResponse, UserUpdate

router = APIRouter(dependencies=[Depends(require_admin)])


class UserPage(BaseModel):
    users: List[UserResponse]
    total: int
    skip: int
    limit: int
    has_more: bool


async def _load_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("", response_model=UserPage)
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.USER_PAGE_SIZE_DEFAULT, ge=1, le=settings.USER_PAGE_SIZE_MAX),
    is_active: Optional[bool] = Query(None, description="按启用状态筛选"),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """按ID顺序分页列出用户"""
    base = select(User)
    if is_active is not None:
        base = base.where(User.is_active.is_(is_active))

    total = (await db.execute(select(func.count()).select_from(base.subquery()))).scalar_one()
    users = (await db.execute(base.order_by(User.id).offset(skip).limit(limit))).scalars().all()

    return {
        "users": users,
        "total": total,
        "skip": skip,
        "limit": limit,
        "has_more": skip + len(users) < total,
    }


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int = Path(..., ge=1, le=MAX_ID), db: AsyncSession = Depends(get_db)) -> Any:
    return await _load_user(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_data: UserUpdate,
    user_id: int = Path(..., ge=1, le=MAX_ID),
    current_user: Dict[str, Any] = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """调整角色或启用状态；管理员不能停用自己"""
    user = await _load_user(db, user_id)

    changes = {k: v for k, v in user_data.model_dump(exclude_unset=True).items() if v is not None}
    if user.id == current_user["id"] and changes.get("is_active") is False:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot deactivate your own account",
        )

    for field, value in changes.items():
        setattr(user, field, value)
    await db.commit()
    await db.refresh(user)

    logger.info(f"用户 {user.username} 已更新: {changes} by={current_user['username']}")
    return user
