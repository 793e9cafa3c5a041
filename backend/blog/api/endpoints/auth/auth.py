"""
认证 API 端点
注册、登录（OAuth2 表单）和当前用户信息
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Form, HTTPException, status
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog.core.config import settings
from blog.core.deps import authenticate
from blog.db.database import get_db
from blog.schemas.core import RegisterResponse, Token, UserCreate, UserResponse
from blog.services.auth import authenticate_user, issue_token, register_user

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """
    用户注册，成功后直接返回访问令牌
    """
    try:
        user = await register_user(db, user_data.username, user_data.email, user_data.password)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username or email already exists"
        )

    logger.info(f"新用户注册: {user.username}")
    return {
        "user": user,
        "access_token": issue_token(user),
        "token_type": "bearer",
    }


@router.post("/login", response_model=Token)
async def login_for_access_token(
    username: str = Form(..., description="用户名或邮箱"),
    password: str = Form(...),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """
    登录端点 - 用户名/邮箱 + 密码
    """
    user = await authenticate_user(db, username, password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {
        "access_token": issue_token(user),
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        "role_code": user.role_code,
        "username": user.username,
    }


@router.get("/me", response_model=UserResponse)
async def read_users_me(
    current_user: Dict[str, Any] = Depends(authenticate)
) -> Dict[str, Any]:
    """
    获取当前用户信息
    """
    return current_user
