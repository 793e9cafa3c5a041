"""
核心Schema模块
包含认证、用户相关的Pydantic模型
"""

from .auth import (
    Token,
    UserCreate,
    UserUpdate,
    UserResponse,
    RegisterResponse,
)

__all__ = [
    "Token",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "RegisterResponse",
]
