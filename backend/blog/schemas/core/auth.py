"""
认证和用户相关的 Pydantic 模型
用于请求/响应的数据验证
"""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+$")
ROLE_CODES = {"user", "admin"}


class Token(BaseModel):
    """令牌响应模型"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # 秒
    role_code: str
    username: str


class UserCreate(BaseModel):
    """用户注册模型"""
    username: str = Field(..., min_length=3, max_length=50, description="用户名")
    email: str = Field(..., max_length=255, description="邮箱")
    password: str = Field(..., min_length=6, max_length=128, description="密码")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if not USERNAME_PATTERN.match(v):
            raise ValueError("username may only contain letters, digits, '.', '_' and '-'")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("invalid email format")
        return v


class UserUpdate(BaseModel):
    """用户更新模型（管理员使用）"""
    role_code: Optional[str] = Field(None, description="角色代码: user, admin")
    is_active: Optional[bool] = Field(None, description="是否激活")

    @field_validator("role_code")
    @classmethod
    def validate_role_code(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in ROLE_CODES:
            raise ValueError(f"role_code must be one of {sorted(ROLE_CODES)}")
        return v


class UserResponse(BaseModel):
    """用户响应模型（不包含密码）"""
    id: int
    username: str
    email: str
    role_code: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RegisterResponse(BaseModel):
    """注册响应模型"""
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
