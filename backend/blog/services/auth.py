"""
认证服务
令牌签发/校验与用户认证
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog.core.config import settings
from blog.models import User
from blog.models.base import MAX_ID


class InvalidTokenError(Exception):
    """令牌无效（签名错误、格式错误或已过期）"""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


def issue_token(user: Any, expires_delta: Optional[timedelta] = None) -> str:
    """
    签发访问令牌

    user 可以是 User 对象或包含 id/username/email/role_code 的字典
    """
    def field(name: str) -> Any:
        if isinstance(user, dict):
            return user.get(name)
        return getattr(user, name, None)

    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": str(field("id")),
        "username": field("username"),
        "email": field("email"),
        "role_code": field("role_code"),
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Dict[str, Any]:
    """验证 JWT 令牌，失败时抛出 InvalidTokenError"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise InvalidTokenError() from e


def token_user_id(payload: Dict[str, Any]) -> Optional[int]:
    """从令牌载荷中取出用户ID，缺失或超出主键范围时返回 None"""
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
    return user_id if 1 <= user_id <= MAX_ID else None


async def get_user_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def authenticate_user(db: AsyncSession, identifier: str, password: str) -> Optional[User]:
    """
    用户名或邮箱 + 密码认证

    Returns:
        激活状态的用户对象，认证失败返回None
    """
    query = select(User).where(
        or_(User.username == identifier, User.email == identifier.lower()),
        User.is_active.is_(True),
    )
    result = await db.execute(query)
    user = result.scalar_one_or_none()

    if not user or not user.compare_password(password):
        return None
    return user


async def register_user(db: AsyncSession, username: str, email: str, password: str, role_code: str = "user") -> User:
    """
    注册新用户

    用户名或邮箱已存在时抛出 ValueError
    """
    existing = await db.execute(
        select(User).where(or_(User.username == username, User.email == email))
    )
    if existing.scalars().first():
        raise ValueError("Username or email already exists")

    user = User(username=username, email=email, role_code=role_code, is_active=True)
    user.set_password(password)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user
