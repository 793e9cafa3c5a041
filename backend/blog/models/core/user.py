"""
用户模型定义
角色：user（普通用户）、admin（管理员）
"""

from typing import Any, Dict

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from blog.db.database import Base
from blog.models.base import TimestampMixin
from blog.utils.security import get_password_hash, verify_password

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User(TimestampMixin, Base):
    """用户表模型 - users"""
    __tablename__ = "users"

    # 主键
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # 登录凭证
    username = Column(String(50), unique=True, index=True, nullable=False, comment="用户名")
    email = Column(String(255), unique=True, index=True, nullable=False, comment="邮箱")
    hashed_password = Column(String(255), nullable=False, comment="加密密码")

    # 角色标识
    role_code = Column(String(20), nullable=False, default=ROLE_USER, server_default=ROLE_USER, comment="角色代码: user, admin")

    # 状态
    is_active = Column(Boolean, nullable=False, default=True, server_default=expression.true(), comment="是否激活")

    # 关系定义
    posts = relationship("Post", back_populates="author", lazy="select")

    def set_password(self, password: str) -> None:
        """设置密码（保存 bcrypt 哈希）"""
        self.hashed_password = get_password_hash(password)

    def compare_password(self, password: str) -> bool:
        """校验明文密码"""
        if not self.hashed_password:
            return False
        return verify_password(password, self.hashed_password)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典，不包含密码哈希"""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role_code": self.role_code,
            "is_active": self.is_active,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role_code='{self.role_code}')>"
