"""
数据库模型定义
"""

from blog.db.database import Base

from .core import User
from .articles import Post, Category

__all__ = [
    "Base",
    "User",
    "Post",
    "Category",
]
