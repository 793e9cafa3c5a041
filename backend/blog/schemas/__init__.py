"""
项目所有Pydantic Schema定义
按功能模块组织在子目录中

导入结构示例：
    from blog.schemas.core import UserCreate, UserResponse
    from blog.schemas.articles import PostCreate, PostWithRelations
"""

from .core import *
from .articles import *

# 导出所有Schema类型
__all__ = [
    # 从core模块导出
    "Token",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "RegisterResponse",

    # 从articles模块导出
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    "PostWithRelations",
    "PostList",
    "AuthorInfo",
    "CategoryInfo",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategoryWithUsage",
    "CategoryList",
]
