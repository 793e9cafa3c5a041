"""
文章系统Schema模块
包含文章、分类等文章系统相关的Pydantic模型
"""

# 文章相关的Schema
from .post import (
    PostCreate,
    PostUpdate,
    PostResponse,
    PostWithRelations,
    PostList,
    AuthorInfo,
    CategoryInfo,
)

# 分类相关的Schema
from .category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryWithUsage,
    CategoryList,
)

__all__ = [
    # 文章Schema
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    "PostWithRelations",
    "PostList",
    "AuthorInfo",
    "CategoryInfo",

    # 分类Schema
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategoryWithUsage",
    "CategoryList",
]
