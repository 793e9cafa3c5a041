"""
分类请求/响应模型
"""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .post import strip_required

SLUG_PATTERN = re.compile(r"^[a-zA-Z0-9]+(?:-[a-zA-Z0-9]+)*$")


def normalize_slug(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not SLUG_PATTERN.match(v):
        raise ValueError("slug may only contain letters, digits and single dashes")
    return v.lower()


class CategoryCreate(BaseModel):
    """slug 留空时由名称生成"""
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return strip_required(v, "name")

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v):
        return normalize_slug(v)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return strip_required(v, "name")

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v):
        return normalize_slug(v)


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CategoryWithUsage(CategoryResponse):
    post_count: Optional[int] = Field(None, description="该分类下的文章数，仅在 include_usage_count 时返回")


class CategoryList(BaseModel):
    total: int
    categories: List[CategoryWithUsage]
    page: int
    size: int
    total_pages: int
