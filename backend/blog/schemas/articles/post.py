"""
文章请求/响应模型
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from blog.models.base import MAX_ID


def strip_required(v: Optional[str], field: str) -> Optional[str]:
    """去掉首尾空白，拒绝纯空白字符串；None 原样返回"""
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError(f"{field} must not be blank")
    return v


def clean_tags(v: Optional[List[str]]) -> Optional[List[str]]:
    """去掉标签首尾空白并丢弃空标签"""
    if v is None:
        return v
    return [tag.strip() for tag in v if tag and tag.strip()]


class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    category_id: Optional[int] = Field(None, ge=1, le=MAX_ID)
    tags: List[str] = Field(default_factory=list)
    published: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return strip_required(v, "title")

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return clean_tags(v)


class PostUpdate(BaseModel):
    """
    文章部分更新

    只应用请求体中出现的字段；category_id 显式为 null 表示清除分类，
    其余字段为 null 时忽略。
    """
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    category_id: Optional[int] = Field(None, ge=1, le=MAX_ID)
    tags: Optional[List[str]] = None
    published: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return strip_required(v, "title")

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return clean_tags(v)


class AuthorInfo(BaseModel):
    id: int
    username: str
    email: str

    class Config:
        from_attributes = True


class CategoryInfo(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class PostResponse(BaseModel):
    id: int
    title: str
    slug: str
    content: str
    tags: List[str] = []
    published: bool
    author_id: int
    category_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PostWithRelations(PostResponse):
    """文章详情，附带作者和分类摘要"""
    author: Optional[AuthorInfo] = None
    category: Optional[CategoryInfo] = None


class PostList(BaseModel):
    posts: List[PostWithRelations]
    total_pages: int
    current_page: int
    total_posts: int
