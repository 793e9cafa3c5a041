"""
文章模型定义
"""

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import expression

from blog.db.database import Base
from blog.models.base import SlugMixin, TimestampMixin


class Post(SlugMixin, TimestampMixin, Base):
    """文章表模型 - posts"""
    __tablename__ = "posts"
    __slug_source__ = "title"

    # 主键
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # 文章基本信息
    title = Column(String(255), nullable=False, comment="文章标题")
    slug = Column(String(255), unique=True, index=True, nullable=False, comment="URL友好的别名")
    content = Column(Text, nullable=False, comment="文章正文内容")
    tags = Column(JSON, nullable=False, default=list, comment="标签列表")

    # 外键关联
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True, comment="作者ID")
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True, comment="分类ID (可选)")

    # 状态字段
    published = Column(Boolean, nullable=False, default=False, server_default=expression.false(), comment="是否发布")

    # 关系定义
    author = relationship("User", back_populates="posts", lazy="select")
    category = relationship("Category", back_populates="posts", lazy="select")

    @validates("title")
    def _strip_title(self, key, value):
        return value.strip() if isinstance(value, str) else value

    def __repr__(self):
        return f"<Post(id={self.id}, title='{self.title}', slug='{self.slug}')>"
