"""
分类模型定义
"""

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship, validates

from blog.db.database import Base
from blog.models.base import SlugMixin, TimestampMixin


class Category(SlugMixin, TimestampMixin, Base):
    """分类表模型 - categories"""
    __tablename__ = "categories"
    __slug_source__ = "name"

    # 主键
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # 分类信息
    name = Column(String(100), unique=True, nullable=False, comment="分类名")
    description = Column(Text, nullable=True, comment="分类描述 (可选)")
    slug = Column(String(100), unique=True, index=True, nullable=False, comment="URL友好的别名")

    # 关系定义
    posts = relationship("Post", back_populates="category", lazy="select")

    @validates("name")
    def _strip_name(self, key, value):
        return value.strip() if isinstance(value, str) else value

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}', slug='{self.slug}')>"
