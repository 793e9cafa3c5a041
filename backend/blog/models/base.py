"""
模型公共字段与保存钩子
- TimestampMixin: created_at / updated_at，每次保存刷新 updated_at
- SlugMixin: slug 为空时由 __slug_source__ 指定的字段生成
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, event, func

from blog.utils.slug import slugify

# Integer 主键上限（PostgreSQL int4）
MAX_ID = 2147483647


class TimestampMixin:
    """创建时间和更新时间字段"""

    created_at = Column(DateTime(timezone=True), default=datetime.now, server_default=func.now(), nullable=False, comment="创建时间")
    updated_at = Column(DateTime(timezone=True), default=datetime.now, server_default=func.now(), nullable=False, comment="更新时间")


class SlugMixin:
    """slug 自动生成，子类通过 __slug_source__ 指定来源字段"""

    __slug_source__ = "title"

    def ensure_slug(self) -> None:
        if getattr(self, "slug", None):
            return
        source = getattr(self, self.__slug_source__, None)
        if source:
            self.slug = slugify(source)


@event.listens_for(TimestampMixin, "before_update", propagate=True)
def receive_before_update(mapper, connection, target):
    """在更新前自动设置updated_at为当前时间"""
    target.updated_at = datetime.now()


@event.listens_for(SlugMixin, "before_insert", propagate=True)
@event.listens_for(SlugMixin, "before_update", propagate=True)
def receive_before_save(mapper, connection, target):
    """保存前补全 slug"""
    target.ensure_slug()
