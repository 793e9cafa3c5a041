"""
分类服务
"""

import math
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from blog.models.articles import Category, Post
from blog.schemas.articles import CategoryCreate, CategoryUpdate
from blog.utils.slug import slugify

CATEGORY_FIELDS = ("id", "name", "slug", "description", "created_at", "updated_at")


class CategoryService:
    """分类的增删改查；删除分类时文章保留并变为无分类"""

    @staticmethod
    async def _conflict(db: AsyncSession, column, value: str, exclude_id: Optional[int]) -> bool:
        query = select(Category.id).where(column == value)
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)
        return (await db.execute(query)).first() is not None

    @staticmethod
    async def _ensure_unique(
        db: AsyncSession,
        name: Optional[str] = None,
        slug: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> None:
        if name and await CategoryService._conflict(db, Category.name, name, exclude_id):
            raise ValueError(f"Category name '{name}' already exists")
        if slug and await CategoryService._conflict(db, Category.slug, slug, exclude_id):
            raise ValueError(f"Category slug '{slug}' already exists")

    @staticmethod
    async def create_category(db: AsyncSession, category_data: CategoryCreate) -> Category:
        """slug 未提供时由保存钩子根据名称生成"""
        slug = category_data.slug or slugify(category_data.name)
        if not slug:
            raise ValueError("Name must contain at least one letter or digit")
        await CategoryService._ensure_unique(db, name=category_data.name, slug=slug)

        category = Category(**category_data.model_dump())
        db.add(category)
        await db.commit()
        await db.refresh(category)
        return category

    @staticmethod
    async def get_category_by_id(db: AsyncSession, category_id: int) -> Optional[Category]:
        return await db.get(Category, category_id)

    @staticmethod
    async def get_category_by_slug(db: AsyncSession, slug: str) -> Optional[Category]:
        result = await db.execute(select(Category).where(Category.slug == slug))
        return result.scalar_one_or_none()

    @staticmethod
    async def update_category(
        db: AsyncSession,
        category_id: int,
        category_data: CategoryUpdate
    ) -> Optional[Category]:
        """只更新请求中给出的非空字段，分类不存在时返回 None"""
        category = await db.get(Category, category_id)
        if category is None:
            return None

        changes = {k: v for k, v in category_data.model_dump(exclude_unset=True).items() if v is not None}
        await CategoryService._ensure_unique(
            db,
            name=changes.get("name"),
            slug=changes.get("slug"),
            exclude_id=category_id,
        )
        for field, value in changes.items():
            setattr(category, field, value)

        await db.commit()
        await db.refresh(category)
        return category

    @staticmethod
    async def delete_category(db: AsyncSession, category_id: int) -> bool:
        if await db.get(Category, category_id) is None:
            return False

        # 先解除文章关联，再删除分类
        await db.execute(update(Post).where(Post.category_id == category_id).values(category_id=None))
        await db.execute(delete(Category).where(Category.id == category_id))
        await db.commit()
        return True

    @staticmethod
    async def list_categories(
        db: AsyncSession,
        page: int = 1,
        size: int = 20,
        include_usage_count: bool = False
    ) -> Dict[str, Any]:
        """
        按名称排序的分类列表

        include_usage_count 为真时每项附带 post_count。
        """
        total = (await db.execute(select(func.count(Category.id)))).scalar_one()

        if include_usage_count:
            query = (
                select(Category, func.count(Post.id))
                .outerjoin(Post, Post.category_id == Category.id)
                .group_by(Category.id)
            )
        else:
            query = select(Category)
        query = query.order_by(Category.name).offset((page - 1) * size).limit(size)
        result = await db.execute(query)

        items: List[Dict[str, Any]] = []
        if include_usage_count:
            for category, post_count in result.all():
                item = {f: getattr(category, f) for f in CATEGORY_FIELDS}
                item["post_count"] = post_count
                items.append(item)
        else:
            items = [{f: getattr(c, f) for f in CATEGORY_FIELDS} for c in result.scalars().all()]

        return {
            "total": total,
            "categories": items,
            "page": page,
            "size": size,
            "total_pages": max(1, math.ceil(total / size)),
        }
