"""
文章服务 - CRUD操作
"""

import math
from typing import Any, Dict, Optional

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blog.models.articles import Category, Post
from blog.schemas.articles import PostCreate, PostUpdate
from blog.utils.slug import slugify

# 更新时不允许置空的字段
NON_NULLABLE_UPDATE_FIELDS = {"title", "content", "tags", "published"}


class PostService:
    """文章服务类 - 提供文章的CRUD操作"""

    @staticmethod
    async def _ensure_slug_available(db: AsyncSession, slug: str) -> None:
        if (await db.execute(select(Post.id).where(Post.slug == slug))).first():
            raise ValueError(f"A post with slug '{slug}' already exists")

    @staticmethod
    async def _ensure_category_exists(db: AsyncSession, category_id: int) -> None:
        result = await db.execute(select(Category.id).where(Category.id == category_id))
        if not result.first():
            raise ValueError("Category not found")

    @staticmethod
    async def create_post(
        db: AsyncSession,
        post_data: PostCreate,
        author_id: int
    ) -> Post:
        """
        创建文章，slug 由保存钩子根据标题生成
        """
        slug = slugify(post_data.title)
        if not slug:
            raise ValueError("Title must contain at least one letter or digit")
        await PostService._ensure_slug_available(db, slug)

        if post_data.category_id is not None:
            await PostService._ensure_category_exists(db, post_data.category_id)

        post = Post(
            title=post_data.title,
            content=post_data.content,
            author_id=author_id,
            category_id=post_data.category_id,
            tags=post_data.tags,
            published=post_data.published,
        )

        db.add(post)
        await db.commit()
        return await PostService.get_post_by_id(db, post.id, include_relations=True)

    @staticmethod
    async def get_post_by_id(
        db: AsyncSession,
        post_id: int,
        include_relations: bool = False
    ) -> Optional[Post]:
        """
        根据ID获取文章
        """
        query = select(Post).where(Post.id == post_id).execution_options(populate_existing=True)

        if include_relations:
            query = query.options(
                selectinload(Post.author),
                selectinload(Post.category)
            )

        result = await db.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    async def update_post(
        db: AsyncSession,
        post: Post,
        post_data: PostUpdate
    ) -> Post:
        """
        更新文章，只应用请求中出现的字段

        category_id 显式为 null 时清除分类；其余字段为 null 时忽略。
        """
        update_data = post_data.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if value is None and field in NON_NULLABLE_UPDATE_FIELDS:
                continue
            if field == "category_id" and value is not None:
                await PostService._ensure_category_exists(db, value)
            setattr(post, field, value)

        await db.commit()
        return await PostService.get_post_by_id(db, post.id, include_relations=True)

    @staticmethod
    async def delete_post(db: AsyncSession, post: Post) -> None:
        """
        删除文章
        """
        await db.delete(post)
        await db.commit()

    @staticmethod
    async def list_posts(
        db: AsyncSession,
        page: int = 1,
        size: int = 10,
        category_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        获取文章列表（分页、按分类筛选，按创建时间倒序）
        """
        query = select(Post)

        # 应用筛选条件
        if category_id is not None:
            query = query.where(Post.category_id == category_id)

        # 计算总数
        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        # 应用分页和排序
        query = query.order_by(desc(Post.created_at), desc(Post.id))
        query = query.offset((page - 1) * size).limit(size)
        query = query.options(
            selectinload(Post.author),
            selectinload(Post.category)
        )

        result = await db.execute(query)
        posts = list(result.scalars().all())

        return {
            "posts": posts,
            "total_pages": math.ceil(total / size),
            "current_page": page,
            "total_posts": total,
        }
