"""
分类 API
读取公开，写操作仅限管理员
"""

from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog.core.config import settings
from blog.core.deps import require_admin
from blog.db.database import get_db
from blog.models.articles import Category
from blog.models.base import MAX_ID
from blog.schemas.articles import CategoryCreate, CategoryList, CategoryResponse, CategoryUpdate
from blog.services.articles.category import CategoryService

router = APIRouter()

CATEGORY_NOT_FOUND = "Category not found"


def _found(category: Any) -> Category:
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CATEGORY_NOT_FOUND)
    return category


@asynccontextmanager
async def _write_errors(db: AsyncSession):
    """业务校验错误和唯一约束冲突统一转为 400"""
    try:
        yield
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Category name or slug already exists",
        )


@router.get("", response_model=CategoryList)
async def list_categories(
    page: int = Query(1, ge=1),
    size: int = Query(settings.CATEGORY_PAGE_SIZE_DEFAULT, ge=1, le=settings.CATEGORY_PAGE_SIZE_MAX),
    include_usage_count: bool = Query(False, description="附带每个分类的文章数"),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    return await CategoryService.list_categories(db, page=page, size=size, include_usage_count=include_usage_count)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    current_user: Dict[str, Any] = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> Any:
    async with _write_errors(db):
        category = await CategoryService.create_category(db, category_data)
    logger.info(f"分类已创建: {category.slug} by={current_user['username']}")
    return category


@router.get("/slug/{slug}", response_model=CategoryResponse)
async def get_category_by_slug(slug: str, db: AsyncSession = Depends(get_db)) -> Any:
    return _found(await CategoryService.get_category_by_slug(db, slug))


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int = Path(..., ge=1, le=MAX_ID), db: AsyncSession = Depends(get_db)) -> Any:
    return _found(await CategoryService.get_category_by_id(db, category_id))


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_data: CategoryUpdate,
    category_id: int = Path(..., ge=1, le=MAX_ID),
    _: Dict[str, Any] = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> Any:
    async with _write_errors(db):
        category = await CategoryService.update_category(db, category_id, category_data)
    return _found(category)


@router.delete("/{category_id}")
async def delete_category(
    category_id: int = Path(..., ge=1, le=MAX_ID),
    current_user: Dict[str, Any] = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, str]:
    """删除分类，其下文章变为无分类"""
    if not await CategoryService.delete_category(db, category_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CATEGORY_NOT_FOUND)

    logger.info(f"分类已删除: id={category_id} by={current_user['username']}")
    return {"message": "Category deleted successfully"}
