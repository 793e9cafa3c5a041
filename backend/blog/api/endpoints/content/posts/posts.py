"""
文章 API
列表和详情公开；创建需登录；修改和删除限作者本人或管理员
"""

import re
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog.core.config import settings
from blog.core.deps import authenticate, can_modify
from blog.db.database import get_db
from blog.models.articles import Post
from blog.models.base import MAX_ID
from blog.schemas.articles import PostCreate, PostList, PostUpdate, PostWithRelations
from blog.services.articles.post import PostService
from blog.services.articles.render import render_post_page

router = APIRouter()

# 正整数，且不超过 Integer 主键上限
POST_ID_PATTERN = re.compile(r"[1-9][0-9]{0,9}")


def parse_post_id(post_id: str) -> int:
    if not POST_ID_PATTERN.fullmatch(post_id) or int(post_id) > MAX_ID:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid post ID")
    return int(post_id)


@asynccontextmanager
async def _handle_errors(db: AsyncSession, action: str):
    """
    把服务层异常映射为 HTTP 响应

    HTTPException 原样抛出；ValueError 和唯一约束冲突为 400；
    其他异常记录堆栈后返回 500。
    """
    try:
        yield
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A post with this slug already exists")
    except Exception:
        logger.exception(f"{action}失败")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error")


async def _load_post(db: AsyncSession, post_id: str, include_relations: bool = False) -> Post:
    post = await PostService.get_post_by_id(db, parse_post_id(post_id), include_relations=include_relations)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


def _check_owner(current_user: Dict[str, Any], post: Post, verb: str) -> None:
    if not can_modify(current_user, post.author_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not authorized to {verb} this post",
        )


@router.get("", response_model=PostList)
async def list_posts(
    category: Optional[int] = Query(None, ge=1, le=MAX_ID, description="分类ID"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.POST_PAGE_SIZE_DEFAULT, ge=1, le=settings.POST_PAGE_SIZE_MAX),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """最新的在前"""
    async with _handle_errors(db, "获取文章列表"):
        return await PostService.list_posts(db, page=page, size=limit, category_id=category)


@router.get("/{post_id}", response_model=PostWithRelations)
async def get_post(post_id: str, db: AsyncSession = Depends(get_db)) -> Any:
    async with _handle_errors(db, f"获取文章 {post_id} "):
        return await _load_post(db, post_id, include_relations=True)


@router.get("/{post_id}/render", response_class=HTMLResponse)
async def render_post(post_id: str, request: Request, db: AsyncSession = Depends(get_db)) -> HTMLResponse:
    """
    HTML 页面形式的文章

    正文渲染出错时页面仍返回 200，正文位置显示降级提示和重试链接。
    """
    post = await _load_post(db, post_id, include_relations=True)
    return HTMLResponse(content=render_post_page(post, retry_url=str(request.url)))


@router.post("", response_model=PostWithRelations, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: Dict[str, Any] = Depends(authenticate),
    db: AsyncSession = Depends(get_db),
) -> Any:
    async with _handle_errors(db, "创建文章"):
        post = await PostService.create_post(db, post_data, author_id=current_user["id"])
    logger.info(f"文章已创建: id={post.id} slug={post.slug} author={current_user['username']}")
    return post


@router.put("/{post_id}", response_model=PostWithRelations)
async def update_post(
    post_id: str,
    post_data: PostUpdate,
    current_user: Dict[str, Any] = Depends(authenticate),
    db: AsyncSession = Depends(get_db),
) -> Any:
    async with _handle_errors(db, f"更新文章 {post_id} "):
        post = await _load_post(db, post_id)
        _check_owner(current_user, post, "update")
        return await PostService.update_post(db, post, post_data)


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    current_user: Dict[str, Any] = Depends(authenticate),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, str]:
    async with _handle_errors(db, f"删除文章 {post_id} "):
        post = await _load_post(db, post_id)
        _check_owner(current_user, post, "delete")
        await PostService.delete_post(db, post)

    logger.info(f"文章已删除: id={post_id} by={current_user['username']}")
    return {"message": "Post deleted successfully"}
