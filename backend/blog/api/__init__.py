"""
API 路由注册
"""

from fastapi import APIRouter
from blog.api.endpoints.auth import router as auth_router
from blog.api.endpoints.content.posts import router as posts_router
from blog.api.endpoints.content.categories import router as categories_router
from blog.api.endpoints.management.users import router as users_router

api_router = APIRouter()

# 注册各个模块的路由
api_router.include_router(auth_router, tags=["authentication"], prefix="/auth")
api_router.include_router(posts_router, tags=["posts"], prefix="/posts")
api_router.include_router(categories_router, tags=["categories"], prefix="/categories")
api_router.include_router(users_router, tags=["users"], prefix="/users")
