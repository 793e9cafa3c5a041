"""
博客 API 入口
创建 FastAPI 应用，挂载中间件、异常处理和路由
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy import or_, select, text
from starlette.requests import Request

from blog.api import api_router
from blog.core.config import settings
from blog.core.middleware import RequestContextMiddleware
from blog.db.database import AsyncSessionLocal, close_db, init_db
from blog.models import User
from blog.models.core import ROLE_ADMIN
from blog.utils.security import hash_super_admin_password


async def create_super_admin() -> None:
    """
    按 SUPER_ADMIN_* 配置创建初始管理员；已存在时重置密码并恢复管理员角色
    """
    username = settings.SUPER_ADMIN_USERNAME
    email = settings.SUPER_ADMIN_EMAIL.strip().lower()
    if not (username and email and settings.SUPER_ADMIN_PASSWORD):
        logger.warning("未配置初始管理员，跳过")
        return

    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(
                select(User).where(or_(User.username == username, User.email == email))
            )
            admin = result.scalars().first()
            if admin is None:
                admin = User(username=username, email=email)
                session.add(admin)
                action = "创建"
            else:
                action = "更新"

            admin.hashed_password = hash_super_admin_password()
            admin.role_code = ROLE_ADMIN
            admin.is_active = True
            await session.commit()
            logger.info(f"初始管理员已{action}: {admin.username}")
    except Exception as e:
        # 启动不因管理员初始化失败而中断
        logger.error(f"初始化管理员失败: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} 启动")

    if settings.DEBUG or settings.AUTO_CREATE_TABLES:
        # 生产环境请使用 alembic upgrade head
        await init_db()
    await create_super_admin()

    yield

    await close_db()
    logger.info(f"{settings.PROJECT_NAME} 已停止")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="博客后端：文章、分类与用户",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """请求参数校验失败统一返回 400"""
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """兜底异常：记录堆栈，响应中不暴露内部信息"""
    logger.opt(exception=exc).error(f"未处理的异常: {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Something went wrong!"})


# 开发环境放行本机任意端口，生产环境只放行 CORS_ORIGINS
if settings.DEBUG:
    cors_origins: Dict[str, Any] = {"allow_origin_regex": r"^http://(localhost|127\.0\.0\.1)(:\d+)?$"}
else:
    cors_origins = {"allow_origins": list(settings.CORS_ORIGINS)}

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    **cors_origins,
)
app.add_middleware(RequestContextMiddleware)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root() -> Dict[str, Any]:
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": settings.VERSION,
        "api": settings.API_PREFIX,
    }


@app.get("/health")
async def health_check() -> Dict[str, Any]:
    """数据库连通性检查"""
    try:
        async with AsyncSessionLocal() as db:
            ok = (await db.execute(text("SELECT 1"))).scalar() == 1
    except Exception as e:
        logger.warning(f"数据库健康检查失败: {e}")
        ok = False

    return {
        "status": "healthy" if ok else "unhealthy",
        "database": "up" if ok else "down",
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "timestamp": datetime.now().isoformat(),
    }


@app.get("/ping")
async def ping():
    return {"message": "pong"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.BACKEND_RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )
