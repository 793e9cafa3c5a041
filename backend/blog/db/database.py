"""
数据库配置和连接管理
SQLAlchemy 异步引擎和会话管理
"""

from typing import Any, AsyncGenerator, Dict

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from blog.core.config import settings


class Base(DeclarativeBase):
    """SQLAlchemy 基类"""
    pass


def engine_options(url: str) -> Dict[str, Any]:
    """根据数据库类型生成引擎参数（SQLite 不支持连接池参数）"""
    if url.startswith("sqlite"):
        options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            # 内存数据库需要在所有会话间共享同一个连接
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_size": settings.POSTGRES_MAX_CONNECTIONS,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT_SECONDS,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "connect_args": {
            "server_settings": {
                "client_encoding": "utf8",
                "statement_timeout": str(settings.POSTGRES_STATEMENT_TIMEOUT),
            }
        },
    }


def build_engine(url: str) -> AsyncEngine:
    """创建异步引擎"""
    return create_async_engine(url, echo=settings.SQLALCHEMY_ECHO, **engine_options(url))


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """创建异步会话工厂"""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# 创建异步引擎
engine = build_engine(str(settings.DATABASE_URL))

# 创建异步会话工厂
AsyncSessionLocal = build_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    获取数据库会话的依赖函数
    在 FastAPI 依赖注入中使用
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db() -> None:
    """
    创建所有表（仅开发环境使用）

    生产环境应使用 Alembic 迁移。
    """
    import blog.models  # noqa: F401  注册所有模型

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("数据库表结构已创建")


async def close_db() -> None:
    """关闭数据库连接"""
    await engine.dispose()
