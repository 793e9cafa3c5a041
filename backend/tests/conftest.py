"""
测试公共夹具
每个测试使用独立的内存 SQLite 数据库，通过 dependency_overrides 替换 get_db
"""

import os

# 必须在导入 blog 之前设置
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-blog-api-tests-only"
os.environ["DEBUG"] = "true"

from typing import Dict

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from blog.db.database import Base, build_engine, build_session_factory, get_db
from blog.models import User
from blog.services.auth import issue_token
from main import app

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def engine():
    test_engine = build_engine(TEST_DATABASE_URL)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def create_user(session, username: str, email: str, password: str = "secret123", role_code: str = "user") -> User:
    user = User(username=username, email=email, role_code=role_code)
    user.set_password(password)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


def auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest_asyncio.fixture
async def author(db_session) -> User:
    return await create_user(db_session, "alice", "alice@example.com")


@pytest_asyncio.fixture
async def other_user(db_session) -> User:
    return await create_user(db_session, "bob", "bob@example.com")


@pytest_asyncio.fixture
async def admin(db_session) -> User:
    return await create_user(db_session, "root", "root@example.com", role_code="admin")
