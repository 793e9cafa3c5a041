"""文章 API 端到端测试"""

import pytest
from loguru import logger

from blog.models import Category, Post
from blog.services.articles.post import PostService

from conftest import auth_headers

POSTS_URL = "/api/posts"


async def _skip_check(*args, **kwargs):
    return None


async def _make_post(session, author, title="Hello World", **kwargs):
    post = Post(title=title, content=kwargs.pop("content", "Some content"), author_id=author.id, **kwargs)
    session.add(post)
    await session.commit()
    return post


async def _make_category(session, name="Tech"):
    category = Category(name=name)
    session.add(category)
    await session.commit()
    return category


@pytest.mark.asyncio
async def test_list_posts_empty(client):
    response = await client.get(POSTS_URL)
    assert response.status_code == 200
    assert response.json() == {"posts": [], "total_pages": 0, "current_page": 1, "total_posts": 0}


@pytest.mark.asyncio
async def test_list_posts_newest_first_with_pagination(client, db_session, author):
    for i in range(5):
        await _make_post(db_session, author, title=f"Post {i}")

    response = await client.get(POSTS_URL, params={"page": 2, "limit": 2})
    assert response.status_code == 200
    data = response.json()
    assert data["total_posts"] == 5
    assert data["total_pages"] == 3
    assert data["current_page"] == 2
    assert [p["title"] for p in data["posts"]] == ["Post 2", "Post 1"]
    assert data["posts"][0]["author"] == {"id": author.id, "username": "alice", "email": "alice@example.com"}


@pytest.mark.asyncio
async def test_list_posts_filtered_by_category(client, db_session, author):
    tech = await _make_category(db_session, "Tech")
    await _make_post(db_session, author, title="In Tech", category_id=tech.id)
    await _make_post(db_session, author, title="Uncategorised")

    response = await client.get(POSTS_URL, params={"category": tech.id})
    data = response.json()
    assert data["total_posts"] == 1
    assert data["posts"][0]["title"] == "In Tech"
    assert data["posts"][0]["category"] == {"id": tech.id, "name": "Tech"}


@pytest.mark.asyncio
async def test_list_posts_service_filters_only_by_category(db_session, author, other_user):
    tech = await _make_category(db_session, "Tech")
    await _make_post(db_session, author, title="Draft", category_id=tech.id)
    await _make_post(db_session, other_user, title="Live", category_id=tech.id, published=True)
    await _make_post(db_session, author, title="Elsewhere")

    result = await PostService.list_posts(db_session, category_id=tech.id)
    assert result["total_posts"] == 2
    assert [p.title for p in result["posts"]] == ["Live", "Draft"]


@pytest.mark.asyncio
async def test_list_posts_rejects_bad_page(client):
    response = await client.get(POSTS_URL, params={"page": 0})
    assert response.status_code == 400
    assert response.json()["detail"] == "Validation error"


@pytest.mark.asyncio
async def test_get_post(client, db_session, author):
    post = await _make_post(db_session, author, tags=["python", "fastapi"])

    response = await client.get(f"{POSTS_URL}/{post.id}")
    assert response.status_code == 200
    data = response.json()
    assert data["slug"] == "hello-world"
    assert data["tags"] == ["python", "fastapi"]
    assert data["author"]["username"] == "alice"
    assert data["category"] is None


@pytest.mark.asyncio
async def test_get_post_not_found(client):
    response = await client.get(f"{POSTS_URL}/12345")
    assert response.status_code == 404
    assert response.json() == {"detail": "Post not found"}


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["abc", "0", "-1", "1.5", "2147483648", "3000000000", "12345678901"])
async def test_get_post_invalid_id(client, bad_id):
    response = await client.get(f"{POSTS_URL}/{bad_id}")
    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid post ID"}


@pytest.mark.asyncio
async def test_get_post_largest_id_is_not_found(client):
    response = await client.get(f"{POSTS_URL}/2147483647")
    assert response.status_code == 404
    assert response.json() == {"detail": "Post not found"}


@pytest.mark.asyncio
async def test_list_posts_category_out_of_range(client):
    response = await client.get(POSTS_URL, params={"category": 3000000000})
    assert response.status_code == 400
    assert response.json()["detail"] == "Validation error"


@pytest.mark.asyncio
async def test_list_posts_unexpected_error_returns_500(client, monkeypatch):
    async def broken(*args, **kwargs):
        raise RuntimeError("database went away")

    monkeypatch.setattr(PostService, "list_posts", staticmethod(broken))
    messages = []
    handler_id = logger.add(messages.append, level="ERROR")
    try:
        response = await client.get(POSTS_URL)
    finally:
        logger.remove(handler_id)

    assert response.status_code == 500
    assert response.json() == {"detail": "Server error"}
    logged = "".join(str(m) for m in messages)
    assert "获取文章列表失败" in logged
    assert "Traceback" in logged
    assert "RuntimeError: database went away" in logged


@pytest.mark.asyncio
async def test_create_post_unexpected_error_returns_500(client, author, monkeypatch):
    async def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(PostService, "create_post", staticmethod(broken))
    response = await client.post(POSTS_URL, json={"title": "T", "content": "C"}, headers=auth_headers(author))
    assert response.status_code == 500
    assert response.json() == {"detail": "Server error"}


@pytest.mark.asyncio
async def test_create_post_slug_race_returns_400(client, db_session, author, monkeypatch):
    # 预检查放行，冲突由唯一约束抛出
    await _make_post(db_session, author, title="Taken")
    headers = auth_headers(author)
    monkeypatch.setattr(PostService, "_ensure_slug_available", staticmethod(_skip_check))

    response = await client.post(POSTS_URL, json={"title": "Taken", "content": "Again"}, headers=headers)
    assert response.status_code == 400
    assert response.json() == {"detail": "A post with this slug already exists"}

    # 回滚后会话仍可用
    response = await client.post(POSTS_URL, json={"title": "Fresh", "content": "C"}, headers=headers)
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_create_post_requires_token(client):
    response = await client.post(POSTS_URL, json={"title": "T", "content": "C"})
    assert response.status_code == 401
    assert response.json() == {"detail": "Access denied. No token provided."}


@pytest.mark.asyncio
async def test_create_post_with_invalid_token(client):
    response = await client.post(
        POSTS_URL,
        json={"title": "T", "content": "C"},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid token."}


@pytest.mark.asyncio
async def test_create_post(client, db_session, author):
    tech = await _make_category(db_session)
    response = await client.post(
        POSTS_URL,
        json={
            "title": "  My First Post  ",
            "content": "Hello there",
            "category_id": tech.id,
            "tags": ["intro", " ", "blog "],
        },
        headers=auth_headers(author),
    )
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "My First Post"
    assert data["slug"] == "my-first-post"
    assert data["author_id"] == author.id
    assert data["author"]["username"] == "alice"
    assert data["category"]["name"] == "Tech"
    assert data["tags"] == ["intro", "blog"]
    assert data["published"] is False


@pytest.mark.asyncio
async def test_create_post_duplicate_slug(client, db_session, author):
    await _make_post(db_session, author, title="Same Title")
    response = await client.post(
        POSTS_URL,
        json={"title": "same title!", "content": "Other"},
        headers=auth_headers(author),
    )
    assert response.status_code == 400
    assert response.json() == {"detail": "A post with slug 'same-title' already exists"}


@pytest.mark.asyncio
async def test_create_post_unknown_category(client, author):
    response = await client.post(
        POSTS_URL,
        json={"title": "T", "content": "C", "category_id": 999},
        headers=auth_headers(author),
    )
    assert response.status_code == 400
    assert response.json() == {"detail": "Category not found"}


@pytest.mark.asyncio
async def test_create_post_category_id_out_of_range(client, author):
    response = await client.post(
        POSTS_URL,
        json={"title": "T", "content": "C", "category_id": 3000000000},
        headers=auth_headers(author),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation error"
    assert any(err["loc"][-1] == "category_id" for err in body["errors"])


@pytest.mark.asyncio
async def test_create_post_missing_fields(client, author):
    response = await client.post(POSTS_URL, json={"title": "No content"}, headers=auth_headers(author))
    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation error"
    assert any(err["loc"][-1] == "content" for err in body["errors"])


@pytest.mark.asyncio
async def test_create_post_title_without_alphanumerics(client, author):
    response = await client.post(POSTS_URL, json={"title": "!!!", "content": "C"}, headers=auth_headers(author))
    assert response.status_code == 400
    assert response.json() == {"detail": "Title must contain at least one letter or digit"}


@pytest.mark.asyncio
async def test_update_post_by_author(client, db_session, author):
    post = await _make_post(db_session, author, title="Original")

    response = await client.put(
        f"{POSTS_URL}/{post.id}",
        json={"content": "Updated body", "published": True},
        headers=auth_headers(author),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Original"
    assert data["slug"] == "original"
    assert data["content"] == "Updated body"
    assert data["published"] is True
    assert data["updated_at"] >= data["created_at"]


@pytest.mark.asyncio
async def test_update_post_clears_category(client, db_session, author):
    tech = await _make_category(db_session)
    post = await _make_post(db_session, author, category_id=tech.id)

    response = await client.put(
        f"{POSTS_URL}/{post.id}",
        json={"category_id": None},
        headers=auth_headers(author),
    )
    assert response.status_code == 200
    assert response.json()["category_id"] is None
    assert response.json()["category"] is None


@pytest.mark.asyncio
async def test_update_post_by_other_user_forbidden(client, db_session, author, other_user):
    post = await _make_post(db_session, author)

    response = await client.put(
        f"{POSTS_URL}/{post.id}",
        json={"title": "Hijacked"},
        headers=auth_headers(other_user),
    )
    assert response.status_code == 403
    assert response.json() == {"detail": "Not authorized to update this post"}


@pytest.mark.asyncio
async def test_update_post_by_admin(client, db_session, author, admin):
    post = await _make_post(db_session, author)

    response = await client.put(
        f"{POSTS_URL}/{post.id}",
        json={"title": "Moderated"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["title"] == "Moderated"
    assert response.json()["author_id"] == author.id


@pytest.mark.asyncio
async def test_update_post_not_found(client, author):
    response = await client.put(f"{POSTS_URL}/999", json={"title": "X"}, headers=auth_headers(author))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_post_by_author(client, db_session, author):
    post = await _make_post(db_session, author)
    post_id = post.id

    response = await client.delete(f"{POSTS_URL}/{post_id}", headers=auth_headers(author))
    assert response.status_code == 200
    assert response.json() == {"message": "Post deleted successfully"}

    response = await client.get(f"{POSTS_URL}/{post_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_post_by_other_user_forbidden(client, db_session, author, other_user):
    post = await _make_post(db_session, author)

    response = await client.delete(f"{POSTS_URL}/{post.id}", headers=auth_headers(other_user))
    assert response.status_code == 403
    assert response.json() == {"detail": "Not authorized to delete this post"}


@pytest.mark.asyncio
async def test_delete_post_invalid_id(client, author):
    response = await client.delete(f"{POSTS_URL}/not-an-id", headers=auth_headers(author))
    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid post ID"}


@pytest.mark.asyncio
async def test_render_post_page(client, db_session, author):
    post = await _make_post(
        db_session,
        author,
        title="Rendered <Post>",
        content="First paragraph.\n\nSecond paragraph.",
        tags=["html"],
    )

    response = await client.get(f"{POSTS_URL}/{post.id}/render")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    body = response.text
    assert "<h1>Rendered &lt;Post&gt;</h1>" in body
    assert "<p>First paragraph.</p>" in body
    assert "<p>Second paragraph.</p>" in body
    assert "<li>html</li>" in body
    assert "by alice" in body


@pytest.mark.asyncio
async def test_render_post_not_found(client):
    response = await client.get(f"{POSTS_URL}/404/render")
    assert response.status_code == 404
