"""
文章 HTML 渲染
"""

import html
from typing import Callable, Optional

from blog.models.articles import Post
from blog.utils.error_boundary import ErrorBoundary

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
{body}
</body>
</html>"""


def render_post_body(post: Post) -> str:
    """渲染文章正文片段（标题、作者/分类信息、标签、段落）"""
    meta = [f"by {html.escape(post.author.username)}"]
    if post.category is not None:
        meta.append(f"in {html.escape(post.category.name)}")
    meta.append(post.created_at.strftime("%Y-%m-%d"))

    paragraphs = [p.strip() for p in post.content.split("\n\n") if p.strip()]

    parts = [
        f'<article class="post" data-slug="{html.escape(post.slug, quote=True)}">',
        f"<h1>{html.escape(post.title)}</h1>",
        f'<p class="post-meta">{" · ".join(meta)}</p>',
    ]
    if post.tags:
        tags = "".join(f"<li>{html.escape(tag)}</li>" for tag in post.tags)
        parts.append(f'<ul class="post-tags">{tags}</ul>')
    parts.extend(f"<p>{html.escape(p)}</p>" for p in paragraphs)
    parts.append("</article>")
    return "\n".join(parts)


def render_post_page(
    post: Post,
    retry_url: str = "",
    show_details: Optional[bool] = None,
    renderer: Callable[[Post], str] = render_post_body,
) -> str:
    """渲染完整页面，正文部分由错误边界保护"""
    boundary = ErrorBoundary(
        lambda: renderer(post),
        show_details=show_details,
        retry_url=retry_url,
        name=f"post:{post.id}",
    )
    return PAGE_TEMPLATE.format(title=html.escape(post.title), body=boundary.render_children())
