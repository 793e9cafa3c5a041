"""
文章系统模型模块
包含文章、分类等模型
"""

from blog.models.articles.post import Post
from blog.models.articles.category import Category

__all__ = ["Post", "Category"]
