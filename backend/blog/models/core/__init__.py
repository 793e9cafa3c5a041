"""
核心系统模型模块
"""

from blog.models.core.user import User, ROLE_ADMIN, ROLE_USER

__all__ = ["User", "ROLE_ADMIN", "ROLE_USER"]
