"""
密码哈希（bcrypt）
"""

import logging

import bcrypt

from blog.core.config import settings

logger = logging.getLogger(__name__)

# bcrypt 只取密码前 72 字节
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """哈希格式损坏时按不匹配处理"""
    try:
        return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("密码哈希格式无效")
        return False


def hash_super_admin_password() -> str:
    if not settings.SUPER_ADMIN_PASSWORD:
        raise ValueError("SUPER_ADMIN_PASSWORD 未配置")
    return get_password_hash(settings.SUPER_ADMIN_PASSWORD)
