"""
博客配置
所有配置项均可通过环境变量或项目根目录的 .env 覆盖
"""

import json
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parents[3]

# 生产环境禁止使用的占位值
PLACEHOLDER_VALUES = {"", "change_me"}
MIN_SECRET_KEY_LENGTH = 32


class Settings(BaseSettings):
    """博客后端配置"""

    # ==================== 服务 ====================
    PROJECT_NAME: str = Field(default="Blog API")
    VERSION: str = Field(default="1.0.0")
    API_PREFIX: str = Field(default="/api")
    BACKEND_HOST: str = Field(default="0.0.0.0")
    BACKEND_PORT: int = Field(default=5000)
    BACKEND_RELOAD: bool = Field(default=True)
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    # ==================== JWT ====================
    SECRET_KEY: str = Field(default="change_me")
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24 * 7)

    # ==================== 跨域 ====================
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:3000", "http://127.0.0.1:3000"])

    # ==================== 数据库 ====================
    # DATABASE_URL 未设置时由 POSTGRES_* 拼接
    DATABASE_URL: Optional[str] = Field(default=None)
    DATABASE_DRIVER: str = Field(default="asyncpg")
    POSTGRES_USER: str = Field(default="blog")
    POSTGRES_PASSWORD: str = Field(default="change_me")
    POSTGRES_HOST: str = Field(default="127.0.0.1")
    POSTGRES_PORT: int = Field(default=5432)
    POSTGRES_DB: str = Field(default="blog_db")
    POSTGRES_MAX_CONNECTIONS: Optional[int] = Field(default=None)
    DB_MAX_OVERFLOW: Optional[int] = Field(default=None)
    DB_POOL_TIMEOUT_SECONDS: int = Field(default=30)
    POSTGRES_STATEMENT_TIMEOUT: int = Field(default=30000)  # 毫秒
    SQLALCHEMY_ECHO: bool = Field(default=False)
    AUTO_CREATE_TABLES: bool = Field(default=False)

    # ==================== 初始管理员 ====================
    SUPER_ADMIN_USERNAME: str = Field(default="admin")
    SUPER_ADMIN_EMAIL: str = Field(default="admin@example.com")
    SUPER_ADMIN_PASSWORD: str = Field(default="change_me")

    # ==================== 分页 ====================
    POST_PAGE_SIZE_DEFAULT: int = Field(default=10)
    POST_PAGE_SIZE_MAX: int = Field(default=100)
    CATEGORY_PAGE_SIZE_DEFAULT: int = Field(default=20)
    CATEGORY_PAGE_SIZE_MAX: int = Field(default=100)
    USER_PAGE_SIZE_DEFAULT: int = Field(default=20)
    USER_PAGE_SIZE_MAX: int = Field(default=100)

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def split_cors_origins(cls, v):
        """CORS_ORIGINS 支持 JSON 数组或逗号分隔字符串"""
        if not isinstance(v, str):
            return v
        v = v.strip()
        if v.startswith("["):
            return json.loads(v)
        return [item.strip() for item in v.split(",") if item.strip()]

    @model_validator(mode="after")
    def finalize(self):
        if not self.DATABASE_URL:
            self.DATABASE_URL = (
                f"postgresql+{self.DATABASE_DRIVER}://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        # 连接池大小：开发环境小一些
        if self.POSTGRES_MAX_CONNECTIONS is None:
            self.POSTGRES_MAX_CONNECTIONS = 20 if self.DEBUG else 50
        if self.DB_MAX_OVERFLOW is None:
            self.DB_MAX_OVERFLOW = 10 if self.DEBUG else 20

        if not self.DEBUG:
            self._check_production_secrets()
        return self

    def _check_production_secrets(self) -> None:
        for name in ("SECRET_KEY", "SUPER_ADMIN_PASSWORD"):
            if str(getattr(self, name) or "").strip() in PLACEHOLDER_VALUES:
                raise ValueError(f"{name} 未配置或仍为默认值，请在 .env 中设置")
        if len(self.SECRET_KEY) < MIN_SECRET_KEY_LENGTH:
            raise ValueError(f"SECRET_KEY 至少需要 {MIN_SECRET_KEY_LENGTH} 个字符")

    class Config:
        env_file = str(PROJECT_ROOT / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
