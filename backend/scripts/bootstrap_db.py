"""
初始化博客数据库：建表并创建/更新超级管理员
用法：python scripts/bootstrap_db.py
"""

import asyncio
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from loguru import logger

from blog.db.database import close_db, init_db
from main import create_super_admin


async def main() -> None:
    await init_db()
    await create_super_admin()
    await close_db()
    logger.info("数据库初始化完成")


if __name__ == "__main__":
    asyncio.run(main())
