"""
slug 生成工具
"""

import re

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_DASH_RUN = re.compile(r"-+")


def slugify(text: str) -> str:
    """
    将标题/名称转换为URL友好的别名

    非字母数字字符替换为破折号，合并连续破折号并去掉首尾破折号。
    对同一输入结果固定，且 slugify(slugify(x)) == slugify(x)。
    """
    slug = _NON_ALNUM.sub("-", text.strip().lower())
    slug = _DASH_RUN.sub("-", slug)
    return slug.strip("-")
