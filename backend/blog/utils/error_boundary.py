"""
渲染错误边界

包裹一段页面片段的渲染函数：
- 渲染抛出异常时进入错误状态，记录日志并返回静态的降级页面
- 调试模式下降级页面附带可展开的技术细节（异常和堆栈）
- reset() 清除错误状态并重新渲染
"""

import html
import traceback
from typing import Callable, Optional

from loguru import logger

from blog.core.config import settings

FALLBACK_TITLE = "Something went wrong"
FALLBACK_MESSAGE = "We're sorry, but something unexpected happened. Please try again."
RETRY_LABEL = "Try again"


class ErrorBoundary:
    """渲染错误边界"""

    def __init__(
        self,
        render: Callable[[], str],
        show_details: Optional[bool] = None,
        retry_url: str = "",
        name: str = "subtree",
    ):
        self._render = render
        self.show_details = settings.DEBUG if show_details is None else show_details
        self.retry_url = retry_url
        self.name = name
        self.has_error = False
        self.error: Optional[BaseException] = None
        self.error_info: Optional[str] = None

    def render_children(self) -> str:
        """渲染子内容；处于错误状态时直接返回降级页面"""
        if self.has_error:
            return self.render_fallback()
        try:
            return self._render()
        except Exception as exc:
            self._capture(exc)
            return self.render_fallback()

    def reset(self) -> str:
        """清除错误状态并重新尝试渲染"""
        self.has_error = False
        self.error = None
        self.error_info = None
        return self.render_children()

    def _capture(self, exc: Exception) -> None:
        self.has_error = True
        self.error = exc
        self.error_info = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        logger.opt(exception=exc).error(f"渲染 {self.name} 失败: {exc!r}")

    def render_fallback(self) -> str:
        """静态降级内容"""
        parts = [
            '<div class="error-boundary" role="alert">',
            f"<h2>{FALLBACK_TITLE}</h2>",
            f"<p>{FALLBACK_MESSAGE}</p>",
        ]
        if self.show_details and self.error is not None:
            parts.extend([
                '<details class="error-details">',
                "<summary>Error details</summary>",
                f"<pre>{html.escape(repr(self.error))}</pre>",
                f"<pre>{html.escape(self.error_info or '')}</pre>",
                "</details>",
            ])
        parts.append(f'<a class="error-retry" href="{html.escape(self.retry_url, quote=True)}">{RETRY_LABEL}</a>')
        parts.append("</div>")
        return "\n".join(parts)
