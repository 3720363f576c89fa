"""对外 API 服务模块。

提供简化的函数接口供 UI 层调用，函数名与各页面的调用一一对应。
所有函数都不会抛出异常，失败时返回对应场景的兜底值。
"""

from typing import Optional, Sequence

from career_core.content.encoder import Encodable
from career_core.dispatch.dispatcher import RequestDispatcher, SummaryLength
from career_core.domain.conversation import ConversationTurn
from career_core.domain.resume import OptimizationResult
from career_core.providers import create_provider
from career_core.providers.base import ProviderClient


_dispatcher: Optional[RequestDispatcher] = None


def get_default_dispatcher() -> RequestDispatcher:
    """获取默认的 RequestDispatcher 实例（单例）。"""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = RequestDispatcher(provider_client=create_provider())
    return _dispatcher


def reset_default_dispatcher(provider_client: Optional[ProviderClient] = None) -> RequestDispatcher:
    """替换默认实例，主要用于测试或切换 Provider。"""
    global _dispatcher
    _dispatcher = RequestDispatcher(provider_client=provider_client or create_provider())
    return _dispatcher


def generate_career_advice(history: Sequence[ConversationTurn], current_message: str) -> str:
    """运行一轮职业咨询对话。

    Args:
        history: 本轮之前的对话记录
        current_message: 用户本轮输入

    Returns:
        模型回复，失败时为固定的致歉文案
    """
    return get_default_dispatcher().advise(history, current_message)


def summarize_text(source: Encodable, length: SummaryLength = "medium") -> str:
    return get_default_dispatcher().summarize(source, length)


def optimize_resume(
    job_description: str,
    software_resume: Encodable,
    core_resume: Encodable,
) -> Optional[OptimizationResult]:
    """在软件方向和核心（电气）方向两份简历中择优并按职位描述重组。"""
    return get_default_dispatcher().synthesize_resume(
        job_description,
        [software_resume, core_resume],
    )


def analyze_stock_sentiment(news_headline: str) -> str:
    return get_default_dispatcher().analyze_headline(news_headline)
