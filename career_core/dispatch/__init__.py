"""使用场景分发器。"""

from career_core.dispatch.dispatcher import (
    ADVICE_EMPTY_REPLY,
    ADVICE_FALLBACK,
    CAREER_GREETING,
    SENTIMENT_EMPTY_REPLY,
    SENTIMENT_FALLBACK,
    SUMMARY_EMPTY_REPLY,
    SUMMARY_FALLBACK,
    SUMMARY_LENGTHS,
    RequestDispatcher,
)

__all__ = [
    "ADVICE_EMPTY_REPLY",
    "ADVICE_FALLBACK",
    "CAREER_GREETING",
    "SENTIMENT_EMPTY_REPLY",
    "SENTIMENT_FALLBACK",
    "SUMMARY_EMPTY_REPLY",
    "SUMMARY_FALLBACK",
    "SUMMARY_LENGTHS",
    "RequestDispatcher",
]
