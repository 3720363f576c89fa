"""State definition for the dispatch graphs."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional, TypedDict


DispatchStatus = Literal["idle", "pending", "resolved", "fallback"]


class DispatchState(TypedDict, total=False):
    """State shared across LangGraph nodes of one dispatcher call.

    inputs 保存调用方传入的原始参数，request 是 prepare 节点组装好的请求，
    output 是最终返回给调用方的值（成功结果或兜底值）。
    """

    use_case: str
    trace_id: str
    status: DispatchStatus
    inputs: Dict[str, Any]
    request: Any
    output: Any
    error: Optional[Dict[str, str]]
