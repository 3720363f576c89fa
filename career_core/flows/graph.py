"""LangGraph construction for the dispatcher state machine.

每个使用场景都编译成同一形状的图：

    prepare -> invoke -> resolve -> END
        \\          \\
         +----------+-> fallback -> END

prepare 负责编码输入、组装请求；invoke 负责远程调用与结果校验。
任一节点出错时把错误写入 state["error"]，由路由函数转到 fallback 节点，
因此图本身总能以 resolved 或 fallback 状态结束。
"""

from __future__ import annotations

from typing import Any, Callable

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from career_core.domain.exceptions import BusinessError
from career_core.flows.state import DispatchState
from career_core.infrastructure.logging.logger import logger

StepFn = Callable[[DispatchState], Any]


def _run_step(state: DispatchState, step: str, fn: StepFn, key: str) -> DispatchState:
    state["status"] = "pending"
    ctx = {"trace_id": state.get("trace_id"), "use_case": state.get("use_case")}
    logger.info(f"{step}_node.start", extra={"extra": ctx})
    try:
        state[key] = fn(state)
    except BusinessError as exc:
        state["error"] = {"code": exc.code, "message": exc.message, "step": step}
    except Exception as exc:  # noqa: BLE001 - 节点内错误统一转入 fallback 分支
        state["error"] = {"code": "UNEXPECTED_ERROR", "message": repr(exc), "step": step}
    if state.get("error"):
        logger.warning(f"{step}_node.failed", extra={"extra": {**ctx, **state["error"]}})
    else:
        logger.info(f"{step}_node.end", extra={"extra": ctx})
    return state


def prepare_node(state: DispatchState, prepare: StepFn) -> DispatchState:
    return _run_step(state, "prepare", prepare, "request")


def invoke_node(state: DispatchState, invoke: StepFn) -> DispatchState:
    return _run_step(state, "invoke", invoke, "output")


def resolve_node(state: DispatchState) -> DispatchState:
    state["status"] = "resolved"
    return state


def fallback_node(state: DispatchState, fallback: StepFn) -> DispatchState:
    state["status"] = "fallback"
    state["output"] = fallback(state)
    return state


def step_router(state: DispatchState) -> str:
    if state.get("error"):
        return "fallback"
    return "next"


def build_dispatch_graph(prepare: StepFn, invoke: StepFn, fallback: StepFn) -> CompiledStateGraph:
    graph = StateGraph(DispatchState)
    graph.add_node("prepare", lambda s: prepare_node(s, prepare))
    graph.add_node("invoke", lambda s: invoke_node(s, invoke))
    graph.add_node("resolve", resolve_node)
    graph.add_node("fallback", lambda s: fallback_node(s, fallback))
    graph.set_entry_point("prepare")
    graph.add_conditional_edges("prepare", step_router, {"next": "invoke", "fallback": "fallback"})
    graph.add_conditional_edges("invoke", step_router, {"next": "resolve", "fallback": "fallback"})
    graph.add_edge("resolve", END)
    graph.add_edge("fallback", END)
    return graph.compile()
