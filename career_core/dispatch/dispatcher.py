"""请求分发器：各使用场景的唯一入口。

每个入口都对应一张编译好的 LangGraph 状态图
（idle -> pending -> resolved | fallback），负责：

1. 通过 content.encoder 编码输入，通过 ConversationLog 投影历史；
2. 调用远程模型（结构化场景经由 SchemaExtractor）；
3. 把编码失败、传输失败、结构校验失败、空响应统一转换为兜底值。

调用方永远拿到与成功时同类型的返回值，不需要在外面包 try/except。
"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, Literal, Optional, Sequence, Tuple, Union
from uuid import uuid4

from langgraph.graph.state import CompiledStateGraph

from career_core.config.settings import settings
from career_core.content.encoder import Encodable, encode
from career_core.domain.conversation import ConversationLog, ConversationTurn
from career_core.domain.exceptions import (
    EmptyResponseError,
    SchemaViolationError,
    ValidationError,
)
from career_core.domain.models import GenerateRequest, TextPart
from career_core.domain.resume import DEFAULT_RESUME_LABELS, OptimizationResult, build_resume_schema
from career_core.domain.summary import SummaryResult
from career_core.extraction.extractor import SchemaExtractor
from career_core.extraction.grounding import find_ungrounded
from career_core.flows.graph import build_dispatch_graph
from career_core.flows.state import DispatchState
from career_core.infrastructure.logging.logger import logger
from career_core.prompts import load_prompt, render_prompt
from career_core.providers.base import ProviderClient


SummaryLength = Literal["short", "medium", "long"]
SUMMARY_LENGTHS: Tuple[str, ...] = ("short", "medium", "long")

CAREER_GREETING = (
    "Hello! I'm your AI Career Counsellor. I can help analyze your interests and suggest "
    "suitable career paths. To start, tell me a bit about what you enjoy doing or your "
    "educational background."
)
ADVICE_EMPTY_REPLY = "I'm having trouble analyzing that right now. Could you elaborate?"
ADVICE_FALLBACK = (
    "I apologize, but I am unable to connect to the career database at the moment. "
    "Please ensure your API key is valid."
)
SUMMARY_EMPTY_REPLY = "Could not generate summary."
SUMMARY_FALLBACK = "Error generating summary. Please try again."
SENTIMENT_EMPTY_REPLY = "Analysis unavailable."
SENTIMENT_FALLBACK = "Could not analyze sentiment."

History = Union[ConversationLog, Sequence[ConversationTurn]]


def _text_fallback(empty_reply: str, failure_reply: str) -> Callable[[DispatchState], str]:
    def fallback(state: DispatchState) -> str:
        error = state.get("error") or {}
        if error.get("code") == "EMPTY_RESPONSE":
            return empty_reply
        return failure_reply

    return fallback


def _no_result(state: DispatchState) -> None:
    return None


def _is_blank(value: Any) -> bool:
    return isinstance(value, str) and not value.strip()


def _as_tuple(value: Any, what: str) -> Tuple[Any, ...]:
    # 单个字符串或非序列参数不能当作文档/标签列表
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise ValidationError(code="INVALID_ARGUMENT", message=f"{what} must be a sequence")
    return tuple(value)


class RequestDispatcher:
    """四个使用场景的统一分发器。

    - advise: 职业咨询多轮对话。
    - summarize / summarize_with_metrics: 文本或附件摘要。
    - synthesize_resume: 从两份简历中挑选并按结构重组。
    - analyze_headline: 财经新闻标题情绪分析。
    """

    def __init__(
        self,
        provider_client: ProviderClient,
        extractor: Optional[SchemaExtractor] = None,
        reject_ungrounded_skills: Optional[bool] = None,
    ):
        self._provider_client = provider_client
        self._provider_name = getattr(provider_client, "name", None) or getattr(
            settings, "default_provider", "gemini"
        )
        self._extractor = extractor or SchemaExtractor(provider_client)
        if reject_ungrounded_skills is None:
            reject_ungrounded_skills = getattr(settings, "reject_ungrounded_skills", False)
        self._reject_ungrounded = reject_ungrounded_skills
        self._graphs: Dict[str, CompiledStateGraph] = {
            "advice": build_dispatch_graph(
                self._prepare_advice,
                self._invoke_text,
                _text_fallback(ADVICE_EMPTY_REPLY, ADVICE_FALLBACK),
            ),
            "summary": build_dispatch_graph(
                self._prepare_summary,
                self._invoke_text,
                _text_fallback(SUMMARY_EMPTY_REPLY, SUMMARY_FALLBACK),
            ),
            "resume": build_dispatch_graph(
                self._prepare_resume,
                self._invoke_resume,
                _no_result,
            ),
            "sentiment": build_dispatch_graph(
                self._prepare_sentiment,
                self._invoke_text,
                _text_fallback(SENTIMENT_EMPTY_REPLY, SENTIMENT_FALLBACK),
            ),
        }
        self._fallbacks: Dict[str, Any] = {
            "advice": ADVICE_FALLBACK,
            "summary": SUMMARY_FALLBACK,
            "resume": None,
            "sentiment": SENTIMENT_FALLBACK,
        }

    # ---- 对外入口 ----

    def advise(self, history: History, message: str) -> str:
        """根据历史对话和本轮消息给出职业建议。

        history 不会被修改；是否把回复（或兜底文案）写入会话由调用方决定。
        """

        return self._dispatch("advice", {"history": history, "message": message})

    def summarize(self, source: Encodable, length: SummaryLength = "medium") -> str:
        """摘要一段文本或一个附件，length 取 short / medium / long。"""

        return self._dispatch("summary", {"source": source, "length": length})

    def summarize_with_metrics(self, text: str, length: SummaryLength = "medium") -> SummaryResult:
        summary = self.summarize(text, length)
        return SummaryResult.build(text, summary)

    def synthesize_resume(
        self,
        job_context: str,
        documents: Sequence[Encodable],
        labels: Sequence[str] = DEFAULT_RESUME_LABELS,
    ) -> Optional[OptimizationResult]:
        """从两份候选简历中选出与职位更相关的一份，并按结构重组其内容。"""

        return self._dispatch(
            "resume",
            {"job_context": job_context, "documents": documents, "labels": labels},
        )

    def analyze_headline(self, headline: str) -> str:
        return self._dispatch("sentiment", {"headline": headline})

    # ---- 状态机驱动 ----

    def _dispatch(self, use_case: str, inputs: Dict[str, Any]) -> Any:
        start_time = time.time()
        log_ctx: Dict[str, Any] = {
            "trace_id": f"tr-{uuid4().hex}",
            "use_case": use_case,
            "provider": self._provider_name,
        }
        state: DispatchState = {
            "use_case": use_case,
            "trace_id": log_ctx["trace_id"],
            "status": "idle",
            "inputs": inputs,
            "request": None,
            "output": None,
            "error": None,
        }
        self._log(logging.INFO, "Dispatch started", log_ctx)
        try:
            final = self._graphs[use_case].invoke(state)
        except Exception as e:  # noqa: BLE001 - 分发器对调用方承诺永不抛出
            self._log(logging.ERROR, "Dispatch graph crashed", log_ctx, error=repr(e))
            return self._fallbacks[use_case]

        error = final.get("error") or {}
        self._log(
            logging.WARNING if error else logging.INFO,
            "Dispatch finished",
            log_ctx,
            status=final.get("status"),
            error_code=error.get("code"),
            error_step=error.get("step"),
            elapsed_seconds=round(time.time() - start_time, 2),
        )
        return final.get("output")

    # ---- prepare 节点 ----

    def _prepare_advice(self, state: DispatchState) -> GenerateRequest:
        inputs = state["inputs"]
        message = inputs["message"]
        if not isinstance(message, str) or not message.strip():
            raise ValidationError(code="EMPTY_MESSAGE", message="message must not be blank")
        history = inputs["history"]
        if isinstance(history, ConversationLog):
            turns = history.history_view()
        else:
            turns = tuple(history or ())
        # 调用方可能已经把本轮用户消息写入日志，避免在历史里重复发送
        if turns and turns[-1].role == "user" and turns[-1].text == message:
            turns = turns[:-1]
        return GenerateRequest(
            provider=self._provider_name,
            model="career-chat",
            parts=[TextPart(message)],
            system_instruction=load_prompt("career_counsellor_system"),
            history=ConversationLog(turns).to_provider_history(),
        )

    def _prepare_summary(self, state: DispatchState) -> GenerateRequest:
        inputs = state["inputs"]
        length = inputs["length"]
        if length not in SUMMARY_LENGTHS:
            raise ValidationError(
                code="INVALID_LENGTH",
                message=f"length must be one of {SUMMARY_LENGTHS}, got {length!r}",
            )
        if _is_blank(inputs["source"]):
            raise ValidationError(code="EMPTY_SOURCE", message="summary source must not be blank")
        part = encode(inputs["source"])
        source_kind = "text" if isinstance(part, TextPart) else "attached document"
        instruction = render_prompt("summarize", length=length, source_kind=source_kind)
        return GenerateRequest(
            provider=self._provider_name,
            model="summarizer",
            parts=[TextPart(instruction), part],
        )

    def _prepare_resume(self, state: DispatchState) -> Dict[str, Any]:
        inputs = state["inputs"]
        job_context = inputs["job_context"]
        if not isinstance(job_context, str) or not job_context.strip():
            raise ValidationError(code="EMPTY_JOB_CONTEXT", message="job context must not be blank")
        documents = _as_tuple(inputs["documents"], "documents")
        labels = _as_tuple(inputs["labels"], "labels")
        if len(documents) != 2:
            raise ValidationError(
                code="DOCUMENT_COUNT",
                message=f"exactly two documents are required, got {len(documents)}",
            )
        if len(labels) != 2 or labels[0] == labels[1]:
            raise ValidationError(code="INVALID_LABELS", message="two distinct labels are required")
        if any(_is_blank(doc) for doc in documents):
            raise ValidationError(code="EMPTY_DOCUMENT", message="resume documents must not be blank")
        parts = []
        for label, doc in zip(labels, documents):
            parts.append(TextPart(f"--- {label} resume ---"))
            parts.append(encode(doc))
        instruction = render_prompt(
            "resume_synthesis",
            labels=" and ".join(f'"{label}"' for label in labels),
            job_context=job_context.strip(),
        )
        return {
            "instruction": instruction,
            "parts": parts,
            "schema": build_resume_schema(labels),
            "documents": documents,
            "labels": labels,
        }

    def _prepare_sentiment(self, state: DispatchState) -> GenerateRequest:
        headline = state["inputs"]["headline"]
        if not isinstance(headline, str) or not headline.strip():
            raise ValidationError(code="EMPTY_HEADLINE", message="headline must not be blank")
        return GenerateRequest(
            provider=self._provider_name,
            model="sentiment",
            parts=[TextPart(render_prompt("headline_sentiment", headline=headline.strip()))],
        )

    # ---- invoke 节点 ----

    def _invoke_text(self, state: DispatchState) -> str:
        req: GenerateRequest = state["request"]
        self._log(
            logging.INFO,
            "Calling provider",
            {"trace_id": state.get("trace_id"), "use_case": state.get("use_case")},
            model=req.model,
            part_count=len(req.parts),
            history_count=len(req.history),
        )
        result = self._provider_client.generate(req)
        if result.usage:
            self._log(
                logging.INFO,
                "Token usage",
                {"trace_id": state.get("trace_id")},
                prompt_tokens=result.usage.prompt_tokens,
                completion_tokens=result.usage.completion_tokens,
                total_tokens=result.usage.total_tokens,
            )
        if not result.text or not result.text.strip():
            raise EmptyResponseError(code="EMPTY_RESPONSE", message="model returned no text")
        return result.text

    def _invoke_resume(self, state: DispatchState) -> OptimizationResult:
        req = state["request"]
        payload = self._extractor.extract(req["instruction"], req["parts"], req["schema"])
        if payload is None:
            raise SchemaViolationError(
                code="EXTRACTION_FAILED",
                message="no schema-conformant result was extracted",
            )
        result = OptimizationResult.from_payload(payload)

        chosen = req["documents"][req["labels"].index(result.selected_resume_type)]
        if isinstance(chosen, str):
            result.ungrounded_skills = find_ungrounded(result.content.skills, chosen)
            if result.ungrounded_skills:
                self._log(
                    logging.WARNING,
                    "Ungrounded skills in extraction",
                    {"trace_id": state.get("trace_id")},
                    selected=result.selected_resume_type,
                    skills=result.ungrounded_skills,
                )
                if self._reject_ungrounded:
                    raise SchemaViolationError(
                        code="UNGROUNDED_CONTENT",
                        message=f"skills not found in source: {result.ungrounded_skills}",
                    )
        return result

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
