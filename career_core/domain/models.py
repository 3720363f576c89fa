"""统一的请求与结果数据模型。

本模块定义了 Dispatcher、Extractor 与 Provider 之间共享的标准数据结构：

- TextPart / AttachmentPart: 请求体中的一个片段（文本或 base64 附件）。
- ProviderTurn: 历史对话在 Provider 侧的表示。
- GenerateRequest: 发给底层模型 Provider 的完整请求。
- GenerateResult: 从 Provider 解析后的统一响应结果。

所有 Provider 适配器（如 GeminiClient）都只依赖这些模型，
并负责在各自的 API JSON 和这些模型之间做转换。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence, Union

from career_core.domain.exceptions import ValidationError


# 对话角色，与 Gemini contents[].role 字段一致
Role = Literal["user", "model"]


@dataclass(frozen=True)
class TextPart:
    """纯文本片段。"""

    content: str
    kind: Literal["text"] = field(default="text", init=False)


@dataclass(frozen=True)
class AttachmentPart:
    """二进制附件片段。

    - data: base64 编码后的字节内容。
    - mime_type: 附件声明的 MIME 类型，例如 application/pdf。
    """

    data: str
    mime_type: str
    kind: Literal["attachment"] = field(default="attachment", init=False)


RequestPart = Union[TextPart, AttachmentPart]


@dataclass
class ProviderTurn:
    """一条历史消息在 Provider 请求中的形态。"""

    role: Role
    parts: List[TextPart]


@dataclass
class GenerateRequest:
    """一次完整的生成请求。

    Dispatcher 负责组装 parts/history，Provider 适配层负责把本结构
    转换成各家 API 的 JSON 请求体。
    """

    provider: str  # 逻辑 Provider 名，如 "gemini"
    model: str  # 逻辑模型名，如 "career-chat"（再由 registry 映射为真实模型名）
    parts: List[RequestPart]
    system_instruction: Optional[str] = None
    history: List[ProviderTurn] = field(default_factory=list)
    # 结构化输出：Provider 格式的 response schema，设置后要求模型返回 JSON
    response_schema: Optional[Dict[str, Any]] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

    def __post_init__(self) -> None:
        ensure_parts_order(self.parts)

    @property
    def wants_json(self) -> bool:
        return self.response_schema is not None


@dataclass
class TokenUsage:
    """Provider 返回的 token 统计信息（统一格式）。"""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class GenerateResult:
    """一次生成调用的最终结果。

    - text: 候选回答中所有文本片段拼接后的内容，可能为空字符串。
    - finish_reason: Provider 返回的结束原因（如 STOP、MAX_TOKENS）。
    - raw: 原始响应 JSON，用于调试。
    """

    provider: str
    model: str
    text: str
    finish_reason: Optional[str] = None
    usage: Optional[TokenUsage] = None
    raw: Optional[dict] = None


def ensure_parts_order(parts: Sequence[RequestPart]) -> None:
    """校验请求片段：不能为空，且第一个片段必须是文本指令。"""

    if not parts:
        raise ValidationError(code="EMPTY_PARTS", message="request parts must not be empty")
    if not isinstance(parts[0], TextPart):
        raise ValidationError(
            code="INSTRUCTION_REQUIRED",
            message="an instruction TextPart must precede any attachment",
        )
    for part in parts:
        if not isinstance(part, (TextPart, AttachmentPart)):
            raise ValidationError(
                code="INVALID_PART",
                message=f"unsupported request part: {type(part).__name__}",
            )
