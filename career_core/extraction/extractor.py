"""结构化抽取：带输出结构约束的单次模型调用。

extract() 的契约：
- 请求片段为 [TextPart(instruction), *parts]，并附带 response schema，要求 JSON 输出。
- 每次调用只发一次请求，不缓存、不重试、不修改 schema。
- 响应为空、无法解析、结构不符或调用失败时一律返回 None，不向上抛异常，
  也不会返回部分合法的结构。
"""

import json
import re
from typing import Any, Dict, Optional, Sequence

from career_core.domain.exceptions import BusinessError, EmptyResponseError, SchemaViolationError
from career_core.domain.models import GenerateRequest, RequestPart, TextPart
from career_core.domain.schema import SchemaNode, to_provider_schema, validate
from career_core.infrastructure.logging.logger import logger
from career_core.providers.base import ProviderClient


ExtractionResult = Dict[str, Any]

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")


class SchemaExtractor:
    """把模型输出约束到声明式结构上的抽取器。"""

    def __init__(
        self,
        provider_client: ProviderClient,
        model: str = "resume-extract",
        temperature: Optional[float] = None,
    ):
        self._provider_client = provider_client
        self._model = model
        self._temperature = temperature

    def extract(
        self,
        instruction_text: str,
        parts: Sequence[RequestPart],
        schema: SchemaNode,
    ) -> Optional[ExtractionResult]:
        try:
            return self.extract_or_raise(instruction_text, parts, schema)
        except BusinessError as e:
            logger.warning(
                "Extraction failed",
                extra={"extra": {"error_code": e.code, "error": e.message, "model": self._model}},
            )
            return None
        except Exception as e:  # noqa: BLE001 - extract() 承诺永不抛出
            logger.error(
                "Extraction failed unexpectedly",
                extra={"extra": {"error": repr(e), "model": self._model}},
            )
            return None

    def extract_or_raise(
        self,
        instruction_text: str,
        parts: Sequence[RequestPart],
        schema: SchemaNode,
    ) -> ExtractionResult:
        """与 extract 相同，但失败时抛出具体的 BusinessError。"""

        req = GenerateRequest(
            provider=getattr(self._provider_client, "name", "unknown"),
            model=self._model,
            parts=[TextPart(instruction_text), *parts],
            response_schema=to_provider_schema(schema),
            temperature=self._temperature,
        )
        logger.info(
            "Calling provider (structured)",
            extra={"extra": {"provider": req.provider, "model": req.model, "part_count": len(req.parts)}},
        )
        result = self._provider_client.generate(req)
        payload = parse_json_payload(result.text)
        return validate(schema, payload)


def parse_json_payload(raw: Optional[str]) -> Any:
    """去掉可能存在的 ```json 代码块围栏后解析 JSON。"""

    if raw is None or not raw.strip():
        raise EmptyResponseError(code="EMPTY_RESPONSE", message="model returned no text")
    text = _FENCE_RE.sub("", raw.strip())
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaViolationError(code="MALFORMED_JSON", message=f"invalid JSON: {e}")
