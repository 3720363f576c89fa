"""Gemini Provider 适配器。

使用 generateContent REST 端点：
- URL: {base_url}/models/{model}:generateContent
- 认证: x-goog-api-key: <api_key>

本模块负责：

1. 接收统一的 GenerateRequest。
2. 将其转换为 Gemini 的请求体（contents / systemInstruction / generationConfig）。
3. 调用 HTTP 接口并处理网络/API 异常。
4. 将响应 JSON 解析为统一的 GenerateResult。
"""

from typing import Any, Dict, List

import httpx

from career_core.config.settings import settings
from career_core.domain.exceptions import ApiError, NetworkError, RateLimitError, ValidationError
from career_core.domain.models import (
    AttachmentPart,
    GenerateRequest,
    GenerateResult,
    ProviderTurn,
    RequestPart,
    TextPart,
    TokenUsage,
)
from career_core.providers.registry import GEMINI_CONFIG, ModelConfig, get_model_config


class GeminiClient:
    """Gemini Provider 客户端实现。"""

    name = "gemini"

    def __init__(self, cfg=settings):
        # Settings 里包含 base_url、api_key、超时等配置
        self._settings = cfg

    def generate(self, req: GenerateRequest) -> GenerateResult:
        """执行一次非流式生成调用。

        步骤：
        1. 读取模型配置（logical model -> provider model）。
        2. 构造 HTTP 请求 payload。
        3. 发送请求并捕获网络错误/限流/服务端错误。
        4. 使用统一的解析函数构造 GenerateResult。
        """

        api_key = getattr(self._settings, "gemini_api_key", None)
        if not api_key:
            # 配置缺失走 ValidationError，方便上层统一处理
            raise ValidationError(code="MISSING_API_KEY", message="GEMINI_API_KEY not set")
        try:
            model_cfg = get_model_config(
                GEMINI_CONFIG, req.model, getattr(self._settings, "gemini_model", None)
            )
        except KeyError as e:
            raise ValidationError(code="UNKNOWN_MODEL", message=str(e))
        payload = self._build_payload(req, model_cfg)
        base = getattr(self._settings, "gemini_base_url", None) or GEMINI_CONFIG.base_url
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = client.post(
                    f"{base}/models/{model_cfg.provider_model}:generateContent",
                    json=payload,
                    headers={
                        "x-goog-api-key": api_key,
                        "Content-Type": "application/json",
                    },
                )
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接超时等
            raise NetworkError(code="NETWORK_ERROR", message=str(e))
        if resp.status_code == 429:
            raise RateLimitError(code="RATE_LIMIT", message="Gemini rate limit", http_status=429)
        if resp.status_code >= 400:
            # 其他 HTTP 错误统一包装为 ApiError
            raise ApiError(code="API_ERROR", message=resp.text, http_status=resp.status_code)
        try:
            data = resp.json()
        except ValueError as e:
            raise ApiError(code="MALFORMED_RESPONSE", message=f"invalid JSON body: {e}")
        if not isinstance(data, dict):
            raise ApiError(code="MALFORMED_RESPONSE", message="response body is not an object")
        return self._parse_response(data, req)

    def _build_payload(self, req: GenerateRequest, model_cfg: ModelConfig) -> Dict[str, Any]:
        """将 GenerateRequest 转成 Gemini 所需的请求 JSON。

        历史消息在前，本轮用户片段作为最后一条 user content。
        """

        contents = [self._turn_to_payload(t) for t in req.history]
        contents.append({"role": "user", "parts": [self._part_to_payload(p) for p in req.parts]})
        temperature = req.temperature
        if temperature is None:
            temperature = model_cfg.default_temperature
        generation_config: Dict[str, Any] = {
            "temperature": temperature,
            "maxOutputTokens": req.max_tokens or model_cfg.max_tokens,
        }
        if req.response_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = req.response_schema
        payload: Dict[str, Any] = {
            "contents": contents,
            "generationConfig": generation_config,
        }
        if req.system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": req.system_instruction}]}
        return payload

    def _turn_to_payload(self, turn: ProviderTurn) -> Dict[str, Any]:
        return {"role": turn.role, "parts": [self._part_to_payload(p) for p in turn.parts]}

    @staticmethod
    def _part_to_payload(part: RequestPart) -> Dict[str, Any]:
        if isinstance(part, AttachmentPart):
            return {"inlineData": {"mimeType": part.mime_type, "data": part.data}}
        if isinstance(part, TextPart):
            return {"text": part.content}
        raise ValidationError(code="INVALID_PART", message=f"unsupported part {type(part).__name__}")

    def _parse_response(self, data: Dict[str, Any], req: GenerateRequest) -> GenerateResult:
        """将 Gemini 的原始响应 JSON 解析为统一的 GenerateResult。"""

        candidates = data.get("candidates") or []
        if not candidates:
            # 没有候选回答通常意味着提示词被安全策略拦截
            feedback = data.get("promptFeedback") or {}
            reason = feedback.get("blockReason")
            if reason:
                raise ApiError(code="PROMPT_BLOCKED", message=f"prompt blocked: {reason}")
            raise ApiError(code="MALFORMED_RESPONSE", message="response has no candidates")
        first = candidates[0] or {}
        content = first.get("content") or {}
        texts: List[str] = []
        for part in content.get("parts") or []:
            # thought=True 的片段是模型的思考过程，不属于回答
            if isinstance(part, dict) and part.get("text") and not part.get("thought"):
                texts.append(part["text"])
        usage_raw = data.get("usageMetadata") or {}
        usage = None
        if usage_raw:
            usage = TokenUsage(
                prompt_tokens=usage_raw.get("promptTokenCount", 0),
                completion_tokens=usage_raw.get("candidatesTokenCount", 0),
                total_tokens=usage_raw.get("totalTokenCount", 0),
            )
        return GenerateResult(
            provider="gemini",
            model=req.model,
            text="".join(texts),
            finish_reason=first.get("finishReason"),
            usage=usage,
            raw=data,
        )
