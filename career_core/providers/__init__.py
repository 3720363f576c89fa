"""模型 Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护 Provider 与模型配置 (registry)。
- 提供各厂商的具体实现 (如 gemini_client)。
"""

from typing import Optional

from career_core.config.settings import settings
from career_core.domain.exceptions import ValidationError
from career_core.providers.base import ProviderClient
from career_core.providers.gemini_client import GeminiClient


def create_provider(name: Optional[str] = None) -> ProviderClient:
    """根据名称创建 Provider 实例，默认取配置中的 provider。"""

    provider_name = (name or getattr(settings, "default_provider", "gemini")).lower()
    if provider_name == "gemini":
        return GeminiClient(settings)
    raise ValidationError(code="UNKNOWN_PROVIDER", message=f"Unknown provider: {provider_name!r}")

