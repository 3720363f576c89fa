"""Provider 与模型配置。

本模块将“逻辑模型名”与“具体厂商模型名”解耦：

- 逻辑名（logical_name）：在代码里使用的统一名称，例如 "career-chat"。
- provider_model：厂商实际提供的模型 ID，例如 "gemini-2.5-flash"。

上层只关心逻辑名，具体用哪个底层模型由这里集中配置，便于后续升级或切换。"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional


@dataclass
class ModelConfig:
    """单个逻辑模型的配置。"""

    logical_name: str
    provider_model: str
    max_tokens: int
    default_temperature: float


@dataclass
class ProviderConfig:
    """某个 Provider 的整体配置。"""

    name: str
    base_url: str
    models: Dict[str, ModelConfig]


# Gemini 配置：四个使用场景各自一个逻辑模型，目前都指向 gemini-2.5-flash
GEMINI_CONFIG = ProviderConfig(
    name="gemini",
    base_url="https://generativelanguage.googleapis.com/v1beta",
    models={
        "career-chat": ModelConfig(
            logical_name="career-chat",
            provider_model="gemini-2.5-flash",
            max_tokens=8192,
            default_temperature=0.7,
        ),
        "summarizer": ModelConfig(
            logical_name="summarizer",
            provider_model="gemini-2.5-flash",
            max_tokens=8192,
            default_temperature=0.3,
        ),
        "resume-extract": ModelConfig(
            logical_name="resume-extract",
            provider_model="gemini-2.5-flash",
            max_tokens=8192,
            default_temperature=0.2,
        ),
        "sentiment": ModelConfig(
            logical_name="sentiment",
            provider_model="gemini-2.5-flash",
            max_tokens=1024,
            default_temperature=0.2,
        ),
    },
)


PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {
    "gemini": GEMINI_CONFIG,
}


def get_provider_config(name: str) -> ProviderConfig:
    """根据名称获取 ProviderConfig，名称不区分大小写。"""

    key = name.lower()
    for k, cfg in PROVIDER_REGISTRY.items():
        if k.lower() == key:
            return cfg
    raise KeyError(f"Unknown provider: {name!r}")


def get_model_config(cfg: ProviderConfig, logical_name: str, override: Optional[str] = None) -> ModelConfig:
    """查找逻辑模型；override 非空时替换厂商模型 ID。"""

    try:
        model_cfg = cfg.models[logical_name]
    except KeyError:
        raise KeyError(f"Unknown model {logical_name!r} for provider {cfg.name!r}") from None
    if override:
        return ModelConfig(
            logical_name=model_cfg.logical_name,
            provider_model=override,
            max_tokens=model_cfg.max_tokens,
            default_temperature=model_cfg.default_temperature,
        )
    return model_cfg
