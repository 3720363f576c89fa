"""Provider 抽象接口。

上层 Dispatcher / Extractor 不直接依赖具体厂商的 HTTP API，而是依赖此协议：

- 每个厂商实现一个 ProviderClient（如 GeminiClient）。
- 负责：将 GenerateRequest 转成具体 API 请求，并把响应 JSON 解析为 GenerateResult。

测试中用确定性的假 Provider 替换即可，不需要网络。
"""

from typing import Protocol
from career_core.domain.models import GenerateRequest, GenerateResult


class ProviderClient(Protocol):
    """模型 Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志/统计。
    - generate(req): 发送有序片段 + 可选系统指令/历史/输出结构，返回统一结果。
      失败时抛出 TransportError 或 ValidationError 的子类。
    """

    name: str

    def generate(self, req: GenerateRequest) -> GenerateResult:
        ...
