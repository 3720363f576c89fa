"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
由 Dispatcher 在边界处统一捕获并转换为兜底返回值。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "ENCODING_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 trace_id、provider 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class EncodingError(BusinessError):
    """二进制附件无法读取或编码。"""


class TransportError(BusinessError):
    """远程模型调用失败（网络、超时、Provider 拒绝或响应格式异常）。"""


class NetworkError(TransportError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(TransportError):
    """第三方 API 返回非 2xx/429 错误，或响应体无法解析时抛出。"""


class RateLimitError(TransportError):
    """Provider 限流错误。本项目不做自动重试。"""


class SchemaViolationError(BusinessError):
    """响应可以拿到，但无法解析为 JSON 或不符合声明的结构。"""


class EmptyResponseError(BusinessError):
    """调用成功但模型没有返回可用文本。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""
