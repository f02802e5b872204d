"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在编排层统一捕获并转换为兜底回复或空引用。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "NETWORK_ERROR"）。
        message: 可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 source、provider 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(BusinessError):
    """第三方 API 返回非 2xx/429 错误时抛出。"""


class RateLimitError(BusinessError):
    """Provider 限流错误。本项目不做自动重试。"""


class ValidationError(BusinessError):
    """参数或配置校验失败（例如缺少 API Key）。"""


class MalformedResponseError(BusinessError):
    """模型响应缺少 choices 或 message.content。"""


class SourceUnavailable(BusinessError):
    """外部检索源（PubMed / DrugBank）不可用或返回无法解析的数据。

    只在检索模块内部抛出，由各自的 fetch() 边界吞掉并降级为空字符串。
    """


class MissingFieldError(SourceUnavailable):
    """响应 JSON 中缺少预期字段。"""


class EmptyListError(SourceUnavailable):
    """检索结果列表为空。"""
