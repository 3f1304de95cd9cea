"""
Custom Exceptions
自定义异常类
"""


class SageBrowserError(Exception):
    """Sage 问题浏览器基础异常类"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(SageBrowserError):
    """配置错误"""
    pass


class StorageError(SageBrowserError):
    """存储错误"""
    pass


class FilterError(SageBrowserError):
    """过滤条件错误"""
    pass


class FetchError(SageBrowserError):
    """
    抓取错误
    任何 FetchError 都会终止当前加载, 不会自动重试
    """

    def __init__(self, message: str, source: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.source = source

    def __str__(self):
        # 面向用户的提示, 原样展示
        return self.message


class AuthAbsentError(FetchError):
    """未找到任何可用的 token"""

    def __init__(self, message: str = None, **kwargs):
        super().__init__(
            message or "No authorization token found. Please visit sage.amazon.dev to authenticate.",
            **kwargs,
        )


class AuthExpiredError(FetchError):
    """401: token 已过期"""

    def __init__(self, message: str = None, **kwargs):
        super().__init__(
            message or "Authentication failed. Token may be expired. Please visit sage.amazon.dev to refresh.",
            **kwargs,
        )


class HttpStatusError(FetchError):
    """非 2xx 响应"""

    def __init__(self, status: int, reason: str = "", **kwargs):
        message = f"HTTP {status}: {reason}" if reason else f"HTTP {status}"
        super().__init__(message, status=status, **kwargs)
        self.status = status
        self.reason = reason


class ParseError(FetchError):
    """响应体解析失败"""

    def __init__(self, message: str = None, **kwargs):
        super().__init__(message or "Failed to parse response", **kwargs)


class NetworkError(FetchError):
    """网络层失败 (无响应)"""

    def __init__(self, message: str = None, **kwargs):
        super().__init__(message or "Network request failed", **kwargs)
