"""第三方认证异常定义

所有异常均继承自 ThirdPartyAuthError，携带出错的步骤 (step) 与详细信息 (detail)，
调用方可据此判断是哪一步失败、为什么失败。
"""


class ThirdPartyAuthError(Exception):
    def __init__(self, step: str, detail: str = ""):
        """
        :param step: 出错的步骤，如 authorize、get_access_token、get_user_info
        :param detail: 详细信息
        """
        super().__init__(step, detail)
        self.step = step
        self.detail = detail

    def __str__(self):
        return f"{type(self).__name__}: step={self.step}, detail={self.detail}"


class ConfigurationError(ThirdPartyAuthError):
    """配置缺失或非法（如换取 token 时未配置 client_secret）"""


class EncodingError(ThirdPartyAuthError):
    """请求对象无法序列化为查询字符串"""


class TransportError(ThirdPartyAuthError):
    """网络错误、非 2xx 状态码或平台在响应体中返回的错误"""

    def __init__(self, step: str, detail: str = "", status_code: int | None = None):
        super().__init__(step, detail)
        self.status_code = status_code

    def __str__(self):
        return f"{type(self).__name__}: step={self.step}, status_code={self.status_code}, detail={self.detail}"


class DecodingError(ThirdPartyAuthError):
    """响应体不是合法 JSON、缺少必需字段，或 JSONP 包裹无法解析"""


class UnimplementedProviderStep(ThirdPartyAuthError):
    """平台适配器有意未实现的步骤"""
