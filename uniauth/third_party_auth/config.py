"""第三方认证配置数据类 - 类型安全的不可变配置容器"""

from collections.abc import Sequence
from dataclasses import dataclass

from .errors import ConfigurationError


@dataclass(frozen=True)
class ProviderConfig:
    """第三方平台应用配置

    构建后不可修改，可在并发的登录流程之间共享。

    Attributes:
        client_id: 平台分配的应用 ID（微信为 AppID，支付宝为 app_id）
        redirect_uri: 授权回调地址
        client_secret: 应用密钥，仅换取 access_token 时需要
        scope: 授权范围，None 表示使用平台默认值
    """

    client_id: str
    redirect_uri: str
    client_secret: str | None = None
    scope: Sequence[str] | None = None

    def __post_init__(self) -> None:
        """验证配置有效性"""
        if not self.client_id or not self.redirect_uri:
            raise ConfigurationError("config", "ProviderConfig requires client_id and redirect_uri")
        if self.scope is not None:
            if isinstance(self.scope, str):
                raise ConfigurationError("config", "scope must be a sequence of strings, not a str")
            object.__setattr__(self, "scope", tuple(self.scope))

    def require_secret(self, step: str) -> str:
        if not self.client_secret:
            raise ConfigurationError(step, "client_secret is required but was not configured")
        return self.client_secret

    def __repr__(self) -> str:
        secret = "***" if self.client_secret else None
        return (
            f"ProviderConfig(client_id={self.client_id!r}, redirect_uri={self.redirect_uri!r}, "
            f"client_secret={secret!r}, scope={self.scope!r})"
        )
