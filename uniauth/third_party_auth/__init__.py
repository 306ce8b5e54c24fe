"""第三方认证模块 - 策略模式 + 工厂模式实现的统一 OAuth2 登录

支持的平台：
- QQ
- 百度
- 微信开放平台
- 微博
- GitHub
- Facebook
- X (Twitter)
- 支付宝（仅授权地址）

架构设计:
    - base: 抽象基类、回调模型与默认登录编排（无业务依赖）
    - encoder: 请求对象到查询字符串的编解码
    - identity: 统一身份模型与归一化
    - strategies: 具体平台策略实现（配置通过参数注入）
    - factory: 策略工厂和平台枚举

使用示例:
    ```python
    from uniauth.third_party_auth import GitHubAuthStrategy, ProviderConfig

    strategy = GitHubAuthStrategy(
        config=ProviderConfig(
            client_id="your_client_id",
            client_secret="your_client_secret",
            redirect_uri="https://example.com/callback/github",
        )
    )

    # 1. 重定向用户到授权地址
    url = strategy.authorize(state)

    # 2. 回调中完成登录（state 由调用方自行校验）
    identity = await strategy.login(request.url.query)
    ```
"""

from .base import AuthCallback, BaseThirdPartyAuthStrategy, parse_callback
from .config import ProviderConfig
from .encoder import COMMA, SPACE, QueryModel, Separator, build_url, decode, encode
from .errors import (
    ConfigurationError,
    DecodingError,
    EncodingError,
    ThirdPartyAuthError,
    TransportError,
    UnimplementedProviderStep,
)
from .factory import ThirdPartyAuthFactory, ThirdPartyPlatform
from .identity import EXPIRES_NEVER, CanonicalIdentity, TokenResponse, UserInfoResponse, build_identity
from .settings import load_provider_config
from .strategies import (
    AlipayAuthStrategy,
    BaiduAuthStrategy,
    FacebookAuthStrategy,
    GitHubAuthStrategy,
    QQAuthStrategy,
    TwitterAuthStrategy,
    WeChatOpenAuthStrategy,
    WeiboAuthStrategy,
)
from .utils import code_challenge, generate_code_verifier, unwrap_jsonp

__all__ = [
    # 基础接口
    "BaseThirdPartyAuthStrategy",
    "AuthCallback",
    "parse_callback",
    "ProviderConfig",
    # 编解码
    "QueryModel",
    "Separator",
    "COMMA",
    "SPACE",
    "encode",
    "decode",
    "build_url",
    # 统一身份
    "CanonicalIdentity",
    "TokenResponse",
    "UserInfoResponse",
    "EXPIRES_NEVER",
    "build_identity",
    # 异常
    "ThirdPartyAuthError",
    "ConfigurationError",
    "EncodingError",
    "TransportError",
    "DecodingError",
    "UnimplementedProviderStep",
    # 工厂和枚举
    "ThirdPartyPlatform",
    "ThirdPartyAuthFactory",
    "load_provider_config",
    # 具体策略
    "AlipayAuthStrategy",
    "BaiduAuthStrategy",
    "FacebookAuthStrategy",
    "GitHubAuthStrategy",
    "QQAuthStrategy",
    "TwitterAuthStrategy",
    "WeChatOpenAuthStrategy",
    "WeiboAuthStrategy",
    # 工具
    "generate_code_verifier",
    "code_challenge",
    "unwrap_jsonp",
]
