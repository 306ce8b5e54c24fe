"""平台枚举与策略注册表"""

from collections.abc import Mapping
from enum import Enum

from uniauth.logger import logger
from uniauth.toolkit.http_cli import AsyncHttpClient

from .base import BaseThirdPartyAuthStrategy
from .config import ProviderConfig
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


class ThirdPartyPlatform(str, Enum):
    QQ = "qq"
    BAIDU = "baidu"
    WECHAT_OPEN = "wechat_open"
    WEIBO = "weibo"
    GITHUB = "github"
    FACEBOOK = "facebook"
    TWITTER = "twitter"
    ALIPAY = "alipay"

    @classmethod
    def parse(cls, value: "ThirdPartyPlatform | str") -> "ThirdPartyPlatform":
        """大小写不敏感地解析平台标识"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            raise ValueError(f"Unsupported third-party platform: {value}") from e


class ThirdPartyAuthFactory:
    """按平台标识创建登录策略

    内置八个平台，嵌入方可用 register_strategy 替换实现（如 GitHub Enterprise）：

        ```python
        github = ThirdPartyAuthFactory.get_strategy("github", github_config)

        # 共用一个客户端
        shared_client = AsyncHttpClient(timeout=30)

        strategies = ThirdPartyAuthFactory.create_all(
            {ThirdPartyPlatform.QQ: qq_config, ThirdPartyPlatform.WEIBO: weibo_config},
            http_client=shared_client,
        )
        ```
    """

    _strategies: dict[ThirdPartyPlatform, type[BaseThirdPartyAuthStrategy]] = {
        ThirdPartyPlatform.QQ: QQAuthStrategy,
        ThirdPartyPlatform.BAIDU: BaiduAuthStrategy,
        ThirdPartyPlatform.WECHAT_OPEN: WeChatOpenAuthStrategy,
        ThirdPartyPlatform.WEIBO: WeiboAuthStrategy,
        ThirdPartyPlatform.GITHUB: GitHubAuthStrategy,
        ThirdPartyPlatform.FACEBOOK: FacebookAuthStrategy,
        ThirdPartyPlatform.TWITTER: TwitterAuthStrategy,
        ThirdPartyPlatform.ALIPAY: AlipayAuthStrategy,
    }

    @classmethod
    def register_strategy(
        cls,
        platform: ThirdPartyPlatform,
        strategy_class: type[BaseThirdPartyAuthStrategy],
    ) -> None:
        """注册或替换某个平台的策略类"""
        previous = cls._strategies.get(platform)
        cls._strategies[platform] = strategy_class
        logger.info(
            f"Strategy for {platform.value} set to {strategy_class.__name__}"
            + (f" (was {previous.__name__})" if previous and previous is not strategy_class else "")
        )

    @classmethod
    def get_strategy(
        cls,
        platform: ThirdPartyPlatform | str,
        config: ProviderConfig,
        http_client: AsyncHttpClient | None = None,
    ) -> BaseThirdPartyAuthStrategy:
        """
        Args:
            platform: 平台枚举或其字符串值（大小写不敏感）
            config: 平台应用配置
            http_client: 共享的 HTTP 客户端，不传则策略自行创建

        Raises:
            ValueError: 平台未知或未注册
        """
        platform = ThirdPartyPlatform.parse(platform)
        try:
            strategy_class = cls._strategies[platform]
        except KeyError:
            raise ValueError(
                f"No strategy registered for '{platform.value}', available: {cls.get_available_platforms()}"
            ) from None
        return strategy_class(config, http_client=http_client)

    @classmethod
    def create_all(
        cls,
        configs: Mapping[ThirdPartyPlatform | str, ProviderConfig],
        http_client: AsyncHttpClient | None = None,
    ) -> dict[ThirdPartyPlatform, BaseThirdPartyAuthStrategy]:
        """
        为多个平台一次性创建策略

        传入 http_client 时所有策略共用它，由调用方负责关闭；
        不传则每个策略各自创建并持有自己的客户端，需分别 close()
        """
        return {
            ThirdPartyPlatform.parse(platform): cls.get_strategy(platform, config, http_client=http_client)
            for platform, config in configs.items()
        }

    @classmethod
    def get_available_platforms(cls) -> list[str]:
        return [platform.value for platform in cls._strategies]
