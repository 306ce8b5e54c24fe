"""从环境变量 / .env 文件加载平台配置

核心流程不读取任何环境变量，此模块仅供嵌入方按约定前缀加载配置：

    GITHUB_CLIENT_ID=xxx
    GITHUB_CLIENT_SECRET=xxx
    GITHUB_REDIRECT_URI=https://example.com/callback/github
    GITHUB_SCOPE=read:user,user:email
"""

from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import ProviderConfig
from .factory import ThirdPartyPlatform


class ProviderSettings(BaseSettings):
    CLIENT_ID: str
    REDIRECT_URI: str
    CLIENT_SECRET: SecretStr | None = None
    SCOPE: str | None = None  # 逗号分隔

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        env_file_encoding="utf-8",
    )

    def to_provider_config(self) -> ProviderConfig:
        scope = None
        if self.SCOPE is not None:
            scope = [s.strip() for s in self.SCOPE.split(",") if s.strip()]
        return ProviderConfig(
            client_id=self.CLIENT_ID,
            redirect_uri=self.REDIRECT_URI,
            client_secret=self.CLIENT_SECRET.get_secret_value() if self.CLIENT_SECRET else None,
            scope=scope,
        )


def load_provider_config(
    platform: ThirdPartyPlatform | str,
    *,
    env_prefix: str | None = None,
    env_file: str | Path | None = None,
) -> ProviderConfig:
    """
    加载平台配置

    Args:
        platform: 平台标识，默认前缀为其大写形式加下划线（如 WECHAT_OPEN_）
        env_prefix: 自定义环境变量前缀
        env_file: .env 文件路径

    Raises:
        pydantic.ValidationError: 缺少必填项
        ConfigurationError: 配置值非法
    """
    platform = ThirdPartyPlatform.parse(platform)
    prefix = env_prefix if env_prefix is not None else f"{platform.value.upper()}_"
    settings = ProviderSettings(_env_prefix=prefix, _env_file=env_file)
    return settings.to_provider_config()
