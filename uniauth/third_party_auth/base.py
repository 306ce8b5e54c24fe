"""第三方认证策略抽象基类 - 无业务依赖的通用接口"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from uniauth.logger import logger
from uniauth.toolkit.http_cli import AsyncHttpClient

from .config import ProviderConfig
from .encoder import QueryModel, decode
from .errors import DecodingError, TransportError
from .identity import CanonicalIdentity, TokenResponse, UserInfoResponse

ModelT = TypeVar("ModelT", bound=BaseModel)


class AuthCallback(QueryModel):
    """授权回调参数，平台附带的其他参数被忽略"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    code: str = Field(min_length=1)
    state: str | None = None


CallbackInput = AuthCallback | Mapping[str, Any] | str


def parse_callback(callback: CallbackInput) -> AuthCallback:
    """
    将回调统一转为 AuthCallback

    Args:
        callback: AuthCallback、参数字典，或原始查询字符串（如 "code=xxx&state=yyy"）

    Raises:
        DecodingError: 回调中缺少 code 等无法解析的情况
    """
    if isinstance(callback, AuthCallback):
        return callback
    if isinstance(callback, str):
        return decode(callback, AuthCallback)
    try:
        return AuthCallback.model_validate(dict(callback))
    except ValidationError as e:
        raise DecodingError("callback", f"invalid callback: {e}") from e


class BaseThirdPartyAuthStrategy(ABC):
    """第三方认证策略抽象基类

    所有第三方登录策略都必须实现此接口：
        - URL 构建：authorize_url / access_token_url / user_info_url（纯函数，同步）
        - 登录流程：authorize → get_access_token → get_user_info → normalize

    login 的默认实现按 token → 用户信息 → 归一化 的顺序编排，
    流程不同的平台（QQ、微博、X）可整体重写。

    策略是无状态的，配置通过构造函数注入，可在并发请求间共享同一实例。
    任一步骤失败即抛出 ThirdPartyAuthError 子类，不做重试，也不返回部分结果。
    """

    platform_name: ClassVar[str]
    default_scope: ClassVar[tuple[str, ...]] = ()

    def __init__(self, config: ProviderConfig, http_client: AsyncHttpClient | None = None):
        """
        Args:
            config: 平台配置（通过依赖注入）
            http_client: 共享的 HTTP 客户端，不传则自行创建并在 close() 时关闭
        """
        self.config = config
        self._owns_http_client = http_client is None
        self._http_client = http_client or AsyncHttpClient(timeout=30)
        self._logger = logger.bind(provider=self.platform_name)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # --- URL 构建 ---

    @abstractmethod
    def authorize_url(self, request: Any) -> str:
        """返回带 redirect_uri 和 state 的授权地址，用户端重定向至该地址进行授权"""

    @abstractmethod
    def access_token_url(self, request: Any) -> str:
        """返回换取 access_token 的地址"""

    @abstractmethod
    def user_info_url(self, request: Any) -> str:
        """返回获取用户信息的地址"""

    # --- 登录流程 ---

    @abstractmethod
    def authorize(self, state: str) -> str:
        """
        构建授权地址

        Args:
            state: 防 CSRF 的随机串，原样回传，校验由调用方负责

        Returns:
            授权地址
        """

    @abstractmethod
    async def get_access_token(self, callback: CallbackInput) -> TokenResponse:
        """
        通过授权码获取 access_token

        Raises:
            ConfigurationError: 未配置 client_secret
            TransportError: 请求失败或平台返回错误
            DecodingError: 响应无法解析
        """

    @abstractmethod
    async def get_user_info(self, token: TokenResponse) -> UserInfoResponse:
        """获取第三方用户信息"""

    @abstractmethod
    def normalize(self, token: TokenResponse, profile: UserInfoResponse) -> CanonicalIdentity:
        """将 token 与用户信息映射为统一身份"""

    async def login(self, callback: CallbackInput) -> CanonicalIdentity:
        """完整登录：回调 → access_token → 用户信息 → 统一身份"""
        auth_callback = parse_callback(callback)
        token = await self.get_access_token(auth_callback)
        profile = await self.get_user_info(token)
        identity = self.normalize(token, profile)
        self._logger.info(f"Login succeeded, user_id={identity.user_id}")
        return identity

    def get_platform_name(self) -> str:
        return self.platform_name

    @property
    def scope(self) -> list[str]:
        """配置的授权范围，未配置时使用平台默认值"""
        if self.config.scope is not None:
            return list(self.config.scope)
        return list(self.default_scope)

    async def close(self) -> None:
        """关闭自行创建的 HTTP 客户端"""
        if self._owns_http_client:
            await self._http_client.close()

    # --- 请求辅助 ---

    async def _get_json(self, step: str, url: str, *, headers: dict[str, str] | None = None) -> dict[str, Any]:
        result = await self._http_client.get(url, headers=headers)

        if not result.success:
            self._logger.error(f"{step} failed: status={result.status_code}, error={result.error}")
            raise TransportError(step, result.error or "request failed", status_code=result.status_code)

        try:
            data = result.json()
        except RuntimeError as e:
            self._logger.error(f"{step} returned invalid JSON: {e}")
            raise DecodingError(step, str(e)) from e

        if not isinstance(data, dict):
            raise DecodingError(step, f"expected a JSON object, got {type(data).__name__}")

        self._check_provider_error(step, data, result.status_code)
        return data

    async def _get_text(self, step: str, url: str, *, headers: dict[str, str] | None = None) -> str:
        result = await self._http_client.get(url, headers=headers)

        if not result.success:
            self._logger.error(f"{step} failed: status={result.status_code}, error={result.error}")
            raise TransportError(step, result.error or "request failed", status_code=result.status_code)

        return result.text

    def _check_provider_error(self, step: str, data: dict[str, Any], status_code: int | None) -> None:
        """检查平台在 2xx 响应体中返回的错误（微信 errcode、QQ ret、OAuth error 等）"""
        for code_key, msg_key in (("errcode", "errmsg"), ("ret", "msg"), ("error_code", "error_msg")):
            code = data.get(code_key)
            if code not in (None, 0, "0"):
                message = data.get(msg_key) or data.get("error_description") or "unknown error"
                self._logger.error(f"{step} provider error: {code_key}={code}, {message}")
                raise TransportError(step, f"{code_key}={code}: {message}", status_code=status_code)

        if error := data.get("error"):
            message = data.get("error_description") or error
            self._logger.error(f"{step} provider error: {message}")
            raise TransportError(step, f"error={error}: {message}", status_code=status_code)

    @staticmethod
    def _parse(step: str, model: type[ModelT], data: Any) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise DecodingError(step, f"unexpected {model.__name__} payload: {e}") from e
