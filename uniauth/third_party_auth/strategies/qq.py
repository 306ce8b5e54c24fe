"""QQ 登录策略实现

文档: https://wiki.connect.qq.com/使用authorization_code获取access_token

QQ 的用户信息接口需要 openid，而 openid 只能通过 /oauth2.0/me 获取，
该接口返回 JSONP 格式：callback( {"client_id":"...","openid":"..."} );
"""

from enum import StrEnum
from typing import Annotated

import orjson
from pydantic import BaseModel, ConfigDict, Field

from uniauth.toolkit.json import orjson_loads

from ..base import BaseThirdPartyAuthStrategy, CallbackInput, parse_callback
from ..encoder import COMMA, QueryModel, build_url
from ..errors import DecodingError
from ..identity import CanonicalIdentity, TokenResponse, UserInfoResponse, build_identity
from ..utils import unwrap_jsonp


class QQDisplayStyle(StrEnum):
    PC = "pc"
    MOBILE = "mobile"


class ResponseFormat(StrEnum):
    URL_ENCODED = "x-www-form-urlencoded"
    JSON = "json"


class AuthRequest(QueryModel):
    client_id: str = Field(min_length=1)
    redirect_uri: str = Field(min_length=1)
    state: str
    scope: Annotated[list[str] | None, COMMA] = None
    display: QQDisplayStyle | None = None


class GetTokenRequest(QueryModel):
    client_id: str
    client_secret: str
    code: str
    redirect_uri: str
    fmt: ResponseFormat | None = None


class RefreshTokenRequest(QueryModel):
    client_id: str
    client_secret: str
    refresh_token: str
    fmt: ResponseFormat | None = None


class GetUserInfoRequest(QueryModel):
    access_token: str
    oauth_consumer_key: str
    openid: str


class OpenIdResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    client_id: str | None = None
    openid: str = Field(min_length=1)


class QQUserInfo(UserInfoResponse):
    """https://wiki.connect.qq.com/get_user_info

    openid 不在接口响应中，由 /oauth2.0/me 解析后写入。
    """

    openid: str
    nickname: str | None = None


class QQAuthStrategy(BaseThirdPartyAuthStrategy):
    """QQ 互联 OAuth2.0 认证策略"""

    platform_name = "qq"
    default_scope = ("get_user_info",)

    AUTHORIZE_URL = "https://graph.qq.com/oauth2.0/authorize"
    ACCESS_TOKEN_URL = "https://graph.qq.com/oauth2.0/token"
    OPEN_ID_URL = "https://graph.qq.com/oauth2.0/me"
    USER_INFO_URL = "https://graph.qq.com/user/get_user_info"

    def authorize_url(self, request: AuthRequest) -> str:
        return build_url(self.AUTHORIZE_URL, request, response_type="code")

    def access_token_url(self, request: GetTokenRequest) -> str:
        return build_url(self.ACCESS_TOKEN_URL, request, grant_type="authorization_code")

    def refresh_token_url(self, request: RefreshTokenRequest) -> str:
        return build_url(self.ACCESS_TOKEN_URL, request, grant_type="refresh_token")

    def user_info_url(self, request: GetUserInfoRequest) -> str:
        return build_url(self.USER_INFO_URL, request)

    def authorize(self, state: str) -> str:
        url = self.authorize_url(
            AuthRequest(
                client_id=self.config.client_id,
                redirect_uri=self.config.redirect_uri,
                state=state,
                scope=self.scope,
            )
        )
        self._logger.debug(f"Authorize url built: {url}")
        return url

    async def get_access_token(self, callback: CallbackInput) -> TokenResponse:
        auth_callback = parse_callback(callback)
        url = self.access_token_url(
            GetTokenRequest(
                client_id=self.config.client_id,
                client_secret=self.config.require_secret("get_access_token"),
                code=auth_callback.code,
                redirect_uri=self.config.redirect_uri,
                fmt=ResponseFormat.JSON,
            )
        )
        data = await self._get_json("get_access_token", url)
        return self._parse("get_access_token", TokenResponse, data)

    async def refresh_access_token(self, refresh_token: str) -> TokenResponse:
        """使用 refresh_token 续期 access_token"""
        url = self.refresh_token_url(
            RefreshTokenRequest(
                client_id=self.config.client_id,
                client_secret=self.config.require_secret("refresh_access_token"),
                refresh_token=refresh_token,
                fmt=ResponseFormat.JSON,
            )
        )
        data = await self._get_json("refresh_access_token", url)
        return self._parse("refresh_access_token", TokenResponse, data)

    async def get_open_id(self, access_token: str) -> OpenIdResponse:
        """
        通过 access_token 获取 openid

        Raises:
            DecodingError: 响应不是 callback(<json>); 形式或 JSON 非法
        """
        text = await self._get_text("get_open_id", build_url(self.OPEN_ID_URL, access_token=access_token))
        try:
            data = orjson_loads(unwrap_jsonp(text))
        except orjson.JSONDecodeError as e:
            self._logger.error(f"get_open_id returned invalid JSON: {e}")
            raise DecodingError("get_open_id", f"invalid JSON inside jsonp: {e}") from e

        if not isinstance(data, dict):
            raise DecodingError("get_open_id", f"expected a JSON object, got {type(data).__name__}")

        self._check_provider_error("get_open_id", data, None)
        return self._parse("get_open_id", OpenIdResponse, data)

    async def _fetch_profile(self, access_token: str, open_id: str) -> QQUserInfo:
        url = self.user_info_url(
            GetUserInfoRequest(
                access_token=access_token,
                oauth_consumer_key=self.config.client_id,
                openid=open_id,
            )
        )
        data = await self._get_json("get_user_info", url)
        return self._parse("get_user_info", QQUserInfo, {**data, "openid": open_id})

    async def get_user_info(self, token: TokenResponse) -> QQUserInfo:
        open_id = await self.get_open_id(token.access_token)
        return await self._fetch_profile(token.access_token, open_id.openid)

    def normalize(self, token: TokenResponse, profile: QQUserInfo) -> CanonicalIdentity:
        return build_identity(user_id=profile.openid, name=profile.nickname, token=token, extra=profile.extra)

    async def login(self, callback: CallbackInput) -> CanonicalIdentity:
        """回调 → access_token → openid（JSONP）→ 用户信息 → 统一身份"""
        auth_callback = parse_callback(callback)
        token = await self.get_access_token(auth_callback)

        open_id = await self.get_open_id(token.access_token)
        self._logger.info(f"Open id resolved: {open_id.openid}")

        profile = await self._fetch_profile(token.access_token, open_id.openid)
        identity = self.normalize(token, profile)
        self._logger.info(f"Login succeeded, user_id={identity.user_id}")
        return identity
