"""百度登录策略实现

文档: https://openauth.baidu.com/doc/doc.html
"""

from enum import StrEnum
from typing import Annotated

from pydantic import Field

from uniauth.toolkit.types import IntStr

from ..base import BaseThirdPartyAuthStrategy, CallbackInput, parse_callback
from ..encoder import SPACE, QueryModel, build_url
from ..errors import DecodingError
from ..identity import CanonicalIdentity, TokenResponse, UserInfoResponse, build_identity


class DisplayStyle(StrEnum):
    """https://openauth.baidu.com/doc/appendix.html#_2-display参数说明"""

    PAGE = "page"
    POPUP = "popup"
    DIALOG = "dialog"
    MOBILE = "mobile"
    PAD = "pad"
    TV = "tv"


class AuthRequest(QueryModel):
    client_id: str = Field(min_length=1)
    redirect_uri: str = Field(min_length=1)
    scope: Annotated[list[str], SPACE]
    state: str | None = None
    display: DisplayStyle | None = None


class GetTokenRequest(QueryModel):
    client_id: str
    client_secret: str
    code: str
    redirect_uri: str


class RefreshTokenRequest(QueryModel):
    client_id: str
    client_secret: str
    refresh_token: str
    scope: Annotated[list[str] | None, SPACE] = None


class GetUserInfoRequest(QueryModel):
    access_token: str


class BaiduUserInfo(UserInfoResponse):
    """https://openauth.baidu.com/doc/doc.html 用户信息接口，老应用返回 uid，新应用返回 openid"""

    openid: IntStr | None = None
    uid: IntStr | None = None
    username: str | None = None


class BaiduAuthStrategy(BaseThirdPartyAuthStrategy):
    """百度 OAuth2.0 认证策略"""

    platform_name = "baidu"
    default_scope = ("basic",)

    AUTHORIZE_URL = "https://openapi.baidu.com/oauth/2.0/authorize"
    ACCESS_TOKEN_URL = "https://openapi.baidu.com/oauth/2.0/token"
    USER_INFO_URL = "https://openapi.baidu.com/rest/2.0/passport/users/getInfo"

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
                scope=self.scope,
                state=state,
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
            )
        )
        data = await self._get_json("refresh_access_token", url)
        return self._parse("refresh_access_token", TokenResponse, data)

    async def get_user_info(self, token: TokenResponse) -> BaiduUserInfo:
        url = self.user_info_url(GetUserInfoRequest(access_token=token.access_token))
        data = await self._get_json("get_user_info", url)
        return self._parse("get_user_info", BaiduUserInfo, data)

    def normalize(self, token: TokenResponse, profile: BaiduUserInfo) -> CanonicalIdentity:
        user_id = profile.openid or profile.uid
        if not user_id:
            raise DecodingError("normalize", "baidu profile carries neither openid nor uid")
        return build_identity(
            user_id=user_id,
            name=profile.username,
            token=token,
            extra=profile.extra,
        )
