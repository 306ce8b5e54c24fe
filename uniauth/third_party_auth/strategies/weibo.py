"""微博登录策略实现

文档: https://open.weibo.com/wiki/授权机制说明

微博的 access_token 响应直接携带 uid，用户信息接口以 uid 查询。
"""

from typing import Annotated

from pydantic import Field

from uniauth.toolkit.types import IntStr

from ..base import BaseThirdPartyAuthStrategy, CallbackInput, parse_callback
from ..encoder import COMMA, QueryModel, build_url
from ..identity import CanonicalIdentity, TokenResponse, UserInfoResponse, build_identity


class AuthRequest(QueryModel):
    client_id: str = Field(min_length=1)
    redirect_uri: str = Field(min_length=1)
    scope: Annotated[list[str] | None, COMMA] = None
    state: str | None = None
    display: str | None = None
    forcelogin: bool | None = None
    language: str | None = None


class GetTokenRequest(QueryModel):
    client_id: str
    client_secret: str
    code: str
    redirect_uri: str


class GetUserInfoRequest(QueryModel):
    access_token: str
    uid: str


class WeiboTokenResponse(TokenResponse):
    uid: IntStr


class WeiboUserInfo(UserInfoResponse):
    uid: IntStr | None = None
    nickname: str | None = None


class WeiboAuthStrategy(BaseThirdPartyAuthStrategy):
    """微博 OAuth2.0 认证策略"""

    platform_name = "weibo"
    default_scope = ("email",)

    AUTHORIZE_URL = "https://api.weibo.com/oauth2/authorize"
    ACCESS_TOKEN_URL = "https://api.weibo.com/oauth2/access_token"
    USER_INFO_URL = "https://api.weibo.com/2/eps/user/info.json"

    def authorize_url(self, request: AuthRequest) -> str:
        return build_url(self.AUTHORIZE_URL, request, response_type="code")

    def access_token_url(self, request: GetTokenRequest) -> str:
        return build_url(self.ACCESS_TOKEN_URL, request, grant_type="authorization_code")

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

    async def get_access_token(self, callback: CallbackInput) -> WeiboTokenResponse:
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
        return self._parse("get_access_token", WeiboTokenResponse, data)

    async def _fetch_profile(self, access_token: str, uid: str) -> WeiboUserInfo:
        url = self.user_info_url(GetUserInfoRequest(access_token=access_token, uid=uid))
        data = await self._get_json("get_user_info", url)
        return self._parse("get_user_info", WeiboUserInfo, data)

    async def get_user_info(self, token: WeiboTokenResponse) -> WeiboUserInfo:
        return await self._fetch_profile(token.access_token, token.uid)

    def normalize(self, token: WeiboTokenResponse, profile: WeiboUserInfo) -> CanonicalIdentity:
        return build_identity(
            user_id=profile.uid or token.uid,
            name=profile.nickname,
            token=token,
            extra=profile.extra,
        )

    async def login(self, callback: CallbackInput) -> CanonicalIdentity:
        """回调 → access_token（含 uid）→ 按 uid 查询用户信息 → 统一身份"""
        auth_callback = parse_callback(callback)
        token = await self.get_access_token(auth_callback)
        self._logger.info(f"Uid resolved from token response: {token.uid}")

        profile = await self._fetch_profile(token.access_token, token.uid)
        identity = self.normalize(token, profile)
        self._logger.info(f"Login succeeded, user_id={identity.user_id}")
        return identity
