"""微信开放平台（网站应用）登录策略实现 - 配置通过参数注入

文档: https://developers.weixin.qq.com/doc/oplatform/Website_App/WeChat_Login/Wechat_Login.html
"""

from enum import StrEnum
from typing import Annotated

from pydantic import Field

from ..base import BaseThirdPartyAuthStrategy, CallbackInput, parse_callback
from ..encoder import COMMA, QueryModel, build_url
from ..identity import CanonicalIdentity, TokenResponse, UserInfoResponse, build_identity


class Lang(StrEnum):
    EN = "en"
    CN = "cn"


class AuthRequest(QueryModel):
    appid: str = Field(min_length=1)
    redirect_uri: str = Field(min_length=1)
    response_type: str = "code"
    scope: Annotated[list[str], COMMA]
    state: str | None = None
    lang: Lang | None = None


class GetTokenRequest(QueryModel):
    appid: str
    secret: str
    code: str


class RefreshTokenRequest(QueryModel):
    appid: str
    refresh_token: str


class GetUserInfoRequest(QueryModel):
    access_token: str
    openid: str
    lang: str | None = None


class WeChatTokenResponse(TokenResponse):
    openid: str
    scope: str = ""
    unionid: str | None = None


class WeChatUserInfo(UserInfoResponse):
    """https://developers.weixin.qq.com/doc/oplatform/Website_App/WeChat_Login/Authorized_Interface_Calling_UnionID.html"""

    unionid: str | None = None
    nickname: str | None = None


class WeChatOpenAuthStrategy(BaseThirdPartyAuthStrategy):
    """微信开放平台 OAuth2.0 认证策略

    使用示例:
        ```python
        strategy = WeChatOpenAuthStrategy(
            config=ProviderConfig(
                client_id="your_app_id",
                client_secret="your_app_secret",
                redirect_uri="https://example.com/callback/wechat",
            )
        )

        token = await strategy.get_access_token({"code": code})
        user_info = await strategy.get_user_info(token)
        ```
    """

    platform_name = "wechat_open"
    default_scope = ("snsapi_login",)

    # 微信 API 端点
    AUTHORIZE_URL = "https://open.weixin.qq.com/connect/qrconnect"
    ACCESS_TOKEN_URL = "https://api.weixin.qq.com/sns/oauth2/access_token"
    REFRESH_TOKEN_URL = "https://api.weixin.qq.com/sns/oauth2/refresh_token"
    USER_INFO_URL = "https://api.weixin.qq.com/sns/userinfo"

    def authorize_url(self, request: AuthRequest) -> str:
        return build_url(self.AUTHORIZE_URL, request, fragment="wechat_redirect")

    def access_token_url(self, request: GetTokenRequest) -> str:
        return build_url(self.ACCESS_TOKEN_URL, request, grant_type="authorization_code")

    def refresh_token_url(self, request: RefreshTokenRequest) -> str:
        return build_url(self.REFRESH_TOKEN_URL, request, grant_type="refresh_token")

    def user_info_url(self, request: GetUserInfoRequest) -> str:
        return build_url(self.USER_INFO_URL, request)

    def authorize(self, state: str) -> str:
        url = self.authorize_url(
            AuthRequest(
                appid=self.config.client_id,
                redirect_uri=self.config.redirect_uri,
                scope=self.scope,
                state=state,
            )
        )
        self._logger.debug(f"Authorize url built: {url}")
        return url

    async def get_access_token(self, callback: CallbackInput) -> WeChatTokenResponse:
        """
        通过授权码获取 access_token

        Returns:
            包含 access_token、expires_in、refresh_token、openid、scope、unionid 的响应
        """
        auth_callback = parse_callback(callback)
        url = self.access_token_url(
            GetTokenRequest(
                appid=self.config.client_id,
                secret=self.config.require_secret("get_access_token"),
                code=auth_callback.code,
            )
        )
        data = await self._get_json("get_access_token", url)
        return self._parse("get_access_token", WeChatTokenResponse, data)

    async def refresh_access_token(self, refresh_token: str) -> WeChatTokenResponse:
        """使用 refresh_token 续期 access_token（有效期 30 天）"""
        url = self.refresh_token_url(RefreshTokenRequest(appid=self.config.client_id, refresh_token=refresh_token))
        data = await self._get_json("refresh_access_token", url)
        return self._parse("refresh_access_token", WeChatTokenResponse, data)

    async def get_user_info(self, token: WeChatTokenResponse) -> WeChatUserInfo:
        url = self.user_info_url(
            GetUserInfoRequest(access_token=token.access_token, openid=token.openid, lang="zh_CN")
        )
        data = await self._get_json("get_user_info", url)
        return self._parse("get_user_info", WeChatUserInfo, data)

    def normalize(self, token: WeChatTokenResponse, profile: WeChatUserInfo) -> CanonicalIdentity:
        # 未绑定开放平台账号的应用不会下发 unionid，退回到 openid
        user_id = profile.unionid or token.unionid or token.openid
        return build_identity(user_id=user_id, name=profile.nickname, token=token, extra=profile.extra)
