"""Facebook 登录策略实现

文档: https://developers.facebook.com/docs/facebook-login/guides/advanced/manual-flow
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
    scope: Annotated[list[str], COMMA]
    state: str | None = None
    display: str | None = None


class GetTokenRequest(QueryModel):
    client_id: str
    client_secret: str
    code: str
    redirect_uri: str


class GetUserInfoRequest(QueryModel):
    access_token: str
    user_fields: Annotated[list[str] | None, COMMA] = Field(default=None, alias="fields")


class FacebookTokenResponse(TokenResponse):
    token_type: str = "bearer"


class FacebookUserInfo(UserInfoResponse):
    """https://developers.facebook.com/docs/graph-api/overview#me"""

    id: IntStr
    name: str | None = None


class FacebookAuthStrategy(BaseThirdPartyAuthStrategy):
    """Facebook Login 认证策略"""

    platform_name = "facebook"
    default_scope = ("public_profile", "email")

    AUTHORIZE_URL = "https://www.facebook.com/v21.0/dialog/oauth"
    ACCESS_TOKEN_URL = "https://graph.facebook.com/v21.0/oauth/access_token"
    USER_INFO_URL = "https://graph.facebook.com/me"

    USER_FIELDS = ("id", "name", "email", "picture")

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

    async def get_access_token(self, callback: CallbackInput) -> FacebookTokenResponse:
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
        return self._parse("get_access_token", FacebookTokenResponse, data)

    async def get_user_info(self, token: TokenResponse) -> FacebookUserInfo:
        url = self.user_info_url(GetUserInfoRequest(access_token=token.access_token, user_fields=list(self.USER_FIELDS)))
        data = await self._get_json("get_user_info", url)
        return self._parse("get_user_info", FacebookUserInfo, data)

    def normalize(self, token: TokenResponse, profile: FacebookUserInfo) -> CanonicalIdentity:
        return build_identity(user_id=profile.id, name=profile.name, token=token, extra=profile.extra)
