"""GitHub 登录策略实现

文档: https://docs.github.com/en/apps/oauth-apps/building-oauth-apps/authorizing-oauth-apps
"""

from typing import Annotated

from pydantic import Field

from uniauth.toolkit.types import IntStr

from ..base import BaseThirdPartyAuthStrategy, CallbackInput, parse_callback
from ..encoder import SPACE, QueryModel, build_url
from ..identity import CanonicalIdentity, TokenResponse, UserInfoResponse, build_identity


class AuthRequest(QueryModel):
    client_id: str = Field(min_length=1)
    redirect_uri: str = Field(min_length=1)
    login: str | None = None
    scope: Annotated[list[str], SPACE]
    state: str
    allow_signup: bool | None = None
    prompt: str | None = None


class GetTokenRequest(QueryModel):
    client_id: str
    client_secret: str
    code: str
    redirect_uri: str


class GitHubTokenResponse(TokenResponse):
    scope: str = ""
    token_type: str = "bearer"


class GitHubUserInfo(UserInfoResponse):
    """https://docs.github.com/en/rest/users/users#get-the-authenticated-user"""

    id: IntStr
    name: str | None = None


class GitHubAuthStrategy(BaseThirdPartyAuthStrategy):
    """GitHub OAuth App 认证策略

    使用示例:
        ```python
        strategy = GitHubAuthStrategy(
            config=ProviderConfig(
                client_id="your_client_id",
                client_secret="your_client_secret",
                redirect_uri="https://example.com/callback/github",
            )
        )

        url = strategy.authorize(state)
        identity = await strategy.login({"code": code, "state": state})
        ```
    """

    platform_name = "github"
    default_scope = ("read:user", "user:email")

    AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
    ACCESS_TOKEN_URL = "https://github.com/login/oauth/access_token"
    USER_INFO_URL = "https://api.github.com/user"

    def authorize_url(self, request: AuthRequest) -> str:
        return build_url(self.AUTHORIZE_URL, request)

    def access_token_url(self, request: GetTokenRequest) -> str:
        return build_url(self.ACCESS_TOKEN_URL, request, token_type="bearer")

    def user_info_url(self, request: None = None) -> str:
        return self.USER_INFO_URL

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

    async def get_access_token(self, callback: CallbackInput) -> GitHubTokenResponse:
        auth_callback = parse_callback(callback)
        url = self.access_token_url(
            GetTokenRequest(
                client_id=self.config.client_id,
                client_secret=self.config.require_secret("get_access_token"),
                code=auth_callback.code,
                redirect_uri=self.config.redirect_uri,
            )
        )
        # 默认返回 x-www-form-urlencoded，需显式要求 JSON
        data = await self._get_json("get_access_token", url, headers={"Accept": "application/json"})
        return self._parse("get_access_token", GitHubTokenResponse, data)

    async def get_user_info(self, token: TokenResponse) -> GitHubUserInfo:
        data = await self._get_json(
            "get_user_info",
            self.user_info_url(),
            headers={"Authorization": f"Bearer {token.access_token}", "Accept": "application/vnd.github+json"},
        )
        return self._parse("get_user_info", GitHubUserInfo, data)

    def normalize(self, token: TokenResponse, profile: GitHubUserInfo) -> CanonicalIdentity:
        extra = profile.extra
        return build_identity(
            user_id=profile.id,
            name=profile.name or extra.get("login"),
            token=token,
            extra=extra,
        )
