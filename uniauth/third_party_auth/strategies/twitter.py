"""X (Twitter) 登录策略实现

文档:
    https://developer.x.com/en/docs/authentication/oauth-2-0/authorization-code
    https://developer.x.com/en/docs/authentication/oauth-2-0/user-access-token
    https://developer.x.com/en/docs/x-api/users/lookup/api-reference/get-users-me

X 强制要求 PKCE：授权地址携带 code_challenge，换取 token 时携带对应的 code_verifier。
策略本身无状态，code_verifier 由调用方生成（generate_code_verifier）并保存到回调阶段。
"""

from typing import Annotated

from pydantic import Field

from uniauth.toolkit.types import IntStr

from ..base import BaseThirdPartyAuthStrategy, CallbackInput, parse_callback
from ..encoder import COMMA, SPACE, QueryModel, build_url
from ..errors import ConfigurationError, DecodingError
from ..identity import CanonicalIdentity, TokenResponse, UserInfoResponse, build_identity
from ..utils import code_challenge


class AuthRequest(QueryModel):
    client_id: str = Field(min_length=1)
    redirect_uri: str = Field(min_length=1)
    scope: Annotated[list[str], SPACE]
    state: str
    # https://www.oauth.com/oauth2-servers/pkce/authorization-request/
    code_challenge: str | None = None
    code_challenge_method: str | None = None


class GetTokenRequest(QueryModel):
    client_id: str
    code: str
    redirect_uri: str
    code_verifier: str


class GetUserInfoRequest(QueryModel):
    expansions: str | None = None
    tweet_fields: Annotated[list[str] | None, COMMA] = Field(default=None, alias="tweet.fields")
    user_fields: Annotated[list[str] | None, COMMA] = Field(default=None, alias="user.fields")


class TwitterTokenResponse(TokenResponse):
    scope: str = ""
    token_type: str = "bearer"


class TwitterUserInfo(UserInfoResponse):
    """/2/users/me 响应中 data 部分"""

    id: IntStr
    name: str | None = None


class TwitterAuthStrategy(BaseThirdPartyAuthStrategy):
    """X OAuth2.0 (PKCE) 认证策略

    使用示例:
        ```python
        verifier = generate_code_verifier()
        url = strategy.authorize(state, code_verifier=verifier)
        # ... 保存 verifier，用户授权后回调
        identity = await strategy.login(request.url.query, code_verifier=verifier)
        ```
    """

    platform_name = "twitter"
    default_scope = ("tweet.read", "users.read")

    AUTHORIZE_URL = "https://twitter.com/i/oauth2/authorize"
    ACCESS_TOKEN_URL = "https://api.x.com/2/oauth2/token"
    USER_INFO_URL = "https://api.x.com/2/users/me"

    USER_FIELDS = (
        "created_at",
        "description",
        "entities",
        "id",
        "location",
        "most_recent_tweet_id",
        "name",
        "pinned_tweet_id",
        "profile_image_url",
        "protected",
        "public_metrics",
        "url",
        "username",
        "verified",
        "verified_type",
        "withheld",
    )

    def authorize_url(self, request: AuthRequest) -> str:
        return build_url(self.AUTHORIZE_URL, request, response_type="code")

    def access_token_url(self, request: GetTokenRequest) -> str:
        return build_url(self.ACCESS_TOKEN_URL, request, grant_type="authorization_code")

    def user_info_url(self, request: GetUserInfoRequest) -> str:
        return build_url(self.USER_INFO_URL, request)

    @staticmethod
    def _require_verifier(step: str, code_verifier: str | None) -> str:
        if not code_verifier:
            raise ConfigurationError(step, "PKCE code_verifier is required")
        return code_verifier

    def authorize(self, state: str, code_verifier: str | None = None) -> str:
        """
        Args:
            state: 防 CSRF 的随机串
            code_verifier: PKCE verifier，地址中只携带其 S256 challenge；
                不传时地址不含 challenge，换 token 时仍需提供 verifier
        """
        url = self.authorize_url(
            AuthRequest(
                client_id=self.config.client_id,
                redirect_uri=self.config.redirect_uri,
                scope=self.scope,
                state=state,
                code_challenge=code_challenge(code_verifier) if code_verifier else None,
                code_challenge_method="S256" if code_verifier else None,
            )
        )
        self._logger.debug(f"Authorize url built: {url}")
        return url

    async def get_access_token(self, callback: CallbackInput, code_verifier: str | None = None) -> TwitterTokenResponse:
        verifier = self._require_verifier("get_access_token", code_verifier)
        auth_callback = parse_callback(callback)
        url = self.access_token_url(
            GetTokenRequest(
                client_id=self.config.client_id,
                code=auth_callback.code,
                redirect_uri=self.config.redirect_uri,
                code_verifier=verifier,
            )
        )
        data = await self._get_json("get_access_token", url)
        return self._parse("get_access_token", TwitterTokenResponse, data)

    async def get_user_info(self, token: TokenResponse) -> TwitterUserInfo:
        url = self.user_info_url(GetUserInfoRequest(user_fields=list(self.USER_FIELDS)))
        data = await self._get_json(
            "get_user_info", url, headers={"Authorization": f"Bearer {token.access_token}"}
        )
        if not isinstance(data.get("data"), dict):
            raise DecodingError("get_user_info", "response carries no 'data' object")
        return self._parse("get_user_info", TwitterUserInfo, data["data"])

    def normalize(self, token: TokenResponse, profile: TwitterUserInfo) -> CanonicalIdentity:
        return build_identity(user_id=profile.id, name=profile.name, token=token, extra=profile.extra)

    async def login(self, callback: CallbackInput, code_verifier: str | None = None) -> CanonicalIdentity:
        """回调 → access_token（携带 code_verifier）→ 用户信息 → 统一身份"""
        verifier = self._require_verifier("login", code_verifier)
        auth_callback = parse_callback(callback)

        token = await self.get_access_token(auth_callback, code_verifier=verifier)
        profile = await self.get_user_info(token)
        identity = self.normalize(token, profile)
        self._logger.info(f"Login succeeded, user_id={identity.user_id}")
        return identity
