"""支付宝登录策略实现（仅授权地址）

文档:
    https://opendocs.alipay.com/open/01emu5
    https://open.alipay.com/api/detail?code=I1080300001000043162

支付宝换取 token 与获取用户信息需走开放平台网关（RSA2 签名的 POST 请求），
与其他平台的 GET 查询串形式完全不同，目前未实现，调用时抛出 UnimplementedProviderStep。
"""

from typing import Annotated, Any

from pydantic import Field

from ..base import BaseThirdPartyAuthStrategy, CallbackInput
from ..encoder import COMMA, QueryModel, build_url
from ..errors import UnimplementedProviderStep
from ..identity import CanonicalIdentity, TokenResponse, UserInfoResponse


class AuthRequest(QueryModel):
    app_id: str = Field(min_length=1)
    scope: Annotated[list[str], COMMA]
    redirect_uri: str = Field(min_length=1)
    state: str


class AlipayAuthStrategy(BaseThirdPartyAuthStrategy):
    """支付宝网页授权策略"""

    platform_name = "alipay"
    default_scope = ("auth_user",)

    AUTHORIZE_URL = "https://openauth.alipay.com/oauth2/publicAppAuthorize.htm"

    def authorize_url(self, request: AuthRequest) -> str:
        return build_url(self.AUTHORIZE_URL, request)

    def access_token_url(self, request: Any = None) -> str:
        raise UnimplementedProviderStep("access_token_url", "alipay token exchange is not implemented")

    def user_info_url(self, request: Any = None) -> str:
        raise UnimplementedProviderStep("user_info_url", "alipay user info is not implemented")

    def authorize(self, state: str) -> str:
        url = self.authorize_url(
            AuthRequest(
                app_id=self.config.client_id,
                scope=self.scope,
                redirect_uri=self.config.redirect_uri,
                state=state,
            )
        )
        self._logger.debug(f"Authorize url built: {url}")
        return url

    async def get_access_token(self, callback: CallbackInput) -> TokenResponse:
        url = self.access_token_url()
        data = await self._get_json("get_access_token", url)
        return self._parse("get_access_token", TokenResponse, data)

    async def get_user_info(self, token: TokenResponse) -> UserInfoResponse:
        url = self.user_info_url()
        data = await self._get_json("get_user_info", url)
        return self._parse("get_user_info", UserInfoResponse, data)

    def normalize(self, token: TokenResponse, profile: UserInfoResponse) -> CanonicalIdentity:
        raise UnimplementedProviderStep("normalize", "alipay identity mapping is not implemented")
