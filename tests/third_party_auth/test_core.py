import base64
import hashlib

import pytest

from uniauth.third_party_auth import (
    EXPIRES_NEVER,
    AuthCallback,
    ConfigurationError,
    DecodingError,
    ProviderConfig,
    TokenResponse,
    TransportError,
    UserInfoResponse,
    build_identity,
    code_challenge,
    generate_code_verifier,
    parse_callback,
    unwrap_jsonp,
)
from uniauth.third_party_auth.strategies import GitHubAuthStrategy
from uniauth.third_party_auth.utils import substr_between

# ==========================================
# 1. 配置
# ==========================================


class TestProviderConfig:
    def test_scope_is_normalized_to_tuple(self):
        config = ProviderConfig(client_id="cid", redirect_uri="https://app/cb", scope=["a", "b"])
        assert config.scope == ("a", "b")

    @pytest.mark.parametrize("kwargs", [{"client_id": "", "redirect_uri": "x"}, {"client_id": "x", "redirect_uri": ""}])
    def test_required_fields(self, kwargs):
        with pytest.raises(ConfigurationError):
            ProviderConfig(**kwargs)

    def test_scope_string_rejected(self):
        with pytest.raises(ConfigurationError):
            ProviderConfig(client_id="cid", redirect_uri="https://app/cb", scope="a,b")

    def test_require_secret(self):
        config = ProviderConfig(client_id="cid", redirect_uri="https://app/cb")
        with pytest.raises(ConfigurationError) as exc_info:
            config.require_secret("get_access_token")
        assert exc_info.value.step == "get_access_token"

    def test_repr_masks_secret(self, provider_config):
        assert "'secret'" not in repr(provider_config)
        assert "***" in repr(provider_config)


# ==========================================
# 2. 异常
# ==========================================


def test_error_str_carries_step_and_detail():
    err = TransportError("get_user_info", "boom", status_code=502)
    assert str(err) == "TransportError: step=get_user_info, status_code=502, detail=boom"
    assert str(DecodingError("callback", "no code")) == "DecodingError: step=callback, detail=no code"


# ==========================================
# 3. 统一身份
# ==========================================


class TestBuildIdentity:
    def test_defaults_when_token_lacks_fields(self):
        identity = build_identity(user_id=1, name=None, token=TokenResponse(access_token="tok"), extra=None)

        assert identity.user_id == "1"
        assert identity.name == ""
        assert identity.refresh_token == ""
        assert identity.expires_in == EXPIRES_NEVER
        assert identity.extra == {}

    def test_token_fields_carried(self):
        token = TokenResponse.model_validate({"access_token": "tok", "refresh_token": "r", "expires_in": "7200"})
        identity = build_identity(user_id="u", name="n", token=token)

        assert identity.refresh_token == "r"
        assert identity.expires_in == 7200

    def test_empty_access_token_rejected(self):
        with pytest.raises(ValueError):
            TokenResponse(access_token="")

    def test_profile_extra_passthrough(self):
        profile = UserInfoResponse.model_validate({"avatar": "a.png", "nested": {"k": [1, 2]}})
        assert profile.extra == {"avatar": "a.png", "nested": {"k": [1, 2]}}


# ==========================================
# 4. 工具函数
# ==========================================


class TestJsonp:
    def test_unwrap(self):
        assert unwrap_jsonp('callback({"openid":"abc"});') == '{"openid":"abc"}'

    def test_unwrap_with_spaces(self):
        assert unwrap_jsonp('callback( {"openid":"abc"} );\n').strip() == '{"openid":"abc"}'

    @pytest.mark.parametrize("text", ['{"openid":"abc"}', 'callback({"openid":"abc"}', ""])
    def test_markers_missing(self, text):
        with pytest.raises(DecodingError) as exc_info:
            unwrap_jsonp(text)
        assert exc_info.value.step == "unwrap_jsonp"

    def test_substr_between(self):
        assert substr_between("a[b]c", "[", "]") == "b"
        assert substr_between("a[b", "[", "]") is None


class TestPkce:
    def test_s256_challenge(self):
        verifier = "dBjftJeZ4CVP-mJ92K9qzs8-l6A0_xJOmGAYX9TbBgWQ"
        expected = base64.urlsafe_b64encode(hashlib.sha256(verifier.encode()).digest()).decode().rstrip("=")

        challenge = code_challenge(verifier)
        assert challenge == expected
        assert len(challenge) == 43
        assert "=" not in challenge and "+" not in challenge and "/" not in challenge

    def test_verifier_length(self):
        verifier = generate_code_verifier()
        assert 43 <= len(verifier) <= 128
        assert generate_code_verifier() != verifier


# ==========================================
# 5. 回调解析
# ==========================================


class TestParseCallback:
    def test_raw_query(self):
        callback = parse_callback("code=abc&state=xyz&extra=1")
        assert callback == AuthCallback(code="abc", state="xyz")

    def test_mapping(self):
        assert parse_callback({"code": "abc"}).state is None

    def test_passthrough(self):
        callback = AuthCallback(code="abc")
        assert parse_callback(callback) is callback

    @pytest.mark.parametrize("callback", ["state=xyz", {"state": "xyz"}, {"code": ""}])
    def test_missing_code(self, callback):
        with pytest.raises(DecodingError):
            parse_callback(callback)


# ==========================================
# 6. 平台错误响应
# ==========================================


class TestProviderErrorEnvelope:
    @pytest.fixture
    def strategy(self, provider_config, mock_http):
        return GitHubAuthStrategy(provider_config, http_client=mock_http.client)

    @pytest.mark.parametrize(
        "body",
        [
            {"errcode": 40029, "errmsg": "invalid code"},
            {"ret": -1, "msg": "client request's parameters are invalid"},
            {"error_code": 21327, "error_msg": "expired_token"},
            {"error": "bad_verification_code", "error_description": "The code passed is incorrect or expired."},
        ],
    )
    async def test_error_in_2xx_body(self, strategy, mock_http, body):
        mock_http.route(strategy.USER_INFO_URL, body)

        with pytest.raises(TransportError) as exc_info:
            await strategy.get_user_info(TokenResponse(access_token="tok"))
        assert exc_info.value.step == "get_user_info"
        assert exc_info.value.status_code == 200

    @pytest.mark.parametrize("body", [{"errcode": 0, "errmsg": "ok", "id": 1}, {"ret": "0", "id": 1}])
    async def test_zero_code_is_success(self, strategy, mock_http, body):
        mock_http.route(strategy.USER_INFO_URL, body)

        profile = await strategy.get_user_info(TokenResponse(access_token="tok"))
        assert profile.id == "1"

    async def test_non_2xx(self, strategy, mock_http):
        mock_http.route(strategy.USER_INFO_URL, "Bad credentials", status=401)

        with pytest.raises(TransportError) as exc_info:
            await strategy.get_user_info(TokenResponse(access_token="tok"))
        assert exc_info.value.status_code == 401

    async def test_invalid_json(self, strategy, mock_http):
        mock_http.route(strategy.USER_INFO_URL, "<html>")

        with pytest.raises(DecodingError):
            await strategy.get_user_info(TokenResponse(access_token="tok"))

    async def test_json_array(self, strategy, mock_http):
        mock_http.route(strategy.USER_INFO_URL, [1, 2])

        with pytest.raises(DecodingError):
            await strategy.get_user_info(TokenResponse(access_token="tok"))

    async def test_missing_required_field(self, strategy, mock_http):
        mock_http.route(strategy.USER_INFO_URL, {"login": "ada"})

        with pytest.raises(DecodingError):
            await strategy.get_user_info(TokenResponse(access_token="tok"))
