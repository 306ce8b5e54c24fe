import pytest

from uniauth.third_party_auth import BaiduAuthStrategy, DecodingError, ProviderConfig, TokenResponse


@pytest.fixture
def strategy(provider_config, mock_http):
    return BaiduAuthStrategy(provider_config, http_client=mock_http.client)


def test_authorize_joins_scope_with_space(mock_http):
    config = ProviderConfig(client_id="cid", redirect_uri="https://app/cb", scope=["basic", "netdisk"])
    strategy = BaiduAuthStrategy(config, http_client=mock_http.client)

    url = strategy.authorize("xyz")

    assert url.startswith("https://openapi.baidu.com/oauth/2.0/authorize?response_type=code&")
    assert "scope=basic+netdisk" in url


async def test_login(strategy, mock_http):
    mock_http.route(
        strategy.ACCESS_TOKEN_URL,
        {"access_token": "tok", "expires_in": 2592000, "refresh_token": "r", "scope": "basic", "session_key": "k"},
    )
    mock_http.route(strategy.USER_INFO_URL, {"openid": "o1", "username": "du", "portrait": "p"})

    identity = await strategy.login({"code": "c"})

    assert identity.user_id == "o1"
    assert identity.name == "du"
    assert identity.refresh_token == "r"
    assert identity.extra == {"portrait": "p"}


async def test_legacy_uid(strategy, mock_http):
    mock_http.route(strategy.USER_INFO_URL, {"uid": 2346677, "username": "old"})

    profile = await strategy.get_user_info(TokenResponse(access_token="tok"))
    identity = strategy.normalize(TokenResponse(access_token="tok"), profile)

    assert identity.user_id == "2346677"


async def test_no_user_id(strategy, mock_http):
    mock_http.route(strategy.USER_INFO_URL, {"username": "x"})

    profile = await strategy.get_user_info(TokenResponse(access_token="tok"))
    with pytest.raises(DecodingError):
        strategy.normalize(TokenResponse(access_token="tok"), profile)


async def test_refresh_access_token(strategy, mock_http):
    mock_http.route(strategy.ACCESS_TOKEN_URL, {"access_token": "new"})

    await strategy.refresh_access_token("r")

    params = mock_http.last_request_to(strategy.ACCESS_TOKEN_URL).url.params
    assert params["grant_type"] == "refresh_token"
    assert "scope" not in params
