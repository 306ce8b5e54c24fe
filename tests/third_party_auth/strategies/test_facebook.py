import pytest

from uniauth.third_party_auth import FacebookAuthStrategy


@pytest.fixture
def strategy(provider_config, mock_http):
    return FacebookAuthStrategy(provider_config, http_client=mock_http.client)


def test_authorize(strategy):
    url = strategy.authorize("xyz")

    assert url.startswith("https://www.facebook.com/v21.0/dialog/oauth?response_type=code&")
    assert "scope=public_profile%2Cemail" in url


async def test_login(strategy, mock_http):
    mock_http.route(strategy.ACCESS_TOKEN_URL, {"access_token": "tok", "token_type": "bearer", "expires_in": 5183944})
    mock_http.route(strategy.USER_INFO_URL, {"id": "10224", "name": "Mark", "email": "m@example.com"})

    identity = await strategy.login({"code": "c", "state": "xyz"})

    assert identity.user_id == "10224"
    assert identity.name == "Mark"
    assert identity.expires_in == 5183944
    assert identity.extra == {"email": "m@example.com"}

    params = mock_http.last_request_to(strategy.USER_INFO_URL).url.params
    assert params["access_token"] == "tok"
    assert params["fields"] == "id,name,email,picture"
