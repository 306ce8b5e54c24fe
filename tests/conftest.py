"""
Pytest 配置文件 (conftest.py)

提供测试运行所需的共享 fixtures 和配置。

主要功能：
1. 提供基于 httpx.MockTransport 的 HTTP 客户端，按 host + path 返回预设响应
2. 提供各平台通用的测试配置
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
import pytest_asyncio

from uniauth.third_party_auth import ProviderConfig
from uniauth.toolkit.http_cli import AsyncHttpClient

# ==========================================
# 1. HTTP Mock
# ==========================================


@dataclass
class MockHttp:
    """记录请求并按 host + path 返回预设响应"""

    client: AsyncHttpClient
    routes: dict[str, tuple[int, Any]] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def route(self, url: str, body: Any, status: int = 200) -> None:
        parsed = httpx.URL(url)
        self.routes[f"{parsed.host}{parsed.path}"] = (status, body)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = f"{request.url.host}{request.url.path}"
        if key not in self.routes:
            return httpx.Response(404, text=f"not mocked: {key}")

        status, body = self.routes[key]
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)

    def last_request_to(self, url: str) -> httpx.Request:
        parsed = httpx.URL(url)
        matched = [r for r in self.requests if r.url.host == parsed.host and r.url.path == parsed.path]
        assert matched, f"no request sent to {url}"
        return matched[-1]


@pytest_asyncio.fixture
async def mock_http() -> AsyncGenerator[MockHttp, None]:
    mock = MockHttp(client=None)  # type: ignore[arg-type]
    mock.client = AsyncHttpClient(transport=httpx.MockTransport(mock.handle))
    yield mock
    await mock.client.close()


# ==========================================
# 2. 通用配置
# ==========================================


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(
        client_id="cid",
        client_secret="secret",
        redirect_uri="https://app/cb",
    )
