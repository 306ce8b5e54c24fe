import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from uniauth.logger import logger
from uniauth.toolkit.json import orjson_loads


@dataclass
class RequestResult:
    """一次请求的结果，网络错误时 status_code 为 0 且 response 为空"""

    status_code: int | None = None
    response: httpx.Response | None = None
    error: str | None = None
    elapsed_ms: float = 0.0
    _json: Any = field(init=False, default=None)

    @property
    def success(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        if self.response is None:
            return ""
        return self.response.text

    def json(self) -> Any:
        if self._json is not None:
            return self._json
        if self.response is None:
            return {}
        try:
            self._json = orjson_loads(self.response.content)
        except Exception as e:
            raise RuntimeError(f"Failed to parse JSON: {e}") from e
        return self._json


def _strip_query(url: str) -> str:
    return url.split("?", 1)[0]


class AsyncHttpClient:
    """
    基于 httpx 的长连接客户端，供各第三方登录策略共享。

    请求失败（网络错误、非 2xx 状态码）不会抛出异常，而是体现在 RequestResult 中，
    由调用方决定如何处理。不做重试。
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: int = 60,
        headers: dict[str, str] | None = None,
        verify: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        :param base_url: 基础地址
        :param timeout: 默认超时（秒）
        :param headers: 默认请求头，缺省为 Accept: application/json
        :param verify: 是否校验证书
        :param transport: 自定义传输层（测试中注入 httpx.MockTransport）
        """
        self.timeout = timeout
        self.default_headers = headers or {"Accept": "application/json"}
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=self.default_headers,
            verify=verify,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self.client.aclose()

    @staticmethod
    def _get_error_message(response: httpx.Response) -> str:
        try:
            return response.text
        except Exception as e:
            return f"Failed to get response.text, status_code={response.status_code}, error={e}"

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> RequestResult:
        url = url.strip()
        method = method.upper()
        started = time.perf_counter()

        def _elapsed() -> float:
            return round((time.perf_counter() - started) * 1000, 2)

        try:
            response = await self.client.request(
                method=method,
                url=url,
                params=params,
                headers=headers or {},
                timeout=timeout or self.timeout,
            )
        except httpx.RequestError as exc:
            logger.error(f"{method} {_strip_query(url)} RequestError: {exc!r}")
            return RequestResult(status_code=0, error=f"RequestError: {exc!r}", elapsed_ms=_elapsed())
        except Exception as exc:
            logger.error(f"{method} {_strip_query(url)} unexpected error: {exc}")
            return RequestResult(status_code=500, error=f"Internal Error: {exc}", elapsed_ms=_elapsed())

        result = RequestResult(
            status_code=response.status_code,
            response=response,
            error=self._get_error_message(response) if response.is_error else None,
            elapsed_ms=_elapsed(),
        )
        # 查询串中可能携带 client_secret，只记录路径部分
        logger.info(f"{method} {_strip_query(url)} -> {result.status_code} ({result.elapsed_ms}ms)")
        return result

    async def get(self, url: str, **kwargs) -> RequestResult:
        return await self._request("GET", url, **kwargs)
