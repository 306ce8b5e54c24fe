from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import pytest_asyncio

from uniauth.toolkit.http_cli import AsyncHttpClient, RequestResult


class TestRequestResult:
    """测试 RequestResult 数据类"""

    def test_success_property_with_2xx_status(self):
        """测试 2xx 状态码被识别为成功"""
        assert RequestResult(status_code=200, error=None).success is True
        assert RequestResult(status_code=201, error=None).success is True
        assert RequestResult(status_code=299, error=None).success is True

    def test_success_property_with_error(self):
        """测试有错误信息时不被识别为成功"""
        result = RequestResult(status_code=200, error="Some error")
        assert result.success is False

    def test_success_property_with_4xx_5xx_status(self):
        """测试 4xx/5xx 状态码不被识别为成功"""
        assert RequestResult(status_code=400, error="Bad Request").success is False
        assert RequestResult(status_code=500, error="Internal Server Error").success is False

    def test_json_caching(self):
        """测试 JSON 缓存机制"""
        response = httpx.Response(200, json={"key": "value"})
        result = RequestResult(status_code=200, response=response)

        data1 = result.json()
        assert data1 == {"key": "value"}

        # 第二次调用返回同一个缓存对象
        assert result.json() is data1

    def test_json_no_response(self):
        """测试没有响应时返回空字典"""
        result = RequestResult(response=None)
        assert result.json() == {}
        assert result.text == ""

    def test_json_parse_error(self):
        """测试 JSON 解析失败时抛出异常"""
        result = RequestResult(status_code=200, response=httpx.Response(200, text="callback( {} );"))

        with pytest.raises(RuntimeError, match="Failed to parse JSON"):
            result.json()

    def test_text(self):
        result = RequestResult(status_code=200, response=httpx.Response(200, text="plain"))
        assert result.text == "plain"


class TestAsyncHttpClient:
    """测试 AsyncHttpClient 类"""

    @pytest_asyncio.fixture
    async def client(self):
        client = AsyncHttpClient(base_url="https://api.example.com", timeout=30)
        yield client
        await client.close()

    async def test_client_initialization(self):
        """测试客户端初始化"""
        client = AsyncHttpClient(
            base_url="https://test.com",
            timeout=60,
            headers={"X-Custom": "header"},
            verify=False,
        )

        assert client.timeout == 60
        assert client.default_headers["X-Custom"] == "header"
        assert client.client.base_url == "https://test.com"

        await client.close()

    async def test_context_manager(self):
        """测试上下文管理器"""
        async with AsyncHttpClient(base_url="https://test.com") as client:
            assert isinstance(client, AsyncHttpClient)

    def test_get_error_message_success(self):
        """测试获取错误消息（成功场景）"""
        mock_response = MagicMock()
        mock_response.text = "Error message"
        mock_response.status_code = 400

        assert AsyncHttpClient._get_error_message(mock_response) == "Error message"

    def test_get_error_message_failure(self):
        """测试获取错误消息（失败场景）"""
        mock_response = MagicMock()
        mock_response.status_code = 500
        type(mock_response).text = property(lambda self: (_ for _ in ()).throw(Exception("Text error")))

        msg = AsyncHttpClient._get_error_message(mock_response)
        assert "Failed to get response.text" in msg
        assert "status_code=500" in msg

    async def test_get(self, client):
        """测试 GET 请求透传参数与请求头"""
        with patch.object(client.client, "request", new_callable=AsyncMock) as mock_request:
            mock_response = MagicMock()
            mock_response.status_code = 200
            mock_response.is_error = False
            mock_request.return_value = mock_response

            result = await client.get("/test", params={"key": "value"}, headers={"Authorization": "Bearer t"})

            assert result.status_code == 200
            assert result.success is True
            call_kwargs = mock_request.call_args.kwargs
            assert call_kwargs["method"] == "GET"
            assert call_kwargs["params"] == {"key": "value"}
            assert call_kwargs["headers"] == {"Authorization": "Bearer t"}

    async def test_request_with_error_response(self, client):
        """测试请求返回错误响应"""
        with patch.object(client.client, "request", new_callable=AsyncMock) as mock_request:
            mock_response = MagicMock()
            mock_response.status_code = 404
            mock_response.is_error = True
            mock_response.text = "Not Found"
            mock_request.return_value = mock_response

            result = await client.get("/not-found")

            assert result.status_code == 404
            assert result.success is False
            assert result.error == "Not Found"

    async def test_server_error_is_returned_not_raised(self):
        """测试 5xx 响应以结果返回，不抛异常"""
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="bad gateway"))
        async with AsyncHttpClient(transport=transport) as client:
            result = await client.get("https://example.com/token?client_secret=s")

        assert result.status_code == 502
        assert result.success is False
        assert result.error == "bad gateway"
        assert result.response is not None

    async def test_request_with_request_error(self, client):
        """测试请求抛出 RequestError（网络错误）"""
        with patch.object(client.client, "request", new_callable=AsyncMock) as mock_request:
            mock_request.side_effect = httpx.RequestError("Connection failed")

            result = await client.get("/timeout")

            assert result.status_code == 0
            assert result.success is False
            assert "RequestError" in result.error

    async def test_mock_transport(self):
        """测试注入 transport"""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"path": request.url.path}))
        async with AsyncHttpClient(transport=transport) as client:
            result = await client.get("https://example.com/hello")

        assert result.success is True
        assert result.json() == {"path": "/hello"}
