import base64
import hashlib
import secrets

from .errors import DecodingError

JSONP_PREFIX = "callback("
JSONP_SUFFIX = ");"


def substr_between(text: str, start: str, end: str) -> str | None:
    """返回 start 与其后第一个 end 之间的子串，任一标记缺失时返回 None"""
    begin = text.find(start)
    if begin < 0:
        return None
    begin += len(start)
    stop = text.find(end, begin)
    if stop < 0:
        return None
    return text[begin:stop]


def unwrap_jsonp(text: str) -> str:
    """
    提取 JSONP 响应 `callback(<json>);` 中的 JSON 部分

    Raises:
        DecodingError: 找不到 callback( 或 ); 标记
    """
    inner = substr_between(text, JSONP_PREFIX, JSONP_SUFFIX)
    if inner is None:
        raise DecodingError("unwrap_jsonp", f"jsonp markers not found in response: {text[:200]!r}")
    return inner


# ==========================================
# PKCE (RFC 7636)
# ==========================================


def generate_code_verifier(nbytes: int = 32) -> str:
    """生成 code_verifier（43~128 位 URL 安全字符），需由调用方保存至回调阶段"""
    return secrets.token_urlsafe(nbytes)


def code_challenge(code_verifier: str) -> str:
    """S256: BASE64URL(SHA256(code_verifier))，去掉末尾的 '='"""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
