"""查询字符串编解码

请求对象统一继承 QueryModel，字段按声明顺序编码：
    - None 字段直接省略，不输出空值
    - 列表字段按 Annotated 中声明的 Separator 拼接（空列表输出空字符串）
    - 枚举输出其声明值，布尔输出 true/false

使用示例:
    ```python
    class AuthRequest(QueryModel):
        client_id: str
        scope: Annotated[list[str] | None, COMMA] = None

    encode(AuthRequest(client_id="cid", scope=["a", "b"]))
    # 'client_id=cid&scope=a%2Cb'
    ```
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar
from urllib.parse import parse_qsl, urlencode

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.fields import FieldInfo

from .errors import DecodingError, EncodingError


@dataclass(frozen=True)
class Separator:
    """列表字段拼接符，作为 Annotated 元数据声明在字段上"""

    value: str


COMMA = Separator(",")
SPACE = Separator(" ")


class QueryModel(BaseModel):
    """可编码为查询字符串的请求对象基类"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


QueryModelT = TypeVar("QueryModelT", bound=QueryModel)


def _separator_of(field_info: FieldInfo) -> Separator | None:
    return next((m for m in field_info.metadata if isinstance(m, Separator)), None)


def _wire_name(name: str, field_info: FieldInfo) -> str:
    return field_info.serialization_alias or field_info.alias or name


def _encode_scalar(name: str, value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and not math.isfinite(value):
        raise EncodingError("encode", f"field '{name}' holds a non-finite float: {value}")
    if isinstance(value, (str, int, float)):
        return str(value)
    raise EncodingError("encode", f"field '{name}' has unsupported type {type(value).__name__}")


def _encode_value(name: str, value: Any, separator: Separator | None) -> str:
    if isinstance(value, (list, tuple)):
        if separator is None:
            raise EncodingError("encode", f"list field '{name}' declares no separator")
        return separator.value.join(_encode_scalar(name, item) for item in value)
    return _encode_scalar(name, value)


def encode(request: QueryModel) -> str:
    """将请求对象序列化为查询字符串（纯函数，无 I/O）"""
    pairs: list[tuple[str, str]] = []
    for name, field_info in type(request).model_fields.items():
        value = getattr(request, name)
        if value is None:
            continue
        pairs.append((_wire_name(name, field_info), _encode_value(name, value, _separator_of(field_info))))

    try:
        return urlencode(pairs)
    except (TypeError, UnicodeEncodeError) as e:
        raise EncodingError("encode", str(e)) from e


def decode(query: str, model: type[QueryModelT]) -> QueryModelT:
    """encode 的逆过程：按字段声明的分隔符拆分列表字段后校验为请求对象"""
    fields_by_wire = {_wire_name(name, info): (name, info) for name, info in model.model_fields.items()}

    data: dict[str, Any] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        if key not in fields_by_wire:
            data[key] = value
            continue
        name, field_info = fields_by_wire[key]
        separator = _separator_of(field_info)
        if separator is not None:
            data[name] = value.split(separator.value) if value else []
        else:
            data[name] = value

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DecodingError("decode", f"query cannot be decoded as {model.__name__}: {e}") from e


def build_url(base: str, request: QueryModel | None = None, *, fragment: str | None = None, **fixed: str) -> str:
    """
    拼接完整 URL：固定协议参数（response_type、grant_type 等）在前，请求对象在后。

    Args:
        base: 接口基础地址
        request: 请求对象
        fragment: URL 片段（如微信要求的 wechat_redirect）
        **fixed: 固定参数
    """
    parts = [urlencode(fixed) if fixed else "", encode(request) if request is not None else ""]
    query = "&".join(p for p in parts if p)

    url = f"{base}?{query}" if query else base
    if fragment:
        url = f"{url}#{fragment}"
    return url
