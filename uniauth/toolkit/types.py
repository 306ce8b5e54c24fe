from collections.abc import Callable
from typing import Annotated, Any

from pydantic import BeforeValidator

# 各平台返回的用户 ID 类型不一：GitHub 为数字，X/Facebook 为字符串，
# 统一身份中 user_id 一律为字符串，在模型层完成转换。


def _coerce_id(v: Any) -> str:
    # bool 是 int 的子类，需单独排除
    if isinstance(v, bool) or not isinstance(v, (int, str)):
        raise ValueError(f"id must be int or str, got {type(v).__name__}")
    return str(v)


IntStr = Annotated[str, BeforeValidator(_coerce_id)]


class LazyProxy:
    """
    延迟解析的代理：每次访问属性时调用 getter 取得真实对象再转发。

    模块级导出的 logger 即为此代理，init_logger() 之后的调用自动落到新配置的实例上：

        logger = LazyProxy(lambda: _logger or loguru.logger)
        logger.bind(provider="qq").info("Open id resolved")
    """

    __slots__ = ("_getter",)

    def __init__(self, getter: Callable[[], Any]):
        object.__setattr__(self, "_getter", getter)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._getter(), name)

    def __repr__(self) -> str:
        try:
            target = self._getter()
        except RuntimeError:
            return "<LazyProxy: uninitialized>"
        return f"<LazyProxy: {target!r}>"
