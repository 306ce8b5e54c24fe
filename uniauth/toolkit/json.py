from typing import Any

import orjson


def orjson_dumps(*args, **kwargs) -> str:
    return orjson.dumps(*args, **kwargs).decode("utf-8")


def orjson_loads(*args, **kwargs) -> Any:
    return orjson.loads(*args, **kwargs)
