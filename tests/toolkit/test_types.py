import pytest
from pydantic import BaseModel, ValidationError

from uniauth.toolkit.types import IntStr, LazyProxy


class DemoModel(BaseModel):
    id: IntStr


class TestIntStr:
    def test_int_to_str(self):
        """GitHub 返回数字 id -> 统一转为字符串"""
        assert DemoModel(id=1).id == "1"

    def test_str_unchanged(self):
        assert DemoModel(id="1445361781227").id == "1445361781227"

    @pytest.mark.parametrize("value", [None, 1.5, True, {"a": 1}])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            DemoModel(id=value)


class TestLazyProxy:
    def test_forward_attribute(self):
        target = {"k": "v"}
        proxy = LazyProxy(lambda: target)

        assert proxy.get("k") == "v"

    def test_getter_resolved_on_each_access(self):
        holder = {"obj": "first"}
        proxy = LazyProxy(lambda: holder["obj"])

        assert proxy.upper() == "FIRST"
        holder["obj"] = "second"
        assert proxy.upper() == "SECOND"

    def test_repr_uninitialized(self):
        def _getter():
            raise RuntimeError("not ready")

        assert repr(LazyProxy(_getter)) == "<LazyProxy: uninitialized>"
