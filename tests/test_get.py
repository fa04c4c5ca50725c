"""Tests for the shortcut helpers in flox.get."""

from flox import Binding, Controller, Flox, get_flox, shutdown_flox
from flox import get


class _Binding(Binding):
    def dependencies(self):
        self.put_controller("home", Controller())


class TestExplicitRegistry:
    def test_controller_helpers(self):
        flox = Flox()
        c = get.put("app", Controller(), flox=flox)
        assert get.is_registered("app", flox=flox)
        assert get.find("app", flox=flox) is c
        assert get.delete("app", flox=flox) is True
        assert not get.is_registered("app", flox=flox)
        assert c.is_disposed

    def test_binding_helpers(self):
        flox = Flox()
        b = get.put_binding("home", _Binding(), flox=flox)
        assert get.is_binding_registered("home", flox=flox)
        assert get.find_binding("home", flox=flox) is b
        assert get.delete_binding("home", flox=flox) is True
        assert get.find_binding("home", flox=flox) is None


class TestDefaultRegistry:
    def setup_method(self):
        shutdown_flox()

    def teardown_method(self):
        shutdown_flox()

    def test_uses_process_default(self):
        c = get.put("app", Controller())
        assert get_flox().get_controller("app") is c
        assert get.is_registered("app")
