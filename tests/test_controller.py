"""Tests for Controller."""

import pytest

from flox import Controller, DisposedError


class CounterController(Controller):
    def __init__(self):
        super().__init__()
        self.count = self.create_subject("count", 0)
        self.cancelled = False

    def increment(self):
        self.count.next(self.count.value + 1)

    def on_dispose(self):
        self.cancelled = True
        super().on_dispose()


class TestCreateSubject:
    def test_idempotent_by_key(self):
        c = Controller()
        first = c.create_subject("k", "a")
        first.next("changed")
        second = c.create_subject("k", "b")
        assert second is first
        assert second.value == "changed"

    def test_get_subject(self):
        c = CounterController()
        assert c.get_subject("count") is c.count
        assert c.get_subject("missing") is None

    def test_update_subject(self):
        c = CounterController()
        log = []
        c.count.subscribe(log.append)
        c.update_subject("count", 5)
        c.update_subject("missing", 1)  # no-op, no error
        assert log == [0, 5]

    def test_subjects_view_is_read_only(self):
        c = CounterController()
        assert set(c.subjects) == {"count"}
        with pytest.raises(TypeError):
            c.subjects["x"] = None


class TestLifecycle:
    def test_on_init_default_is_noop(self):
        c = CounterController()
        c.on_init()
        assert not c.is_disposed

    def test_on_dispose_disposes_subjects(self):
        c = CounterController()
        c.increment()
        subject = c.count
        c.on_dispose()
        assert c.is_disposed
        assert c.cancelled
        assert subject.is_disposed
        assert subject.value == 1
        assert len(c.subjects) == 0
        with pytest.raises(DisposedError):
            subject.subscribe(lambda v: None)

    def test_on_dispose_is_idempotent(self):
        c = CounterController()
        c.on_dispose()
        c.on_dispose()
        assert c.is_disposed
