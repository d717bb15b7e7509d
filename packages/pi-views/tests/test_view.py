"""Tests for the View base lifecycle and display pipeline."""

from __future__ import annotations

import logging

import pytest

from pi.views.cache import ViewCache
from pi.views.config import Config
from pi.views.errors import MissingImplementationError
from pi.views.message import Message
from pi.views.view import InstanceMode, View

from .fake_backends import FailingView, RecordingView


def _msg(text: str, **kwargs) -> Message:
    return Message.from_text(text, **kwargs)


def _sized(height: int, width: int) -> Message:
    msg = Message.from_text("x" * width)
    for _ in range(height - 1):
        msg.newline()
    return msg


class TestConstruction:
    def test_ids_increase(self) -> None:
        a = RecordingView()
        b = RecordingView()
        assert b.id > a.id

    def test_initial_state(self) -> None:
        view = RecordingView({"view": "v", "size": {"width": 1}})
        assert view.messages == []
        assert view.visible is False
        assert view.errors == 0
        assert view.tick == 0
        assert view.instance == InstanceMode.OPTIONS
        assert view.view_options == {"view": "v", "size": {"width": 1}}
        assert view.view_options is not view.options
        assert view.view_options["size"] is not view.options["size"]

    def test_update_options_hook_called(self) -> None:
        class Hooked(RecordingView):
            def update_options(self) -> None:
                self.options.setdefault("hooked", True)

        assert Hooked({}).options["hooked"] is True

    def test_available_by_default(self) -> None:
        assert RecordingView().is_available() is True


class TestBuffer:
    def test_push_single_and_list(self) -> None:
        view = RecordingView()
        view.push(_msg("a"))
        view.push([_msg("b"), _msg("c")])
        assert [m.content() for m in view.messages] == ["a", "b", "c"]

    def test_push_formats_by_default(self) -> None:
        config = Config(views={}, formats={"default": ["{level} ", "{message}"]})
        view = RecordingView({}, context=ViewCache(config))
        original = _msg("hello", level="warn")
        view.push(original)
        assert view.messages[0].content() == "WARN hello"
        assert original.content() == "hello"

    def test_push_without_format(self) -> None:
        config = Config(views={}, formats={"default": ["{level} ", "{message}"]})
        view = RecordingView({}, context=ViewCache(config))
        original = _msg("hello")
        view.push(original, format=False)
        assert view.messages[0] is original

    def test_clear_is_idempotent(self) -> None:
        view = RecordingView()
        view.push(_msg("a"))
        view.clear()
        assert view.messages == []
        view.clear()
        assert view.messages == []

    def test_clear_resets_route_options(self) -> None:
        view = RecordingView()
        view.set_route_options({"title": "x"})
        view.clear()
        assert view.route_options == {}

    def test_dismiss_clears(self) -> None:
        view = RecordingView()
        view.push(_msg("a"))
        view.set_route_options({"title": "x"})
        view.dismiss()
        assert view.messages == []
        assert view.route_options == {}

    def test_set_equals_clear_then_push(self) -> None:
        messages = [_msg("x"), _msg("y")]
        a = RecordingView()
        a.push([_msg("old1"), _msg("old2")])
        a.set(messages, format=False)

        b = RecordingView()
        b.push([_msg("old1"), _msg("old2")])
        b.clear()
        b.push(messages, format=False)

        assert a.messages == b.messages
        assert a.route_options == b.route_options == {}


class TestMeasuring:
    def test_height_sums(self) -> None:
        view = RecordingView()
        view.push([_sized(2, 1), _sized(3, 1), _sized(1, 1)], format=False)
        assert view.height() == 6

    def test_width_takes_max(self) -> None:
        view = RecordingView()
        view.push([_sized(1, 10), _sized(1, 4), _sized(1, 7)], format=False)
        assert view.width() == 10

    def test_explicit_list(self) -> None:
        view = RecordingView()
        view.push(_sized(5, 5), format=False)
        assert view.height([_sized(1, 2)]) == 1
        assert view.width([_sized(1, 2)]) == 2

    def test_empty(self) -> None:
        view = RecordingView()
        assert view.height() == 0
        assert view.width() == 0
        assert view.content() == ""

    def test_content_joins_messages(self) -> None:
        view = RecordingView()
        view.push([_msg("a\nb"), _msg("c")], format=False)
        assert view.content() == "a\nb\nc"


class TestCheckOptions:
    def test_no_change_no_reset(self) -> None:
        view = RecordingView({"a": 1})
        view.check_options()
        view.check_options()
        assert view.resets == []

    def test_change_triggers_reset_once(self) -> None:
        view = RecordingView({"a": 1, "nested": {"b": 1}})
        view.set_route_options({"nested": {"c": 2}})
        view.check_options()
        assert len(view.resets) == 1
        old, new = view.resets[0]
        assert old == {"a": 1, "nested": {"b": 1}}
        assert new == {"a": 1, "nested": {"b": 1, "c": 2}}
        view.check_options()
        assert len(view.resets) == 1

    def test_clearing_route_reverts(self) -> None:
        view = RecordingView({"a": 1})
        view.set_route_options({"a": 2})
        view.check_options()
        assert view.options == {"a": 2}
        view.clear()
        view.check_options()
        assert view.options == {"a": 1}
        assert len(view.resets) == 2

    def test_view_options_never_change(self) -> None:
        view = RecordingView({"a": 1})
        view.set_route_options({"a": 2})
        view.check_options()
        assert view.view_options == {"a": 1}


class TestDisplay:
    def test_shows_messages(self) -> None:
        view = RecordingView()
        view.push(_msg("a"), format=False)
        assert view.display() is True
        assert view.calls == ["show"]
        assert view.visible is True

    def test_empty_hides_when_visible(self) -> None:
        view = RecordingView()
        view.push(_msg("a"), format=False)
        view.display()
        view.clear()
        assert view.display() is True
        assert view.calls == ["show", "hide"]
        assert view.visible is False

    def test_empty_never_shown_does_not_hide(self) -> None:
        view = RecordingView()
        view.display()
        assert view.calls == []

    def test_applies_route_options_before_show(self) -> None:
        seen: list[object] = []

        class Spy(RecordingView):
            def show(self) -> None:
                seen.append(self.options.get("title"))

        view = Spy({"title": "a"})
        view.push(_msg("x"), format=False)
        view.set_route_options({"title": "b"})
        view.display()
        assert seen == ["b"]

    def test_aligns_messages(self) -> None:
        view = RecordingView({"align": "right"})
        view.push([_msg("long line"), _msg("x")], format=False)
        view.display()
        assert view.messages[1].line_text(0) == "        x"


class TestErrorIsolation:
    def test_failing_show_is_absorbed(self) -> None:
        view = FailingView({"view": "v"})
        view.push(_msg("a"), format=False)
        assert view.display() is True
        assert view.calls == ["show", "destroy"]
        assert view.errors == 1
        assert view.visible is False

    def test_view_stays_usable(self) -> None:
        view = FailingView({"view": "v"})
        view.push(_msg("a"), format=False)
        view.display()
        view.display()
        assert view.calls == ["show", "destroy", "show", "destroy"]
        assert view.errors == 2
        assert view.messages

    def test_success_resets_error_count(self) -> None:
        class Flaky(RecordingView):
            fail = True

            def show(self) -> None:
                super().show()
                if self.fail:
                    raise RuntimeError("once")

        view = Flaky({"view": "v"})
        view.push(_msg("a"), format=False)
        view.display()
        assert view.errors == 1
        view.fail = False
        view.display()
        assert view.errors == 0
        assert view.visible is True

    def test_destroyed_view_is_not_hidden(self) -> None:
        class Flaky(RecordingView):
            fail = False

            def show(self) -> None:
                super().show()
                if self.fail:
                    raise RuntimeError("gone")

        view = Flaky({"view": "v"})
        view.push(_msg("a"), format=False)
        view.display()
        assert view.visible is True

        view.fail = True
        view.display()
        assert view.visible is False

        view.clear()
        view.display()
        assert view.calls == ["show", "show", "destroy"]

    def test_failing_destroy_is_absorbed(self) -> None:
        class BadDestroy(FailingView):
            def destroy(self) -> None:
                raise RuntimeError("destroy failed")

        view = BadDestroy({"view": "v"})
        view.push(_msg("a"), format=False)
        assert view.display() is True

    def test_failing_hide_is_absorbed(self) -> None:
        class BadHide(RecordingView):
            def hide(self) -> None:
                self.calls.append("hide")
                raise RuntimeError("hide failed")

        view = BadHide({"view": "v"})
        view.push(_msg("a"), format=False)
        view.display()
        view.clear()
        assert view.display() is True
        assert view.calls == ["show", "hide", "destroy"]
        assert view.visible is False

    def test_failure_logged_as_warning(self, caplog) -> None:
        view = FailingView({"view": "v"})
        view.push(_msg("a"), format=False)
        with caplog.at_level(logging.WARNING, logger="pi.views.view"):
            view.display()
        assert "[v]" in caplog.text
        assert "boom" in caplog.text

    def test_debug_mode_logs_traceback(self, caplog) -> None:
        cache = ViewCache(Config(views={}, debug=True))
        view = FailingView({"view": "v"}, context=cache)
        view.push(_msg("a"), format=False)
        with caplog.at_level(logging.DEBUG, logger="pi.views.view"):
            view.display()
        records = [r for r in caplog.records if r.name == "pi.views.view"]
        assert records
        assert records[0].levelno == logging.DEBUG
        assert records[0].exc_info is not None


class TestMissingImplementation:
    def test_show_missing_is_fatal(self) -> None:
        view = View({"view": "v"})
        view.push(_msg("a"), format=False)
        with pytest.raises(MissingImplementationError):
            view.display()

    def test_hide_missing_is_fatal(self) -> None:
        view = View()
        with pytest.raises(MissingImplementationError, match="hide"):
            view.hide()

    def test_destroy_default_is_noop(self) -> None:
        view = View()
        view.destroy()
        view.destroy()
