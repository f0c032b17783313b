from __future__ import annotations

import logging
import warnings

import pytest

from cdf_filter.drag_controller import DragController, PlotRect, SuppressibleEvent, pointer_fraction
from cdf_filter.scale import ScaleConfig

RECT = PlotRect(left=50.0, width=200.0)


class _FakePointerDown:
    def __init__(self) -> None:
        self.prevented = False
        self.stopped = False

    def prevent_default(self) -> None:
        self.prevented = True

    def stop_propagation(self) -> None:
        self.stopped = True


def _controller(values=(0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100), **kwargs) -> DragController:
    values = sorted(values)
    scale = kwargs.pop("scale", ScaleConfig(float(values[0]), float(values[-1])))
    return DragController(values, scale=scale, **kwargs)


def test_initial_threshold_defaults_to_midpoint() -> None:
    ctl = _controller()
    assert ctl.threshold == 50.0
    assert ctl.count == 6
    assert not ctl.dragging


def test_explicit_initial_threshold_and_mode() -> None:
    ctl = _controller(mode="gt", initial_threshold=75)
    assert ctl.threshold == 75
    assert ctl.count == 3
    assert ctl.mode == "gt"


def test_drag_to_sixty_percent_reports_before_release() -> None:
    seen: list[tuple[float, int]] = []
    ctl = _controller(on_threshold_change=lambda t, c: seen.append((t, c)))

    sub = ctl.start()
    event = ctl.handle_move(RECT.left + 0.6 * RECT.width, RECT)

    assert ctl.dragging
    assert sub.active
    assert event is not None
    assert event.threshold == pytest.approx(60.0)
    assert event.count == 7
    assert seen == [(pytest.approx(60.0), 7)]

    sub.release()
    assert not ctl.dragging
    assert not sub.active
    assert ctl.threshold == pytest.approx(60.0)


def test_every_move_notifies_not_only_release() -> None:
    seen: list[float] = []
    ctl = _controller(on_threshold_change=lambda t, _c: seen.append(t))
    ctl.start()
    for frac in (0.1, 0.2, 0.3):
        ctl.handle_move(RECT.left + frac * RECT.width, RECT)
    ctl.stop()
    assert seen == pytest.approx([10.0, 20.0, 30.0])


def test_moves_while_idle_are_ignored() -> None:
    seen: list[float] = []
    ctl = _controller(on_threshold_change=lambda t, _c: seen.append(t))
    assert ctl.handle_move(RECT.left, RECT) is None
    assert ctl.threshold == 50.0
    assert seen == []


def test_pointer_outside_plot_area_is_clamped() -> None:
    ctl = _controller()
    ctl.start()
    ctl.handle_move(-1000, RECT)
    assert ctl.threshold == 0.0
    assert ctl.count == 1
    ctl.handle_move(10_000, RECT)
    assert ctl.threshold == 100.0
    assert ctl.count == 11


def test_left_edge_maps_to_zero_not_one() -> None:
    assert pointer_fraction(RECT.left, RECT) == 0.0


def test_zero_width_plot_area_maps_to_fraction_one() -> None:
    assert pointer_fraction(10.0, PlotRect(left=0.0, width=0.0)) == 1.0
    assert pointer_fraction(-10.0, PlotRect(left=0.0, width=0.0)) == 1.0
    assert pointer_fraction(float("nan"), RECT) == 1.0

    ctl = _controller()
    ctl.start()
    ctl.handle_move(0.0, PlotRect(left=0.0, width=0.0))
    assert ctl.threshold == 100.0


def test_start_suppresses_originating_event() -> None:
    event = _FakePointerDown()
    assert isinstance(event, SuppressibleEvent)
    ctl = _controller()
    ctl.start(event)
    assert event.prevented and event.stopped


def test_start_twice_reuses_subscription() -> None:
    ctl = _controller()
    first = ctl.start()
    assert ctl.start() is first


def test_log_scale_drag_interpolates_in_log_space() -> None:
    ctl = _controller(values=(1, 10, 100), scale=ScaleConfig(1.0, 100.0, True))
    ctl.start()
    ctl.handle_move(RECT.left + 0.5 * RECT.width, RECT)
    assert ctl.threshold == pytest.approx(10.0)
    assert ctl.count == 2


def test_dispose_while_dragging_releases_capture() -> None:
    seen: list[float] = []
    ctl = _controller(on_threshold_change=lambda t, _c: seen.append(t))
    sub = ctl.start()
    ctl.dispose()

    assert not ctl.dragging
    assert not sub.active
    assert sub.move(RECT.left, RECT) is None
    assert ctl.handle_move(RECT.left, RECT) is None
    assert seen == []
    with pytest.raises(RuntimeError):
        ctl.start()


def test_stale_subscription_after_stop_is_inert() -> None:
    ctl = _controller()
    old = ctl.start()
    ctl.stop()
    new = ctl.start()
    old.release()
    assert ctl.dragging
    assert new.active
    assert old.move(RECT.left, RECT) is None


def test_subscription_dispose_keeps_threshold() -> None:
    ctl = _controller()
    sub = ctl.start()
    ctl.handle_move(RECT.left + 0.25 * RECT.width, RECT)
    sub.dispose()
    assert not ctl.dragging
    assert ctl.threshold == pytest.approx(25.0)


def test_update_data_recounts_without_moving_threshold() -> None:
    ctl = _controller()
    ctl.update_data([1, 2, 3, 60, 70], scale=ScaleConfig(1, 70))
    assert ctl.threshold == 50.0
    assert ctl.count == 3
    ctl.update_data(mode="gte")
    assert ctl.count == 2


def test_state_is_a_snapshot() -> None:
    ctl = _controller()
    snap = ctl.state
    snap.value = -1.0
    assert ctl.threshold == 50.0


def test_hook_ids_and_failure_isolation() -> None:
    ctl = _controller()
    calls: list[str] = []

    def failing(_event):
        raise RuntimeError("intentional hook failure")

    assert ctl.add_change_hook(lambda _e: calls.append("a")) == "hook:1"
    assert ctl.add_change_hook(failing, hook_id="hook:10") == "hook:10"
    assert ctl.add_change_hook(lambda _e: calls.append("b")) == "hook:11"

    ctl.start()
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        ctl.handle_move(RECT.left, RECT)

    assert calls == ["a", "b"]
    assert any("Hook hook:10 failed" in str(w.message) for w in caught)

    ctl.remove_change_hook("hook:1")
    ctl.remove_change_hook("hook:10")
    ctl.handle_move(RECT.left, RECT)
    assert calls == ["a", "b", "b"]


def test_failing_threshold_callback_warns_and_keeps_state() -> None:
    def boom(_t, _c):
        raise ValueError("nope")

    ctl = _controller(on_threshold_change=boom)
    ctl.start()
    with pytest.warns(UserWarning, match="on_threshold_change failed"):
        ctl.handle_move(RECT.left + RECT.width, RECT)
    assert ctl.threshold == 100.0


def test_unhashable_hook_id_raises_type_error() -> None:
    ctl = _controller()
    with pytest.raises(TypeError):
        ctl.add_change_hook(lambda _e: None, hook_id=[])
    with pytest.raises(TypeError):
        ctl.add_change_hook("not callable")  # type: ignore[arg-type]


def test_transitions_are_logged(caplog) -> None:
    ctl = _controller()
    with caplog.at_level(logging.DEBUG, logger="cdf_filter.drag_controller"):
        ctl.start()
        ctl.stop()
    assert "drag start" in caplog.text
    assert "drag stop" in caplog.text


def test_empty_dataset_counts_zero() -> None:
    ctl = DragController([], scale=ScaleConfig())
    assert ctl.threshold == 0.0
    assert ctl.count == 0
    ctl.start()
    event = ctl.handle_move(RECT.left + RECT.width, RECT)
    assert event is not None
    assert event.count == 0
    assert event.total == 0
