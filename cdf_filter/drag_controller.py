"""Threshold drag interaction as an explicit state machine.

Purpose
-------
``DragController`` owns the active threshold of one filter component. The
rendering layer reports pointer activity; the controller converts pointer
positions to threshold values, recounts the passing values, and notifies
listeners synchronously.

States and transitions
----------------------
``Idle --start()--> Dragging``
    Returns a :class:`DragSubscription`, the handle for the global
    pointer-move/pointer-up capture. An originating event passed to
    ``start`` has its default action and propagation suppressed.
``Dragging --handle_move(x, rect)--> Dragging``
    ``fraction = clamp((x - rect.left) / rect.width, 0, 1)``; the threshold
    becomes the scale's value at that fraction and listeners are called
    with the new ``(threshold, count)`` before the method returns.
``Dragging --stop()--> Idle``
    Pointer released anywhere; the subscription is released.
``dispose()``
    Releases any live subscription and all listeners. Later moves are
    ignored.

The rendering layer never hands the controller a DOM or widget object; it
only supplies the plotting-area rectangle and the pointer's x coordinate in
the same coordinate system.
"""

from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Hashable, Optional, Protocol, runtime_checkable

import numpy as np

from .scale import ScaleConfig
from .threshold_count import FilterMode, get_count_at_threshold, normalize_filter_mode
from .ThresholdEvent import ThresholdEvent

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

__all__ = [
    "ThresholdState",
    "PlotRect",
    "SuppressibleEvent",
    "DragSubscription",
    "DragController",
    "pointer_fraction",
]

ThresholdCallback = Callable[[float, int], Any]
ChangeHook = Callable[[ThresholdEvent], Any]


@dataclass
class ThresholdState:
    """Current threshold, operator, derived count and drag flag."""

    value: float
    mode: FilterMode
    count: int
    dragging: bool = False


@dataclass(frozen=True)
class PlotRect:
    """Horizontal extent of the plotting area, in pointer coordinates."""

    left: float
    width: float

    @classmethod
    def from_mapping(cls, data: Any) -> "PlotRect":
        """Build from a ``{"left": ..., "width": ...}`` mapping (e.g. a DOMRect dump)."""
        left = float(data.get("left", 0.0) or 0.0)
        width = float(data.get("width", 0.0) or 0.0)
        return cls(left=left, width=width)


@runtime_checkable
class SuppressibleEvent(Protocol):
    def prevent_default(self) -> None: ...

    def stop_propagation(self) -> None: ...


def pointer_fraction(x: float, rect: PlotRect) -> float:
    """Clamped horizontal position of ``x`` inside ``rect``, in ``[0, 1]``.

    A zero-width (or negative-width) rectangle and non-finite positions map
    to ``1``. The left edge maps to ``0``.
    """
    width = float(rect.width)
    if not (width > 0) or not math.isfinite(width):
        return 1.0
    fraction = (float(x) - float(rect.left)) / width
    if not math.isfinite(fraction):
        return 1.0
    return min(1.0, max(0.0, fraction))


class DragSubscription:
    """Handle for the pointer capture held during one drag session.

    The rendering layer routes window-level pointer events here for as long
    as :attr:`active` is true. After :meth:`dispose` (or the controller's
    ``stop``/``dispose``) the handle swallows further events.
    """

    def __init__(self, controller: "DragController") -> None:
        self._controller: Optional[DragController] = controller

    @property
    def active(self) -> bool:
        return self._controller is not None

    def move(self, x: float, rect: PlotRect) -> Optional[ThresholdEvent]:
        if self._controller is None:
            return None
        return self._controller.handle_move(x, rect)

    def release(self) -> None:
        """Pointer-up: end the drag session."""
        if self._controller is None:
            return
        self._controller.stop()

    def dispose(self) -> None:
        """Drop the capture without touching the controller's threshold."""
        controller, self._controller = self._controller, None
        if controller is not None:
            controller._release(self)

    def _detach(self) -> None:
        self._controller = None


class DragController:
    """
    Owns one :class:`ThresholdState` and drives it from pointer positions.

    Parameters
    ----------
    sorted_values : array-like
        Dataset in ascending order.
    scale : ScaleConfig
        Axis domain used to map pointer fractions to values.
    mode : str, optional
        Comparison operator; unknown values behave like ``"lte"``.
    initial_threshold : float, optional
        Starting threshold. Defaults to the midpoint of the scale domain.
    on_threshold_change : callable, optional
        Called as ``on_threshold_change(threshold, count)`` on every drag
        update.

    Examples
    --------
    >>> from cdf_filter.scale import ScaleConfig
    >>> ctl = DragController([0, 25, 50, 75, 100], scale=ScaleConfig(0, 100))
    >>> sub = ctl.start()
    >>> round(ctl.handle_move(60, PlotRect(left=0, width=100)).threshold, 6)
    60.0
    >>> ctl.count
    3
    >>> sub.release()
    """

    def __init__(
        self,
        sorted_values: Any,
        *,
        scale: ScaleConfig,
        mode: object = "lte",
        initial_threshold: Optional[float] = None,
        on_threshold_change: Optional[ThresholdCallback] = None,
    ) -> None:
        self._sorted = np.asarray(sorted_values, dtype=float)
        self._scale = scale
        self._on_threshold_change = on_threshold_change
        self._hooks: Dict[Hashable, ChangeHook] = {}
        self._hook_counter = 0
        self._subscription: Optional[DragSubscription] = None
        self._disposed = False

        op = normalize_filter_mode(mode)
        value = float(initial_threshold) if initial_threshold is not None else scale.midpoint()
        self._state = ThresholdState(
            value=value,
            mode=op,
            count=get_count_at_threshold(op, self._sorted, value),
        )

    # --- Read-only views ---

    @property
    def state(self) -> ThresholdState:
        """Snapshot copy of the current state."""
        return replace(self._state)

    @property
    def threshold(self) -> float:
        return self._state.value

    @property
    def count(self) -> int:
        return self._state.count

    @property
    def mode(self) -> FilterMode:
        return self._state.mode

    @property
    def total(self) -> int:
        return int(self._sorted.size)

    @property
    def scale(self) -> ScaleConfig:
        return self._scale

    @property
    def dragging(self) -> bool:
        return self._state.dragging

    @property
    def disposed(self) -> bool:
        return self._disposed

    # --- Data updates (threshold value is preserved) ---

    def update_data(
        self,
        sorted_values: Any = None,
        *,
        scale: Optional[ScaleConfig] = None,
        mode: object = None,
    ) -> None:
        """Swap in new data, domain or operator and recount the current threshold."""
        if sorted_values is not None:
            self._sorted = np.asarray(sorted_values, dtype=float)
        if scale is not None:
            self._scale = scale
        if mode is not None:
            self._state.mode = normalize_filter_mode(mode)
        self._state.count = get_count_at_threshold(self._state.mode, self._sorted, self._state.value)

    # --- Hooks ---

    def add_change_hook(self, callback: ChangeHook, hook_id: Optional[Hashable] = None) -> Hashable:
        """
        Register ``callback(event)`` to run on every drag update.

        Parameters
        ----------
        callback : callable
            Receives a :class:`ThresholdEvent`.
        hook_id : hashable, optional
            Identifier; re-using an id replaces the previous callback. Auto
            ids are ``"hook:1"``, ``"hook:2"``, ...

        Returns
        -------
        hashable
            The id under which the hook is registered.
        """
        if not callable(callback):
            raise TypeError(f"Hook callback must be callable, got {type(callback)!r}")
        if hook_id is None:
            self._hook_counter += 1
            hook_id = f"hook:{self._hook_counter}"
        else:
            hash(hook_id)
            if isinstance(hook_id, str) and hook_id.startswith("hook:"):
                suffix = hook_id[len("hook:"):]
                if suffix.isdigit():
                    self._hook_counter = max(self._hook_counter, int(suffix))
        self._hooks[hook_id] = callback
        return hook_id

    def remove_change_hook(self, hook_id: Hashable) -> None:
        self._hooks.pop(hook_id, None)

    # --- State machine ---

    def start(self, event: Optional[SuppressibleEvent] = None) -> DragSubscription:
        """Pointer-down on the handle: enter ``Dragging``.

        Raises
        ------
        RuntimeError
            If the controller has been disposed.
        """
        if self._disposed:
            raise RuntimeError("DragController has been disposed.")
        if event is not None:
            event.prevent_default()
            event.stop_propagation()
        if self._subscription is not None:
            return self._subscription

        self._subscription = DragSubscription(self)
        self._state.dragging = True
        logger.debug("drag start at threshold=%s", self._state.value)
        return self._subscription

    def handle_move(self, x: float, rect: PlotRect) -> Optional[ThresholdEvent]:
        """Pointer-move while dragging; returns the emitted event, or ``None`` when idle."""
        if not self._state.dragging or self._disposed:
            return None

        fraction = pointer_fraction(x, rect)
        value = self._scale.fraction_to_value(fraction * 100.0)
        old = self._state.value
        self._state.value = value
        self._state.count = get_count_at_threshold(self._state.mode, self._sorted, value)

        event = ThresholdEvent(
            threshold=value,
            count=self._state.count,
            total=self.total,
            mode=self._state.mode,
            old_threshold=old,
            fraction=fraction,
        )
        self._notify(event)
        return event

    def stop(self) -> None:
        """Pointer-up anywhere: return to ``Idle``."""
        if self._subscription is None:
            self._state.dragging = False
            return
        self._release(self._subscription)

    def dispose(self) -> None:
        """Release capture and listeners; the controller ignores all later input."""
        if self._disposed:
            return
        if self._subscription is not None:
            self._release(self._subscription)
        self._hooks.clear()
        self._on_threshold_change = None
        self._disposed = True
        logger.debug("drag controller disposed")

    # --- Internal ---

    def _release(self, subscription: DragSubscription) -> None:
        if subscription is not self._subscription:
            return
        subscription._detach()
        self._subscription = None
        self._state.dragging = False
        logger.debug("drag stop at threshold=%s count=%s", self._state.value, self._state.count)

    def _notify(self, event: ThresholdEvent) -> None:
        if self._on_threshold_change is not None:
            try:
                self._on_threshold_change(event.threshold, event.count)
            except Exception as e:
                warnings.warn(f"Hook on_threshold_change failed: {e}")
        for h_id, callback in list(self._hooks.items()):
            try:
                callback(event)
            except Exception as e:
                warnings.warn(f"Hook {h_id} failed: {e}")
