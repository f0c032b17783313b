"""
drag_driver.py — Threshold drag handle for a Plotly chart, via anywidget

The frontend draws a small handle at the bottom of the threshold line,
positioned over the Plotly plotting area that shares its host container. It
turns raw browser pointer activity into three custom messages:

- ``{"type": "drag_start"}`` on pointer-down over the handle (the event's
  default action and propagation are suppressed there),
- ``{"type": "drag_move", "x": clientX, "rect": {"left": ..., "width": ...}}``
  for every window-level pointer-move while the pointer stays down,
- ``{"type": "drag_end"}`` on pointer-up anywhere in the window.

The Python side forwards these to a :class:`DragController`. The browser
never computes threshold values; it only measures the plotting area.

Traitlets (synced to frontend)
------------------------------
percentage:
    Threshold position along the plotting area, in percent.
color:
    Handle color.
dragging:
    Whether a drag session is active (drives the cursor style).
container_width:
    Reported back by the frontend: current host width in pixels.
debug_js:
    Enable console logging in the frontend.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import anywidget
import traitlets

from .drag_controller import DragController, DragSubscription, PlotRect

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

__all__ = ["ThresholdDragDriver"]


class ThresholdDragDriver(anywidget.AnyWidget):
    """
    Frontend pointer capture for one threshold handle.

    Parameters
    ----------
    controller : DragController, optional
        Receiver of drag messages. Can be attached later with
        :meth:`attach`.
    **kwargs
        Initial trait values (``percentage``, ``color``, ...).

    Notes
    -----
    The driver node sits inside the same host box as the Plotly
    ``FigureWidget``; it positions itself absolutely over that host and uses
    Plotly's ``.nsewdrag`` rectangle (falling back to the background rect, then
    the host) as the plotting area.
    """

    percentage = traitlets.Float(0.0).tag(sync=True)
    color = traitlets.Unicode("#ef4444").tag(sync=True)
    dragging = traitlets.Bool(False).tag(sync=True)
    container_width = traitlets.Float(0.0).tag(sync=True)
    debug_js = traitlets.Bool(False).tag(sync=True)

    _esm = r"""
    function safeLog(enabled, ...args) {
      if (enabled) console.log("[ThresholdDragDriver]", ...args);
    }

    function findPlotArea(host) {
      if (!host) return null;
      return (
        host.querySelector(".js-plotly-plot .nsewdrag") ||
        host.querySelector(".js-plotly-plot .bglayer .bg") ||
        host
      );
    }

    export default {
      render({ model, el }) {
        const host = el.parentElement;
        if (!host) return;
        const debug = () => !!model.get("debug_js");

        host.style.position = "relative";
        el.style.position = "absolute";
        el.style.left = "0";
        el.style.top = "0";
        el.style.width = "0";
        el.style.height = "0";
        el.style.overflow = "visible";

        const handle = document.createElement("div");
        handle.setAttribute("data-testid", "cdf-handle-hitbox");
        handle.style.position = "absolute";
        handle.style.width = "28px";
        handle.style.height = "24px";
        handle.style.marginLeft = "-14px";
        handle.style.borderRadius = "4px";
        handle.style.border = "2px solid #ffffff";
        handle.style.cursor = "ew-resize";
        handle.style.touchAction = "none";
        handle.style.color = "white";
        handle.style.font = "12px sans-serif";
        handle.style.textAlign = "center";
        handle.style.lineHeight = "24px";
        handle.style.userSelect = "none";
        handle.textContent = "↔";
        el.appendChild(handle);

        function plotRect() {
          const area = findPlotArea(host);
          const r = area.getBoundingClientRect();
          return { left: r.left, width: r.width, top: r.top, height: r.height };
        }

        function place() {
          const hostRect = host.getBoundingClientRect();
          const r = plotRect();
          const pct = Number(model.get("percentage")) || 0;
          const clamped = Math.max(0, Math.min(100, pct));
          handle.style.left = `${r.left - hostRect.left + (clamped / 100) * r.width}px`;
          handle.style.top = `${r.top - hostRect.top + r.height}px`;
          handle.style.background = model.get("color");
        }

        function reportWidth() {
          const w = host.getBoundingClientRect().width;
          if (Number.isFinite(w) && w !== model.get("container_width")) {
            model.set("container_width", w);
            model.save_changes();
          }
        }

        function onMove(e) {
          const r = plotRect();
          model.send({ type: "drag_move", x: e.clientX, rect: { left: r.left, width: r.width } });
        }

        function onUp() {
          detach();
          model.send({ type: "drag_end" });
          safeLog(debug(), "drag_end");
        }

        function attach() {
          window.addEventListener("pointermove", onMove);
          window.addEventListener("pointerup", onUp);
        }

        function detach() {
          window.removeEventListener("pointermove", onMove);
          window.removeEventListener("pointerup", onUp);
        }

        function onDown(e) {
          e.preventDefault();
          e.stopPropagation();
          attach();
          model.send({ type: "drag_start" });
          safeLog(debug(), "drag_start");
        }
        handle.addEventListener("pointerdown", onDown);

        const ro = new ResizeObserver(() => { place(); reportWidth(); });
        ro.observe(host);
        const mo = new MutationObserver(() => place());
        mo.observe(host, { childList: true, subtree: true });

        model.on("change:percentage", place);
        model.on("change:color", place);

        place();
        reportWidth();

        return () => {
          detach();
          try { handle.removeEventListener("pointerdown", onDown); } catch (e) {}
          try { ro.disconnect(); } catch (e) {}
          try { mo.disconnect(); } catch (e) {}
          try { model.off("change:percentage", place); } catch (e) {}
          try { model.off("change:color", place); } catch (e) {}
        };
      }
    };
    """

    def __init__(self, controller: Optional[DragController] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._controller = controller
        self._subscription: Optional[DragSubscription] = None
        self.on_msg(self._handle_custom_msg)

    def attach(self, controller: Optional[DragController]) -> None:
        """Route future drag messages to ``controller`` (``None`` detaches)."""
        self.release()
        self._controller = controller

    def release(self) -> None:
        """Drop the current drag capture, if any."""
        if self._subscription is not None:
            self._subscription.release()
            self._subscription = None
        self.dragging = False

    def _handle_custom_msg(self, _widget: Any, content: Any, _buffers: Any = None) -> None:
        if not isinstance(content, dict):
            return
        kind = content.get("type")
        controller = self._controller
        if controller is None or controller.disposed:
            return

        if kind == "drag_start":
            self._subscription = controller.start()
            self.dragging = True
        elif kind == "drag_move":
            if self._subscription is None:
                return
            rect = PlotRect.from_mapping(content.get("rect") or {})
            try:
                x = float(content.get("x"))
            except (TypeError, ValueError):
                logger.debug("Ignoring drag_move without a numeric x: %r", content)
                return
            self._subscription.move(x, rect)
        elif kind == "drag_end":
            self.release()
        else:
            logger.debug("Ignoring unknown driver message: %r", content)
