from __future__ import annotations

from collections.abc import Iterable
from typing import Callable

from matplotlib.animation import FuncAnimation
from matplotlib.artist import Artist


class Animation:
    """Thin wrapper around `matplotlib.animation.FuncAnimation`.

    The frame callback is the host refresh: it runs one simulation frame and
    returns the artists to redraw.
    """

    def __init__(
        self,
        fig,
        animate_frame: Callable[[int], Iterable[Artist]],
        *,
        interval_ms: int = 16,
    ) -> None:
        self.fig = fig
        self.animate_frame = animate_frame
        self.animation: FuncAnimation | None = FuncAnimation(
            self.fig,
            self.animate_frame,
            interval=int(interval_ms),
            blit=False,
            cache_frame_data=False,
        )

    def start(self) -> None:
        if self.animation is None:
            return
        es = getattr(self.animation, "event_source", None)
        if es is not None:
            es.start()

    def stop(self) -> None:
        if self.animation is None:
            return
        es = getattr(self.animation, "event_source", None)
        if es is not None:
            es.stop()

    def close(self) -> None:
        self.stop()
        if self.animation is not None:
            # Silences matplotlib's "animation was deleted without rendering" warning.
            setattr(self.animation, "_draw_was_started", True)
        self.animation = None
        self.animate_frame = lambda _frame_num: []
