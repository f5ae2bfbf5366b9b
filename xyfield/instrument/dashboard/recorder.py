from __future__ import annotations

from pathlib import Path
from typing import Optional

from matplotlib.animation import FFMpegWriter


class Recorder:
    """FFmpeg-backed video capture of the field figure."""

    def __init__(self, fig, *, dpi: Optional[int] = None) -> None:
        self.fig = fig
        self.dpi = dpi
        self.path: Optional[Path] = None
        self._writer: Optional[FFMpegWriter] = None

    @property
    def recording(self) -> bool:
        return self._writer is not None

    def start(self, path: Path, *, fps: int = 30) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._writer = FFMpegWriter(fps=int(fps), metadata={"title": "XY phase field"})
        self._writer.setup(self.fig, str(self.path), dpi=self.dpi or getattr(self.fig, "dpi", 100))

    def stop(self) -> None:
        if self._writer is None:
            return
        try:
            self._writer.finish()
        finally:
            self._writer = None

    def grab_frame(self) -> None:
        if self._writer is None:
            return
        self._writer.grab_frame(facecolor=self.fig.get_facecolor())
