# queuemirror/renderer.py
from typing import Callable, Dict, Optional, Sequence

from . import config
from .models import PlaybackSnapshot

Measure = Callable[[str], int]


def qt_measure(family: str = config.FONT_FAMILY, pixel_size: int = config.FONT_PIXEL_SIZE) -> Measure:
    """Pixel width of a string as the target application draws it.

    Needs a QGuiApplication; main.py creates one before the loop starts.
    """
    from PySide6.QtGui import QFont, QFontMetrics, QGuiApplication

    if QGuiApplication.instance() is None:
        raise RuntimeError("QGuiApplication must exist before measuring text")

    font = QFont(family)
    font.setPixelSize(pixel_size)
    metrics = QFontMetrics(font)
    return metrics.horizontalAdvance


def fit_width(text: str, max_width: int, measure: Measure, ellipsis: str = config.ELLIPSIS) -> str:
    if measure(text) <= max_width:
        return text

    trimmed = text
    while trimmed:
        trimmed = trimmed[:-2]
        candidate = trimmed + ellipsis
        if measure(candidate) <= max_width:
            return candidate
    return ellipsis


class TextRenderer:
    def __init__(
        self,
        measure: Measure,
        template: str = config.TEMPLATE,
        max_widths: Optional[Dict[str, int]] = None,
        reminders: Sequence[str] = config.REMINDERS,
    ):
        self.measure = measure
        self.template = template
        self.max_widths = dict(max_widths or config.FIELD_MAX_WIDTHS)
        self.reminders = tuple(reminders) or ("",)

    def reminder(self, index: int) -> str:
        return self.reminders[index % len(self.reminders)]

    def fields(self, snapshot: PlaybackSnapshot) -> Dict[str, str]:
        out = {}
        for key, value in snapshot.fields().items():
            limit = self.max_widths.get(key)
            out[key] = fit_width(value, limit, self.measure) if limit is not None else value
        return out

    def render(self, snapshot: PlaybackSnapshot, reminder_index: int = 0) -> str:
        return self.template.format(reminder=self.reminder(reminder_index), **self.fields(snapshot))
