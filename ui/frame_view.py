from __future__ import annotations
from typing import Sequence

import cv2
import numpy as np

from PySide6.QtWidgets import QWidget
from PySide6.QtGui import QPainter, QPen, QImage, QFont, QFontMetricsF, QColor
from PySide6.QtCore import Qt, QRectF, QPointF

from session.frame_generator import FrameRecord
from session.overlay import label_anchor, matched_centroid, star_box, star_labels
from session.star_index import UNMATCHED


HUD_MARGIN = 6


class FrameView(QWidget):
    """
    Frame view with overlays:
    - frame scaled to the widget
    - box per detected star (green identified / red not)
    - cyan line from the identified-star centroid to every identified star
    - catalog label next to identified stars
    - attitude HUD in the top-left corner
    """
    def __init__(self, width: int, height: int):
        super().__init__()
        self.setFixedSize(width, height)

        self.image: QImage | None = None
        self._rgb: np.ndarray | None = None

        self.record: FrameRecord | None = None
        self.star_index = np.empty(0, dtype=int)
        self.star_names: Sequence[str] = ()
        self.hud_text = ""

        self._scale = 1.0
        self._offset = QPointF(0, 0)

    # ─────────────────────────────────────────────
    def set_frame(self, frame: np.ndarray | None, record: FrameRecord | None, star_index: np.ndarray):
        if frame is None:
            self.image = None
            self._rgb = None
        else:
            rgb = cv2.cvtColor(frame, cv2.COLOR_GRAY2RGB) if frame.ndim == 2 else frame
            # QImage does not own the buffer; keep it alive
            self._rgb = np.ascontiguousarray(rgb)
            h, w, _ = self._rgb.shape
            self.image = QImage(self._rgb.data, w, h, 3 * w, QImage.Format_RGB888)

        self.record = record
        self.star_index = star_index
        self.update()

    def set_star_names(self, names: Sequence[str]):
        self.star_names = names

    def set_hud_text(self, text: str):
        self.hud_text = text
        self.update()

    # ─────────────────────────────────────────────
    def _to_widget(self, x: float, y: float) -> QPointF:
        return QPointF(self._offset.x() + x * self._scale, self._offset.y() + y * self._scale)

    def paintEvent(self, event):
        p = QPainter(self)
        p.setRenderHint(QPainter.Antialiasing)

        w = self.width()
        h = self.height()

        # ── Background ───────────────────────────
        p.fillRect(self.rect(), Qt.black)

        # ── Scaled frame ─────────────────────────
        if self.image:
            img_w = self.image.width()
            img_h = self.image.height()

            scale = min(w / img_w, h / img_h)
            draw_w = img_w * scale
            draw_h = img_h * scale

            x0 = (w - draw_w) / 2
            y0 = (h - draw_h) / 2

            target = QRectF(x0, y0, draw_w, draw_h)
            source = QRectF(0, 0, img_w, img_h)
            p.drawImage(target, self.image, source)

            # transform used by the overlays
            self._scale = scale
            self._offset = QPointF(x0, y0)
        else:
            self._scale = 1.0
            self._offset = QPointF(0, 0)

        if self.record is not None:
            self._paint_stars(p)

        self._paint_hud(p)
        p.end()

    def _paint_stars(self, p: QPainter):
        stars = self.record.stars
        center = matched_centroid(stars, self.star_index)

        for star, catalog_index in zip(stars, self.star_index):
            matched = catalog_index != UNMATCHED

            # ── Box ──────────────────────────────
            bx, by, bw, bh = star_box(star)
            top_left = self._to_widget(bx, by)
            pen = QPen(Qt.green if matched else Qt.red)
            pen.setWidth(1)
            p.setPen(pen)
            p.setBrush(Qt.NoBrush)
            p.drawRect(QRectF(top_left.x(), top_left.y(), bw * self._scale, bh * self._scale))

            # ── Line from the identified centroid ─
            if matched and center is not None:
                p.setPen(QPen(Qt.cyan))
                p.drawLine(self._to_widget(*center), self._to_widget(star.x, star.y))

        # ── Catalog labels ───────────────────────
        font = QFont()
        font.setPointSize(12)
        p.setFont(font)
        metrics = QFontMetricsF(font)
        p.setPen(QPen(Qt.white))

        for star, text in star_labels(stars, self.star_index, self.star_names):
            anchor = self._to_widget(*label_anchor(star))
            # right-aligned on the anchor
            p.drawText(QPointF(anchor.x() - metrics.horizontalAdvance(text), anchor.y() + metrics.ascent()), text)

    def _paint_hud(self, p: QPainter):
        if not self.hud_text:
            return

        font = QFont()
        font.setPointSize(16)
        p.setFont(font)
        p.setPen(QPen(QColor(0, 255, 0)))

        metrics = QFontMetricsF(font)
        p.drawText(QPointF(HUD_MARGIN, HUD_MARGIN + metrics.ascent()), self.hud_text)
