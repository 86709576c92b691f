"""
Canvas window - full screen camera view with drawing, particles and cursor.
"""
from typing import Optional, Sequence
from PyQt5.QtWidgets import QApplication, QLabel, QMainWindow, QWidget
from PyQt5.QtCore import QPointF, QRectF, Qt, QTimer, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QImage, QPainter, QPainterPath, QPen
import numpy as np

from airdraw.geometry import Point
from airdraw.state_machine import EventType, Mode, RenderState
from .toolbar import Toolbar

ERASER_COLOR = QColor(255, 255, 255, 102)
HINT_TEXT = "Gesture Controls    ✋ Open Palm: Menu    👌 Pinch: Draw    ✌️ Victory: Clear"


def debug_readout(state: RenderState) -> str:
    """One-line interaction summary drawn next to the cursor in debug mode."""
    return f"{state.mode.name}  pinch {state.pinch_ratio:.2f}  dwell {state.dwell_progress:.0%}"


def _stroke_path(points: Sequence[Point]) -> QPainterPath:
    """Quadratic curve through the midpoints of consecutive points."""
    path = QPainterPath(QPointF(points[0].x, points[0].y))
    if len(points) == 2:
        path.lineTo(points[1].x, points[1].y)
        return path

    for p1, p2 in zip(points[1:-1], points[2:]):
        path.quadTo(p1.x, p1.y, (p1.x + p2.x) / 2, (p1.y + p2.y) / 2)
    last = points[-1]
    path.lineTo(last.x, last.y)
    return path


class DrawingCanvas(QWidget):
    """Paints camera feed, strokes, particles and the mode cursor."""

    def __init__(self, debug: bool = False, parent=None):
        super().__init__(parent)
        self.setAttribute(Qt.WA_OpaquePaintEvent)
        self._debug = debug
        self._state: Optional[RenderState] = None
        self._image: Optional[QImage] = None

    def set_state(self, state: RenderState):
        self._state = state
        self.update()

    def set_image(self, image: Optional[QImage]):
        self._image = image

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        painter.fillRect(self.rect(), Qt.black)
        if self._image is not None:
            painter.drawImage(QRectF(self.rect()), self._image)

        state = self._state
        if state is None:
            return

        for path in state.paths:
            if path.is_eraser:
                self._draw_stroke(painter, path.points, ERASER_COLOR, path.width * 2)
            else:
                self._draw_stroke(painter, path.points, QColor(path.color), path.width)

        if state.current_stroke:
            tools = state.tools
            if tools.is_eraser:
                self._draw_stroke(painter, state.current_stroke, ERASER_COLOR, tools.size * 2)
            else:
                self._draw_stroke(painter, state.current_stroke, QColor(tools.color), tools.size)

        painter.setPen(Qt.NoPen)
        for p in state.particles:
            painter.setOpacity(max(0.0, min(1.0, p.life)))
            painter.setBrush(QColor(p.color))
            painter.drawEllipse(QPointF(p.x, p.y), p.size, p.size)
        painter.setOpacity(1.0)

        self._draw_cursor(painter, state)

        if self._debug and state.cursor is not None:
            painter.setPen(QColor("#ffffff"))
            painter.drawText(QPointF(state.cursor.x + 20, state.cursor.y - 20), debug_readout(state))

    def _draw_stroke(self, painter: QPainter, points: Sequence[Point], color: QColor, width: float):
        if len(points) < 2:
            return
        pen = QPen(color, width)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawPath(_stroke_path(points))

    def _draw_cursor(self, painter: QPainter, state: RenderState):
        if state.mode == Mode.IDLE or state.cursor is None:
            return
        center = QPointF(state.cursor.x, state.cursor.y)

        if state.mode == Mode.MENU:
            # Ring plus dwell progress arc
            painter.setBrush(Qt.NoBrush)
            painter.setPen(QPen(QColor("#ffffff"), 2))
            painter.drawEllipse(center, 15, 15)
            if state.dwell_progress > 0:
                painter.setPen(QPen(QColor("#00FFFF"), 4))
                arc_rect = QRectF(center.x() - 15, center.y() - 15, 30, 30)
                # Qt angles are 1/16 degree, counter-clockwise from 3 o'clock
                painter.drawArc(arc_rect, 90 * 16, -int(state.dwell_progress * 360 * 16))

        elif state.mode == Mode.HOVER:
            painter.setBrush(Qt.NoBrush)
            painter.setPen(QPen(QColor(255, 255, 255, 153), 2))
            painter.drawEllipse(center, 10, 10)
            painter.setPen(Qt.NoPen)
            painter.setBrush(QColor(255, 255, 255, 204))
            painter.drawEllipse(center, 2, 2)

        elif state.mode == Mode.DRAWING:
            tools = state.tools
            radius = tools.size / 2
            painter.setPen(Qt.NoPen)
            painter.setBrush(QColor("#FFFFFF") if tools.is_eraser else QColor(tools.color))
            painter.drawEllipse(center, radius, radius)
            painter.setBrush(QBrush(Qt.NoBrush))
            painter.setPen(QPen(QColor(255, 255, 255, 128), 1))
            painter.drawEllipse(center, radius + 5, radius + 5)


class CanvasWindow(QMainWindow):
    """
    Main window: drawing canvas with the gesture menu centered on top.
    """

    # width, height, {element id -> Rect}
    layout_changed = pyqtSignal(float, float, object)

    def __init__(self, fullscreen: bool = True, debug: bool = False, parent=None):
        super().__init__(parent)
        self.setWindowTitle("AirDraw")
        self.setCursor(Qt.BlankCursor)
        self._fullscreen = fullscreen
        self._menu_open = False

        self.canvas = DrawingCanvas(debug=debug)
        self.setCentralWidget(self.canvas)

        self.toolbar = Toolbar(self.canvas)
        self.toolbar.hide()

        self.hint_label = QLabel(HINT_TEXT, self.canvas)
        self.hint_label.setAlignment(Qt.AlignCenter)
        self.hint_label.setStyleSheet(
            "color: rgba(255, 255, 255, 180); background-color: rgba(0, 0, 0, 128);"
            "border-radius: 12px; padding: 10px; font-size: 12px;"
        )
        self.hint_label.adjustSize()

        if not fullscreen:
            self.resize(1280, 720)

    def show(self):
        if self._fullscreen:
            self.showFullScreen()
        else:
            super().show()
        QTimer.singleShot(0, self._publish_layout)

    def resizeEvent(self, event):
        """Re-center overlays and republish hit rects."""
        super().resizeEvent(event)
        self._position_overlays()
        self._publish_layout()

    def _position_overlays(self):
        w, h = self.canvas.width(), self.canvas.height()
        self.toolbar.move((w - self.toolbar.width()) // 2, (h - self.toolbar.height()) // 2)
        self.hint_label.move((w - self.hint_label.width()) // 2, h - self.hint_label.height() - 24)

    def _publish_layout(self):
        rects = self.toolbar.element_rects(self.canvas)
        self.layout_changed.emit(float(self.canvas.width()), float(self.canvas.height()), rects)

    def set_render_state(self, state: RenderState):
        """Apply a snapshot from the worker."""
        if state.menu_open != self._menu_open:
            self._menu_open = state.menu_open
            self.toolbar.setVisible(state.menu_open)
            self._position_overlays()
            # Geometry is only valid once the toolbar has been laid out
            QTimer.singleShot(0, self._publish_layout)

        self.toolbar.set_tools(state.tools)
        self.toolbar.set_hovered(state.hovered_id)
        for event in state.events:
            if event.type == EventType.SELECTED and event.element_id:
                self.toolbar.pulse(event.element_id)

        self.canvas.set_state(state)

    def set_webcam_frame(self, frame: np.ndarray):
        """
        Update the camera background.

        Args:
            frame: BGR numpy array (already mirrored by HandTracker)
        """
        if frame is None:
            self.canvas.set_image(None)
            return

        rgb = np.ascontiguousarray(frame[:, :, ::-1])
        h, w, ch = rgb.shape
        bytes_per_line = ch * w
        # copy() detaches the image from the numpy buffer
        qimg = QImage(rgb.data, w, h, bytes_per_line, QImage.Format_RGB888).copy()
        self.canvas.set_image(qimg)

    def keyPressEvent(self, event):
        if event.key() in (Qt.Key_Escape, Qt.Key_Q):
            QApplication.instance().quit()
        else:
            super().keyPressEvent(event)
