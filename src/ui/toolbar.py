"""
Gesture menu widget: tool buttons, color swatches and brush sizes.
Selection happens in the interaction core; this widget only shows state
and reports where its elements are.
"""
from typing import Dict, Optional
from PyQt5.QtWidgets import QFrame, QHBoxLayout, QLabel, QVBoxLayout, QWidget
from PyQt5.QtCore import QPoint, QTimer, Qt

from airdraw.menu import COLOR_PREFIX, COLORS, SIZE_PREFIX, SIZES, Rect
from airdraw.strokes import ToolSettings, ToolType

PULSE_MS = 150

TOOLBAR_STYLE = """
#Toolbar {
    background-color: rgba(17, 24, 39, 230);
    border: 1px solid #374151;
    border-radius: 16px;
}
#ToolbarTitle {
    color: white;
    font-size: 18px;
    font-weight: bold;
}
#ToolbarHint {
    color: #9ca3af;
    font-size: 11px;
}
#ToolbarRow {
    background-color: #1f2937;
    border-radius: 8px;
}
MenuElement[kind="tool"] {
    background-color: #374151;
    color: #d1d5db;
    font-weight: bold;
    border-radius: 8px;
    padding: 14px;
}
MenuElement[kind="tool"][active="true"] {
    background-color: #2563eb;
    color: white;
    border: 2px solid white;
}
MenuElement[kind="tool"][variant="eraser"][active="true"] {
    background-color: #dc2626;
}
MenuElement[kind="color"][active="true"] {
    border: 2px solid white;
}
MenuElement[kind="size"] {
    background-color: #9ca3af;
}
MenuElement[kind="size"][active="true"] {
    background-color: #60a5fa;
}
MenuElement[active="false"][hovered="true"],
MenuElement[active="true"][hovered="true"] {
    border: 2px solid #00ffff;
}
MenuElement[active="false"][pressed="true"],
MenuElement[active="true"][pressed="true"] {
    border: 3px solid white;
}
"""


class MenuElement(QLabel):
    """One selectable menu element, identified by its element id."""

    def __init__(self, element_id: str, kind: str, text: str = "", variant: str = "", parent=None):
        super().__init__(text, parent)
        self.element_id = element_id
        self.setObjectName(element_id)
        self.setAlignment(Qt.AlignCenter)
        self.setProperty("kind", kind)
        self.setProperty("variant", variant)
        self._flags = {"active": False, "hovered": False, "pressed": False}
        self._update_style()

    def set_flag(self, name: str, value: bool):
        if self._flags[name] != value:
            self._flags[name] = value
            self._update_style()

    def _update_style(self):
        for name, value in self._flags.items():
            self.setProperty(name, "true" if value else "false")
        # Force style refresh
        self.style().unpolish(self)
        self.style().polish(self)


class Toolbar(QFrame):
    """
    Centered gesture menu.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("Toolbar")
        self.setAttribute(Qt.WA_TransparentForMouseEvents)
        self.setStyleSheet(TOOLBAR_STYLE)
        self._elements: Dict[str, MenuElement] = {}
        self._hovered: Optional[str] = None
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(20)

        title = QLabel("Gesture Menu")
        title.setObjectName("ToolbarTitle")
        title.setAlignment(Qt.AlignCenter)
        layout.addWidget(title)

        # Tools
        tools_row = QHBoxLayout()
        tools_row.setSpacing(16)
        for element_id, label, variant in (("btn-pen", "PEN", "pen"), ("btn-eraser", "ERASER", "eraser")):
            tools_row.addWidget(self._add_element(element_id, "tool", label, variant))
        layout.addLayout(tools_row)

        # Colors
        colors_row = self._make_row()
        for i, color in enumerate(COLORS):
            swatch = self._add_element(f"{COLOR_PREFIX}{i}", "color")
            swatch.setFixedSize(36, 36)
            swatch.setStyleSheet(f"background-color: {color}; border-radius: 18px;")
            colors_row.layout().addWidget(swatch)
        layout.addWidget(colors_row)

        # Sizes
        sizes_row = self._make_row()
        for i, size in enumerate(SIZES):
            diameter = size * 2 + 4
            dot = self._add_element(f"{SIZE_PREFIX}{i}", "size")
            dot.setFixedSize(diameter, diameter)
            dot.setStyleSheet(f"border-radius: {diameter // 2}px;")
            sizes_row.layout().addWidget(dot, alignment=Qt.AlignCenter)
        layout.addWidget(sizes_row)

        hint = QLabel("Hover with index finger to select.\nShow open palm to close.")
        hint.setObjectName("ToolbarHint")
        hint.setAlignment(Qt.AlignCenter)
        layout.addWidget(hint)

        self.setFixedWidth(340)
        self.adjustSize()

    def _make_row(self) -> QWidget:
        row = QWidget()
        row.setObjectName("ToolbarRow")
        row.setAttribute(Qt.WA_StyledBackground)
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(12, 12, 12, 12)
        row_layout.setSpacing(12)
        return row

    def _add_element(self, element_id: str, kind: str, text: str = "", variant: str = "") -> MenuElement:
        element = MenuElement(element_id, kind, text, variant)
        self._elements[element_id] = element
        return element

    def set_tools(self, tools: ToolSettings):
        """Highlight the active tool, color and size."""
        self._elements["btn-pen"].set_flag("active", tools.tool == ToolType.PEN)
        self._elements["btn-eraser"].set_flag("active", tools.tool == ToolType.ERASER)
        for i, color in enumerate(COLORS):
            self._elements[f"{COLOR_PREFIX}{i}"].set_flag("active", color == tools.color)
        for i, size in enumerate(SIZES):
            self._elements[f"{SIZE_PREFIX}{i}"].set_flag("active", size == tools.size)

    def set_hovered(self, element_id: Optional[str]):
        if element_id == self._hovered:
            return
        if self._hovered in self._elements:
            self._elements[self._hovered].set_flag("hovered", False)
        if element_id in self._elements:
            self._elements[element_id].set_flag("hovered", True)
        self._hovered = element_id

    def pulse(self, element_id: str):
        """Brief press feedback after a dwell selection."""
        element = self._elements.get(element_id)
        if element is None:
            return
        element.set_flag("pressed", True)
        QTimer.singleShot(PULSE_MS, lambda: element.set_flag("pressed", False))

    def element_rects(self, relative_to: QWidget) -> Dict[str, Rect]:
        """
        Snapshot of element rectangles in the coordinates of `relative_to`.
        Empty while the menu is hidden.
        """
        if not self.isVisible():
            return {}
        rects = {}
        for element_id, element in self._elements.items():
            top_left = element.mapTo(relative_to, QPoint(0, 0))
            rects[element_id] = Rect(
                float(top_left.x()),
                float(top_left.y()),
                float(top_left.x() + element.width()),
                float(top_left.y() + element.height()),
            )
        return rects
