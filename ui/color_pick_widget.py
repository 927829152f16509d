from __future__ import annotations
from typing import Callable, Optional

from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QWidget, QHBoxLayout, QPushButton, QLabel, QColorDialog
)

from core.state import RGBAColor


class ColorPickRow(QWidget):
    """
    Swatch + label for one picked color, with an eyedropper toggle and a
    color-dialog fallback. The owner stores the color; this widget only
    displays it and forwards requests.
    """
    def __init__(
        self,
        title: str,
        on_eyedropper_toggled: Callable[[bool], None],
        on_color_chosen: Callable[[RGBAColor], None],
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self._title = title
        self._on_color_chosen = on_color_chosen

        self.swatch = QLabel()
        self.swatch.setFixedSize(28, 20)
        self.label = QLabel()
        self.label.setMinimumWidth(120)

        self.eyedropper_btn = QPushButton("Pick")
        self.eyedropper_btn.setCheckable(True)
        self.eyedropper_btn.toggled.connect(on_eyedropper_toggled)

        dialog_btn = QPushButton("…")
        dialog_btn.setFixedWidth(28)
        dialog_btn.clicked.connect(self._choose_color_dialog)

        lay = QHBoxLayout()
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.swatch)
        lay.addWidget(self.label, 1)
        lay.addWidget(self.eyedropper_btn)
        lay.addWidget(dialog_btn)
        self.setLayout(lay)
        self.set_color(None)

    def _choose_color_dialog(self) -> None:
        col = QColorDialog.getColor(QColor(0, 255, 0), self, f"Select {self._title}")
        if not col.isValid():
            return
        self._on_color_chosen(RGBAColor(r=col.red(), g=col.green(), b=col.blue(), a=1.0))

    def set_color(self, color: Optional[RGBAColor]) -> None:
        if color is None:
            self.swatch.setStyleSheet("background: transparent; border: 1px dashed #888;")
            self.label.setText("No color picked")
            return
        self.swatch.setStyleSheet(f"background: {color.hex()}; border: 1px solid #ccc;")
        self.label.setText(self._fmt(color))

    def set_picking(self, on: bool) -> None:
        self.eyedropper_btn.blockSignals(True)
        self.eyedropper_btn.setChecked(on)
        self.eyedropper_btn.blockSignals(False)

    @staticmethod
    def _fmt(color: RGBAColor) -> str:
        return f"RGB({color.r},{color.g},{color.b})  {color.hex()}"
