"""Light/dark colour schemes for the TINY IDE, remembered between sessions."""

from __future__ import annotations

from enum import Enum

from PySide6 import QtCore, QtGui, QtWidgets

SETTINGS_KEY = "theme_mode"


class ThemeMode(Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"  # follow the platform palette


# highlighter colours per concrete mode
SYNTAX_COLORS = {
    ThemeMode.LIGHT: {
        "keyword": "#0057b7",
        "number": "#b71c1c",
        "operator": "#6a1b9a",
        "comment": "#9e9e9e",
    },
    ThemeMode.DARK: {
        "keyword": "#569cd6",
        "number": "#ce9178",
        "operator": "#c586c0",
        "comment": "#6a9955",
    },
}

# (window, window text, editor base, editor text, selection)
PALETTE_COLORS = {
    ThemeMode.LIGHT: ("#ffffff", "#000000", "#ffffff", "#000000", "#0078d4"),
    ThemeMode.DARK: ("#1e1e1e", "#e0e0e0", "#252526", "#d4d4d4", "#005a9e"),
}

_PALETTE_ROLES = (
    QtGui.QPalette.ColorRole.Window,
    QtGui.QPalette.ColorRole.WindowText,
    QtGui.QPalette.ColorRole.Base,
    QtGui.QPalette.ColorRole.Text,
    QtGui.QPalette.ColorRole.Highlight,
)


def build_palette(mode: ThemeMode) -> QtGui.QPalette:
    palette = QtGui.QPalette()
    for role, color in zip(_PALETTE_ROLES, PALETTE_COLORS[mode]):
        palette.setColor(role, QtGui.QColor(color))
    return palette


class ThemeManager:
    """Holds the chosen mode and resolves ``SYSTEM`` against the running app."""

    def __init__(self, settings: QtCore.QSettings | None = None):
        self.settings = settings or QtCore.QSettings("TinyIDE", "Tiny")
        try:
            self.mode = ThemeMode(self.settings.value(SETTINGS_KEY, ThemeMode.SYSTEM.value))
        except ValueError:
            self.mode = ThemeMode.SYSTEM

    def set_mode(self, mode: ThemeMode) -> None:
        self.mode = mode
        self.settings.setValue(SETTINGS_KEY, mode.value)

    def active_mode(self) -> ThemeMode:
        if self.mode is not ThemeMode.SYSTEM:
            return self.mode
        app = QtWidgets.QApplication.instance()
        window = QtGui.QPalette.ColorRole.Window
        if app is not None and app.palette().color(window).lightness() < 128:
            return ThemeMode.DARK
        return ThemeMode.LIGHT

    def apply(self, app: QtWidgets.QApplication) -> None:
        app.setPalette(build_palette(self.active_mode()))

    def syntax_colors(self) -> dict[str, str]:
        return dict(SYNTAX_COLORS[self.active_mode()])
