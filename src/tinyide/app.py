"""PySide6 GUI for the TINY language."""

from __future__ import annotations

import sys
from pathlib import Path

from PySide6 import QtWidgets

from .main_window import MainWindow


def main() -> int:
    app = QtWidgets.QApplication(sys.argv)
    window = MainWindow()
    if len(sys.argv) > 1:
        window.open_path(Path(sys.argv[1]))
    window.resize(1000, 700)
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
