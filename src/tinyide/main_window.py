"""Main window for the TINY IDE."""

from __future__ import annotations

import io
from pathlib import Path

from PySide6 import QtCore, QtGui, QtWidgets

from tinyc.diagnostics import CompileError
from tinyc.options import TraceOptions
from tinyc.pipeline import compile_source
from tinyc.tm import TMError, run_program

from .diagnostics import DiagnosticsHelper
from .highlighter import TinyHighlighter
from .theme import ThemeManager, ThemeMode

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SAMPLES_DIR = PROJECT_ROOT / "samples"
FILE_FILTER = "TINY Files (*.tny)"


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self):
        super().__init__()
        self._current_path: Path | None = None
        self._code: str | None = None
        self.setWindowTitle("TINY IDE (PySide6)")
        self.theme_manager = ThemeManager()
        self.theme_manager.apply(QtWidgets.QApplication.instance())
        self._build_ui()
        self._setup_menu()

    def _build_ui(self):
        mono_font = QtGui.QFont("Consolas", 12)

        self.editor = QtWidgets.QPlainTextEdit()
        self.editor.setPlaceholderText("TINY code here…")
        self.editor.setFont(mono_font)
        self.highlighter = TinyHighlighter(
            self.editor.document(), self.theme_manager.syntax_colors()
        )

        self.code_view = QtWidgets.QPlainTextEdit()
        self.code_view.setReadOnly(True)
        self.code_view.setFont(mono_font)
        self.code_view.setPlaceholderText("Generated TM code will appear here…")

        self.output_tabs = QtWidgets.QTabWidget()
        self.output_tabs.setTabPosition(QtWidgets.QTabWidget.South)

        self.listing_view = QtWidgets.QPlainTextEdit()
        self.listing_view.setReadOnly(True)
        self.listing_view.setFont(mono_font)
        self.output_tabs.addTab(self.listing_view, "Listing")

        self.diagnostics_view = QtWidgets.QListWidget()
        self.diagnostics_view.itemClicked.connect(self._jump_to_diagnostic)
        self.output_tabs.addTab(self.diagnostics_view, "Diagnostics")

        self.terminal_view = QtWidgets.QPlainTextEdit()
        self.terminal_view.setReadOnly(True)
        self.terminal_view.setFont(mono_font)
        self.output_tabs.addTab(self.terminal_view, "Output")

        self.stdin_input = QtWidgets.QLineEdit()
        self.stdin_input.setPlaceholderText("Integers for 'read', separated by spaces…")
        self.trace_checkbox = QtWidgets.QCheckBox("Trace")

        open_btn = QtWidgets.QPushButton("Open…")
        open_btn.clicked.connect(self.open_file)
        save_btn = QtWidgets.QPushButton("Save As…")
        save_btn.clicked.connect(self.save_file)
        compile_btn = QtWidgets.QPushButton("Compile")
        compile_btn.clicked.connect(self.compile_only)
        run_btn = QtWidgets.QPushButton("Run")
        run_btn.clicked.connect(self.run_code)

        buttons = QtWidgets.QHBoxLayout()
        for b in [open_btn, save_btn, compile_btn, run_btn]:
            buttons.addWidget(b)
        buttons.addWidget(self.trace_checkbox)
        buttons.addWidget(QtWidgets.QLabel("Stdin:"))
        buttons.addWidget(self.stdin_input, 1)

        code_splitter = QtWidgets.QSplitter(QtCore.Qt.Horizontal)
        code_splitter.addWidget(self.editor)
        code_splitter.addWidget(self.code_view)
        code_splitter.setSizes([3, 2])

        splitter = QtWidgets.QSplitter(QtCore.Qt.Vertical)
        splitter.addWidget(code_splitter)
        splitter.addWidget(self.output_tabs)
        splitter.setSizes([3, 1])

        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)
        layout.addLayout(buttons)
        layout.addWidget(splitter)
        self.setCentralWidget(central)

    def _setup_menu(self):
        view_menu = self.menuBar().addMenu("View")
        for mode in ThemeMode:
            action = QtGui.QAction(f"{mode.value.title()} Theme", self)
            action.triggered.connect(lambda _=False, m=mode: self._set_theme(m))
            view_menu.addAction(action)

    # --- file ops ---
    def open_file(self):
        path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self, "Open TINY file", str(SAMPLES_DIR), FILE_FILTER
        )
        if not path:
            return
        self.open_path(Path(path))

    def open_path(self, path: Path):
        self._current_path = path
        self.editor.setPlainText(path.read_text(encoding="utf-8"))

    def save_file(self):
        start = self._current_path.parent if self._current_path else PROJECT_ROOT
        path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self, "Save TINY file", str(start), FILE_FILTER
        )
        if not path:
            return
        self._current_path = Path(path)
        self._current_path.write_text(self.editor.toPlainText(), encoding="utf-8")

    # --- actions ---
    def compile_only(self) -> bool:
        src = self.editor.toPlainText()
        self.listing_view.clear()
        self.diagnostics_view.clear()
        self.code_view.clear()
        self._code = None
        if not src.strip():
            self.listing_view.appendPlainText("No source to compile")
            return False

        options = TraceOptions.all() if self.trace_checkbox.isChecked() else TraceOptions()
        listing = io.StringIO()
        name = self._current_path.name if self._current_path else "untitled.tny"
        try:
            result = compile_source(src, name, options=options, listing=listing)
        except CompileError as e:
            self.listing_view.setPlainText(listing.getvalue())
            self._show_diagnostics(DiagnosticsHelper.from_exception(e))
            self.output_tabs.setCurrentWidget(self.diagnostics_view)
            return False
        self.listing_view.setPlainText(listing.getvalue())

        self._show_diagnostics(DiagnosticsHelper.from_results(result.diagnostics))
        for hint in DiagnosticsHelper.generate_hints(result.diagnostics):
            self.diagnostics_view.addItem(f"hint: {hint}")
        if not result.ok:
            self.output_tabs.setCurrentWidget(self.diagnostics_view)
            return False

        self._code = result.code
        self.code_view.setPlainText(result.code or "")
        return True

    def run_code(self):
        if not self.compile_only():
            return
        self.terminal_view.clear()
        self.output_tabs.setCurrentWidget(self.terminal_view)
        try:
            inputs = [int(w) for w in self.stdin_input.text().split()]
            outputs = run_program(self._code, inputs)
        except ValueError:
            self.terminal_view.appendPlainText("stdin must hold integers")
            return
        except TMError as e:
            self.terminal_view.appendPlainText(f"TM error: {e}")
            return
        for value in outputs:
            self.terminal_view.appendPlainText(str(value))

    def _show_diagnostics(self, entries: list[tuple[int, str]]):
        for line, message in entries:
            item = QtWidgets.QListWidgetItem(message)
            item.setData(QtCore.Qt.UserRole, line)
            self.diagnostics_view.addItem(item)

    def _jump_to_diagnostic(self, item: QtWidgets.QListWidgetItem):
        line = item.data(QtCore.Qt.UserRole)
        if not line:
            return
        block = self.editor.document().findBlockByLineNumber(int(line) - 1)
        cursor = QtGui.QTextCursor(block)
        self.editor.setTextCursor(cursor)
        self.editor.setFocus()

    def _set_theme(self, mode: ThemeMode):
        self.theme_manager.set_mode(mode)
        self.theme_manager.apply(QtWidgets.QApplication.instance())
        self.highlighter.setDocument(None)
        self.highlighter = TinyHighlighter(
            self.editor.document(), self.theme_manager.syntax_colors()
        )
