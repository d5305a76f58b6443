"""Syntax highlighting rules for the TINY language."""

from __future__ import annotations

from PySide6 import QtCore, QtGui

from tinyc.lexer import RESERVED_WORDS

# block states
IN_COMMENT = 1


class TinyHighlighter(QtGui.QSyntaxHighlighter):
    def __init__(self, parent=None, colors: dict[str, str] | None = None):
        super().__init__(parent)
        colors = colors or {}
        self.rules = []

        kw_format = QtGui.QTextCharFormat()
        kw_format.setForeground(QtGui.QColor(colors.get("keyword", "#0057b7")))
        kw_format.setFontWeight(QtGui.QFont.Bold)
        for kw, _ in RESERVED_WORDS:
            self.rules.append((QtCore.QRegularExpression(rf"\b{kw}\b"), kw_format))

        num_format = QtGui.QTextCharFormat()
        num_format.setForeground(QtGui.QColor(colors.get("number", "#b71c1c")))
        self.rules.append((QtCore.QRegularExpression(r"\b\d+\b"), num_format))

        op_format = QtGui.QTextCharFormat()
        op_format.setForeground(QtGui.QColor(colors.get("operator", "#6a1b9a")))
        self.rules.append((QtCore.QRegularExpression(r":=|[=<+\-*/();]"), op_format))

        self.comment_format = QtGui.QTextCharFormat()
        self.comment_format.setForeground(QtGui.QColor(colors.get("comment", "#9e9e9e")))

    def highlightBlock(self, text: str):
        for pattern, fmt in self.rules:
            it = pattern.globalMatch(text)
            while it.hasNext():
                match = it.next()
                self.setFormat(match.capturedStart(), match.capturedLength(), fmt)

        # { ... } comments may span lines
        self.setCurrentBlockState(0)
        start = 0 if self.previousBlockState() == IN_COMMENT else text.find("{")
        while start >= 0:
            end = text.find("}", start)
            if end < 0:
                self.setCurrentBlockState(IN_COMMENT)
                self.setFormat(start, len(text) - start, self.comment_format)
                break
            self.setFormat(start, end - start + 1, self.comment_format)
            start = text.find("{", end + 1)
