"""Render ESC/POS documents as styled rich text for on-screen preview."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text

from kiosk_print.commands import COMMANDS, ESC, GS
from kiosk_print.config import LINE_WIDTH
from kiosk_print.layout import center

# Longest first so no code shadows another sharing its prefix.
_CONTROL_CODES = sorted(
    ((name, seq) for name, seq in COMMANDS.items() if seq.startswith((ESC, GS))),
    key=lambda pair: -len(pair[1]),
)

CUT_MARK = "✂ " + "- " * ((LINE_WIDTH - 2) // 2)


@dataclass
class _PrintState:
    bold: bool = False
    size: str = "NORMAL_TEXT"
    align: str = "ALIGN_LEFT"

    def apply(self, name: str) -> None:
        if name == "INIT":
            self.bold = False
            self.size = "NORMAL_TEXT"
            self.align = "ALIGN_LEFT"
        elif name in {"BOLD_ON", "BOLD_OFF"}:
            self.bold = name == "BOLD_ON"
        elif name in {"NORMAL_TEXT", "DOUBLE_HEIGHT", "DOUBLE_BOTH"}:
            self.size = name
        elif name.startswith("ALIGN_"):
            self.align = name

    @property
    def style(self) -> str:
        parts = []
        if self.bold or self.size != "NORMAL_TEXT":
            parts.append("bold")
        if self.size == "DOUBLE_BOTH":
            parts.append("reverse")
        elif self.size == "DOUBLE_HEIGHT":
            parts.append("underline")
        return " ".join(parts)


def _match_code(document: str, pos: int) -> tuple[str, str] | None:
    for name, seq in _CONTROL_CODES:
        if document.startswith(seq, pos):
            return (name, seq)
    return None


def _lead_for(plain: str, align: str, width: int) -> str:
    if not plain:
        return ""
    if align == "ALIGN_CENTER":
        return center(plain, width)[: -(len(plain) + 1)]
    if align == "ALIGN_RIGHT":
        return " " * max(0, width - len(plain))
    return ""


def _flush_line(text: Text, segments: list[tuple[str, str]], align: str, width: int) -> None:
    plain = "".join(chunk for chunk, _ in segments)
    text.append(_lead_for(plain, align, width))
    for chunk, style in segments:
        text.append(chunk, style=style or None)
    text.append("\n")


def document_to_text(document: str | None, width: int = LINE_WIDTH) -> Text:
    """
    Interpret a document's control codes as rich styles.

    Bold maps to bold, double height to bold underline, double width and
    height to bold reverse. Alignment is applied per line at ``width``
    columns. The paper cut shows as a dim scissor rule.
    """
    text = Text()
    if document is None:
        text.append("(nothing to print)", style="dim")
        return text

    state = _PrintState()
    segments: list[tuple[str, str]] = []
    pos = 0
    while pos < len(document):
        code = _match_code(document, pos)
        if code is not None:
            name, seq = code
            if name == "CUT":
                if segments:
                    _flush_line(text, segments, state.align, width)
                    segments = []
                text.append(CUT_MARK, style="dim")
                text.append("\n")
            else:
                state.apply(name)
            pos += len(seq)
            continue

        ch = document[pos]
        pos += 1
        if ch == "\n":
            _flush_line(text, segments, state.align, width)
            segments = []
            continue
        style = state.style
        if segments and segments[-1][1] == style:
            segments[-1] = (segments[-1][0] + ch, style)
        else:
            segments.append((ch, style))

    if segments:
        _flush_line(text, segments, state.align, width)
    return text


def document_to_plain(document: str | None, width: int = LINE_WIDTH) -> str:
    """Document text with control codes removed and alignment applied."""
    return document_to_text(document, width).plain
