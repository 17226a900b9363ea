"""Textual app to preview an order's documents and send them to the printer."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from functools import partial
from pathlib import Path
from typing import Any, Callable

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.reactive import reactive
from textual.timer import Timer
from textual.widgets import Header, Static

from kiosk_print.config import DEBUG_LOG_ENV, DEBUG_LOG_PATH
from kiosk_print.data import DEFAULT_VENUE
from kiosk_print.documents import build_documents
from kiosk_print.models import PrintRequest, VenueConfig
from kiosk_print.printer import BillPrintError, DispatchHandles, PrintBridge, detect_bridge, dispatch_all
from kiosk_print.rendering import document_to_text

DOCUMENT_LABELS: dict[str, str] = {
    "bill": "Bill",
    "food_ticket": "Food KOT",
    "coffee_ticket": "Coffee KOT",
}


class AppTimerHandle:
    """Cancellable handle over a Textual timer."""

    def __init__(self, timer: Timer) -> None:
        self._timer = timer
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.stop()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class AppTimerScheduler:
    """Schedule deferred sends on the app's event loop."""

    def __init__(self, app: App) -> None:
        self._app = app

    def call_later(self, delay_s: float, fn: Callable[..., Any], *args: Any) -> AppTimerHandle:
        return AppTimerHandle(self._app.set_timer(delay_s, partial(fn, *args)))


class PreviewApp(App):
    """Preview the bill and tickets for one order; print them when a bridge is present."""

    TITLE = "Kiosk Print"
    SUB_TITLE = "Bill / Food KOT / Coffee KOT"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #documents-pane {
        width: 1fr;
        border: round $secondary;
        padding: 1;
    }

    #preview-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #status-bar {
        border: heavy $secondary;
        padding: 0 1;
        height: 4;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    ENABLE_COMMAND_PALETTE = False

    current = reactive("bill")

    BINDINGS = [
        ("b", "show('bill')", "Bill"),
        ("f", "show('food_ticket')", "Food KOT"),
        ("c", "show('coffee_ticket')", "Coffee KOT"),
        Binding("ctrl+s", "print_all", "Print all", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        request: PrintRequest,
        venue: VenueConfig = DEFAULT_VENUE,
        bridge: PrintBridge | None = None,
        printed_at: datetime | None = None,
    ) -> None:
        super().__init__()
        self.request = request
        self.venue = venue
        self.bridge = bridge
        self.printed_at = printed_at or datetime.now()
        self.batch = build_documents(request.order, request.order_type, venue, self.printed_at)
        self.handles: DispatchHandles | None = None
        self.system_status = ""
        self._debug_log_path = Path(os.environ.get(DEBUG_LOG_ENV, DEBUG_LOG_PATH))
        self._log_debug(f"app_init order_id={request.order.order_id}")

    def _log_debug(self, message: str) -> None:
        try:
            ts = datetime.now(timezone.utc).isoformat()
            self._debug_log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._debug_log_path.open("a", encoding="utf-8") as fh:
                fh.write(f"{ts} {message}\n")
        except OSError:
            # Logging must never interfere with app flow.
            return

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="documents-pane"):
                yield Static("Documents", classes="pane-title")
                yield Static(id="document-list")
            with VerticalScroll(id="preview-pane"):
                yield Static(id="preview")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        if detect_bridge(self.bridge):
            self.system_status = "Printer ready. Ctrl+S to print all."
        else:
            self.system_status = "No print bridge - preview only."
        self._log_debug(f"on_mount bridge={detect_bridge(self.bridge)}")
        self._refresh_all()

    def watch_current(self, _old: str, _new: str) -> None:
        self._refresh_all()

    def action_show(self, name: str) -> None:
        if name in DOCUMENT_LABELS:
            self.current = name

    def action_print_all(self) -> None:
        bridge = self.bridge
        self._log_debug(f"print_all bridge={detect_bridge(bridge)}")
        if bridge is None or not detect_bridge(bridge):
            self.system_status = "No print bridge - cannot print."
            self._refresh_status()
            return

        order = self.request.order
        try:
            self.handles = dispatch_all(
                bridge,
                order,
                self.request.order_type,
                self.request.transaction_details,
                scheduler=AppTimerScheduler(self),
                venue=self.venue,
                printed_at=self.printed_at,
            )
        except BillPrintError as exc:
            self.handles = exc.handles
            self.system_status = f"Bill print failed: {exc.__cause__}"
            self._refresh_status()
            self._log_debug(f"print_failed order_id={order.order_id} error={exc.__cause__!r}")
            return

        self.system_status = f"Sent to printer: {order.order_id}"
        self._refresh_status()
        self._log_debug(f"print_sent order_id={order.order_id}")

    def document(self, name: str) -> str | None:
        return getattr(self.batch, name)

    def _refresh_all(self) -> None:
        self._refresh_document_list()
        self._refresh_preview()
        self._refresh_status()

    def _refresh_document_list(self) -> None:
        lines = Text()
        for idx, (name, label) in enumerate(DOCUMENT_LABELS.items()):
            if idx > 0:
                lines.append("\n")
            pointer = "➤ " if name == self.current else "  "
            lines.append(f"{pointer}{label}")
            if self.document(name) is None:
                lines.append(" (skipped)", style="dim")
        self.query_one("#document-list", Static).update(lines)

    def _refresh_preview(self) -> None:
        self.query_one("#preview", Static).update(document_to_text(self.document(self.current)))

    def _refresh_status(self) -> None:
        hint = "B / F / C switch document. Ctrl+S print all. Ctrl+Q quit."
        self.query_one("#status-bar", Static).update(f"{hint}\n{self.system_status or 'Ready'}")
