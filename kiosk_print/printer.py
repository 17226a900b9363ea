"""Print bridge integration and the three-document dispatch sequence."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Protocol

from kiosk_print.config import (
    COFFEE_TICKET_DELAY_S,
    FOOD_TICKET_DELAY_S,
    PRINT_CHANNEL,
    PRINT_SECONDARY_PARAM,
    PRINTER_ENCODING,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    USB_PRODUCT_ID_ENV,
    USB_VENDOR_ID_ENV,
)
from kiosk_print.data import DEFAULT_VENUE
from kiosk_print.documents import build_bill, build_coffee_ticket, build_food_ticket
from kiosk_print.models import Order, VenueConfig
from kiosk_print.scheduling import Scheduler, TaskHandle, ThreadingScheduler

logger = logging.getLogger(__name__)


class PrintBridge(Protocol):
    """Host integration point that forwards a document to the printer."""

    def print_bill(self, channel: str, secondary: str, payload: str) -> None: ...


def detect_bridge(host: object | None) -> bool:
    """Return True iff ``host`` exposes a callable ``print_bill``. Never raises."""
    if host is None:
        return False
    try:
        return callable(getattr(host, "print_bill", None))
    except Exception:
        return False


def check_printer_dependencies() -> tuple[bool, str]:
    """Check whether printer dependencies are importable."""
    try:
        from escpos.printer import Usb  # noqa: F401
    except Exception as exc:
        return (False, f"Printer deps unavailable: {exc}")
    return (True, "Printer ready")


class EscposBridge:
    """
    Print bridge backed by a python-escpos printer.

    Documents already carry their own control codes, so the payload is sent
    raw, without going through python-escpos text encoding.
    """

    def __init__(self, printer_factory: Callable[[], Any], encoding: str = PRINTER_ENCODING) -> None:
        self._printer_factory = printer_factory
        self.encoding = encoding
        self._printer: Any = None
        self._lock = threading.Lock()

    @property
    def printer(self) -> Any:
        if self._printer is None:
            self._printer = self._printer_factory()
        return self._printer

    def connect(self) -> bool:
        """Open the printer now; False if it cannot be reached."""
        try:
            printer = self.printer
        except Exception as exc:
            logger.warning("Printer unavailable: %s", exc)
            return False
        return printer is not None

    def print_bill(self, channel: str, secondary: str, payload: str) -> None:
        if channel != PRINT_CHANNEL:
            raise ValueError(f"Unsupported print channel {channel!r}")
        with self._lock:
            self.printer._raw(payload.encode(self.encoding))

    def close(self) -> None:
        if self._printer is not None:
            self._printer.close()
            self._printer = None


def _usb_id_from_env(env_name: str, default: int) -> int:
    raw = os.environ.get(env_name, "").strip()
    if not raw:
        return default
    try:
        return int(raw, 0)
    except ValueError as exc:
        raise ValueError(f"{env_name} must be an integer (e.g. 0x28E9), got {raw!r}") from exc


def usb_bridge(vendor_id: int | None = None, product_id: int | None = None) -> EscposBridge:
    """Bridge to the USB thermal printer. IDs default to KIOSK_PRINT_USB_* or config."""
    if vendor_id is None:
        vendor_id = _usb_id_from_env(USB_VENDOR_ID_ENV, PRINTER_USB_VENDOR_ID)
    if product_id is None:
        product_id = _usb_id_from_env(USB_PRODUCT_ID_ENV, PRINTER_USB_PRODUCT_ID)

    def open_printer() -> Any:
        try:
            from escpos.printer import Usb
        except Exception as exc:
            raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc
        printer = Usb(vendor_id, product_id)
        printer.open()
        return printer

    return EscposBridge(open_printer)


def dummy_bridge() -> EscposBridge:
    """Bridge that collects output in memory (``bridge.printer.output``)."""

    def open_printer() -> Any:
        from escpos.printer import Dummy

        return Dummy()

    return EscposBridge(open_printer)


def dispatch_document(bridge: PrintBridge, document: str) -> None:
    """Send one built document to the bridge. Fire-and-forget."""
    bridge.print_bill(PRINT_CHANNEL, PRINT_SECONDARY_PARAM, document)


def print_bill(
    bridge: PrintBridge,
    order: Order,
    order_type: str | None = None,
    venue: VenueConfig = DEFAULT_VENUE,
    printed_at: datetime | None = None,
) -> None:
    """Build and send the customer bill."""
    document = build_bill(order, order_type, venue, printed_at)
    logger.info("Sending bill for order %s to printer", order.order_id)
    dispatch_document(bridge, document)


def print_food_ticket(
    bridge: PrintBridge,
    order: Order,
    venue: VenueConfig = DEFAULT_VENUE,
    printed_at: datetime | None = None,
) -> bool:
    """Build and send the food ticket. Returns False if skipped (no food items)."""
    document = build_food_ticket(order, venue, printed_at)
    if document is None:
        logger.info("No food items - food ticket skipped for order %s", order.order_id)
        return False
    logger.info("Sending food ticket for order %s to printer", order.order_id)
    dispatch_document(bridge, document)
    return True


def print_coffee_ticket(
    bridge: PrintBridge,
    order: Order,
    venue: VenueConfig = DEFAULT_VENUE,
    printed_at: datetime | None = None,
) -> bool:
    """Build and send the coffee ticket. Returns False if skipped (no coffee items)."""
    document = build_coffee_ticket(order, venue, printed_at)
    if document is None:
        logger.info("No coffee items - coffee ticket skipped for order %s", order.order_id)
        return False
    logger.info("Sending coffee ticket for order %s to printer", order.order_id)
    dispatch_document(bridge, document)
    return True


def _run_deferred(label: str, fn: Callable[..., bool], *args: Any) -> None:
    # Runs on a timer thread; nobody is waiting on the result.
    try:
        fn(*args)
    except Exception:
        logger.exception("Deferred %s print failed", label)


@dataclass(frozen=True)
class DispatchHandles:
    """Handles for the two deferred ticket sends of one dispatch."""

    food_ticket: TaskHandle
    coffee_ticket: TaskHandle

    def cancel(self) -> None:
        self.food_ticket.cancel()
        self.coffee_ticket.cancel()

    def join(self, timeout: float | None = None) -> None:
        """Wait for both sends when the scheduler's handles support it."""
        for handle in (self.food_ticket, self.coffee_ticket):
            join = getattr(handle, "join", None)
            if join is not None:
                join(timeout)


class BillPrintError(RuntimeError):
    """The bill send failed after the ticket sends were scheduled."""

    def __init__(self, message: str, handles: DispatchHandles) -> None:
        super().__init__(message)
        self.handles = handles


def dispatch_all(
    bridge: PrintBridge,
    order: Order,
    order_type: str | None = None,
    transaction_details: dict[str, object] | None = None,
    scheduler: Scheduler | None = None,
    venue: VenueConfig = DEFAULT_VENUE,
    printed_at: datetime | None = None,
) -> DispatchHandles:
    """
    Print the bill now and the food and coffee tickets after fixed delays.

    Both delays count from this call, not from the previous send. The ticket
    sends are scheduled before the bill goes out, so a failing bill send still
    leaves them in place: it raises ``BillPrintError`` carrying their handles.
    Tickets with nothing to print are skipped when they fire.

    ``transaction_details`` is accepted for call-site compatibility and is not
    printed.
    """
    scheduler = scheduler or ThreadingScheduler()
    logger.info("Print bridge detected - starting print for order %s", order.order_id)

    handles = DispatchHandles(
        food_ticket=scheduler.call_later(
            FOOD_TICKET_DELAY_S, _run_deferred, "food ticket", print_food_ticket, bridge, order, venue, printed_at
        ),
        coffee_ticket=scheduler.call_later(
            COFFEE_TICKET_DELAY_S,
            _run_deferred,
            "coffee ticket",
            print_coffee_ticket,
            bridge,
            order,
            venue,
            printed_at,
        ),
    )
    try:
        print_bill(bridge, order, order_type, venue, printed_at)
    except Exception as exc:
        raise BillPrintError(f"Bill print failed for order {order.order_id}: {exc}", handles) from exc
    return handles
