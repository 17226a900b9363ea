"""ESC/POS document builders for the bill, food ticket and coffee ticket."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext

from kiosk_print.commands import (
    ALIGN_CENTER,
    ALIGN_LEFT,
    BOLD_OFF,
    BOLD_ON,
    CUT,
    DOUBLE_BOTH,
    DOUBLE_HEIGHT,
    FEED3,
    INIT,
    NORMAL_TEXT,
)
from kiosk_print.config import COFFEE_CATEGORY_ID
from kiosk_print.constant import (
    CGST_LABEL,
    COFFEE_COUNTER_BANNER,
    COFFEE_INSTRUCTION,
    COFFEE_ITEMS_HEADER,
    COFFEE_TICKET_TITLE,
    CURRENCY_PREFIX,
    FOOD_INSTRUCTION,
    FOOD_ITEMS_HEADER,
    FOOD_TICKET_TITLE,
    SGST_LABEL,
)
from kiosk_print.data import (
    DEFAULT_VENUE,
    resolve_bill_type,
    resolve_kiosk,
    resolve_order_type,
    resolve_printed_at,
)
from kiosk_print.layout import pad_end, pad_start, rule, two_column
from kiosk_print.models import LineItem, Order, PrintBatch, VenueConfig, customization_text

_BILL_NAME_WIDTH = 22
_BILL_QTY_WIDTH = 4
_BILL_AMOUNT_WIDTH = 14
_TICKET_QTY_WIDTH = 5
_BILL_CUSTOMIZATION_INDENT = "  + "
_TICKET_CUSTOMIZATION_INDENT = "       + "


def is_coffee(item: LineItem, coffee_category_id: str = COFFEE_CATEGORY_ID) -> bool:
    """Whether an item is routed to the coffee counter (exact category match)."""
    return item.category_id == coffee_category_id


def partition_items(
    items: Iterable[LineItem], coffee_category_id: str = COFFEE_CATEGORY_ID
) -> tuple[list[LineItem], list[LineItem]]:
    """Split items into (food, coffee), keeping order within each side."""
    food: list[LineItem] = []
    coffee: list[LineItem] = []
    for item in items:
        (coffee if is_coffee(item, coffee_category_id) else food).append(item)
    return (food, coffee)


def format_amount(value: Decimal, places: int = 2) -> str:
    """Round half-up to a fixed number of decimals."""
    value = Decimal(value)
    exponent = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # quantize fails once the result has more digits than the precision
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        return f"{value.quantize(exponent, rounding=ROUND_HALF_UP):f}"


def format_timestamp(printed_at: datetime) -> str:
    """DD/MM/YYYY  HH:MM AM/PM"""
    return printed_at.strftime("%d/%m/%Y  %I:%M %p")


def ticket_token(ticket_code: str) -> str:
    """Large token number printed on tickets: the KOT code without its 4-char prefix."""
    return ticket_code[4:]


def ticket_bill_number(order: Order, venue: VenueConfig = DEFAULT_VENUE) -> str:
    return f"{venue.bill_no_prefix}-{order.order_id[4:10]}"


def _customization_lines(item: LineItem, indent: str) -> list[str]:
    return [f"{indent}{customization_text(c)}\n" for c in item.customizations]


def _bill_item_lines(item: LineItem) -> list[str]:
    row = (
        pad_end(item.name, _BILL_NAME_WIDTH)
        + pad_end(item.quantity, _BILL_QTY_WIDTH)
        + pad_start(f"{CURRENCY_PREFIX}{format_amount(item.amount)}", _BILL_AMOUNT_WIDTH)
        + "\n"
    )
    return [row, *_customization_lines(item, _BILL_CUSTOMIZATION_INDENT)]


def build_bill(
    order: Order,
    order_type: str | None = None,
    venue: VenueConfig = DEFAULT_VENUE,
    printed_at: datetime | None = None,
) -> str:
    """Build the customer bill. Always returns a document."""
    timestamp = format_timestamp(resolve_printed_at(printed_at))
    half_tax = format_amount(order.tax / 2)

    out = [INIT]

    # Header
    out += [ALIGN_CENTER, DOUBLE_BOTH, f"{venue.short_name}\n", NORMAL_TEXT]
    out += [f"{venue.business_name}\n", f"{venue.tagline}\n", "-\n", f"{venue.branch}\n"]
    out += [NORMAL_TEXT, *(f"{line}\n" for line in venue.address_lines), rule()]

    out += [ALIGN_CENTER, BOLD_ON, f"KOT: {order.ticket_code}\n", BOLD_OFF, rule()]

    # Bill info
    out.append(ALIGN_LEFT)
    out.append(f"BILL NO : {order.order_id}\n")
    if order.external_invoice_id:
        out.append(f"KDS ID  : {order.external_invoice_id}\n")
    out.append(f"DATE    : {timestamp}\n")
    out.append(f"TYPE    : {resolve_order_type(order_type, order)}\n")
    out.append(f"KIOSK   : {resolve_kiosk(order)}\n")
    out.append(rule())

    # Items
    out += [
        BOLD_ON,
        pad_end("DESCRIPTION", _BILL_NAME_WIDTH)
        + pad_end("QTY", _BILL_QTY_WIDTH)
        + pad_start("AMOUNT", _BILL_AMOUNT_WIDTH)
        + "\n",
        BOLD_OFF,
        rule(),
    ]
    for item in order.items:
        out += _bill_item_lines(item)
    out.append(rule())

    # Totals
    out.append(two_column("Subtotal:", f"{CURRENCY_PREFIX}{format_amount(order.subtotal)}"))
    out.append(two_column(CGST_LABEL, f"+{half_tax}"))
    out.append(two_column(SGST_LABEL, f"+{half_tax}"))
    out.append(rule())
    out += [BOLD_ON, DOUBLE_HEIGHT]
    out.append(two_column("TOTAL:", f"{CURRENCY_PREFIX}{format_amount(order.total, 0)}"))
    out += [NORMAL_TEXT, BOLD_OFF, rule()]

    # Footer
    out.append(ALIGN_CENTER)
    out += [f"{line}\n" for line in venue.footer_lines]
    out += ["\n", BOLD_ON, f"{venue.thank_you}\n", BOLD_OFF]

    out += [FEED3, CUT]
    return "".join(out)


def _build_ticket(
    order: Order,
    items: list[LineItem],
    title_lines: tuple[str, ...],
    items_header: str,
    instruction: str,
    venue: VenueConfig,
    printed_at: datetime | None,
) -> str | None:
    if not items:
        return None
    timestamp = format_timestamp(resolve_printed_at(printed_at))

    out = [INIT]

    out += [ALIGN_CENTER, BOLD_ON, f"{venue.ticket_header}\n", BOLD_OFF]
    out += [f"{line}\n" for line in title_lines]
    out.append(rule())

    # Token number, printed large for the pickup counter.
    out += [ALIGN_CENTER, DOUBLE_BOTH, f"{ticket_token(order.ticket_code)}\n", NORMAL_TEXT]
    out += [f"KOT: {order.ticket_code}\n", rule()]

    out.append(ALIGN_LEFT)
    out.append(f"BILL TYPE : {resolve_bill_type(order)}\n")
    out.append(f"BILL NO   : {ticket_bill_number(order, venue)}\n")
    out.append(f"DATE/TIME : {timestamp}\n")
    out.append(f"KIOSK     : {resolve_kiosk(order)}\n")
    out.append(rule())

    out += [BOLD_ON, f"{items_header}\n", BOLD_OFF, rule()]
    for item in items:
        out.append(f"{pad_end(item.quantity, _TICKET_QTY_WIDTH)}{item.name}\n")
        out += _customization_lines(item, _TICKET_CUSTOMIZATION_INDENT)

    out += [rule(), f"{instruction}\n", "\n"]

    out += [FEED3, CUT]
    return "".join(out)


def build_food_ticket(
    order: Order,
    venue: VenueConfig = DEFAULT_VENUE,
    printed_at: datetime | None = None,
    coffee_category_id: str = COFFEE_CATEGORY_ID,
) -> str | None:
    """Build the kitchen ticket for non-coffee items, or None if there are none."""
    food, _ = partition_items(order.items, coffee_category_id)
    return _build_ticket(
        order,
        food,
        (FOOD_TICKET_TITLE,),
        FOOD_ITEMS_HEADER,
        FOOD_INSTRUCTION,
        venue,
        printed_at,
    )


def build_coffee_ticket(
    order: Order,
    venue: VenueConfig = DEFAULT_VENUE,
    printed_at: datetime | None = None,
    coffee_category_id: str = COFFEE_CATEGORY_ID,
) -> str | None:
    """Build the coffee counter ticket, or None if the order has no coffee."""
    _, coffee = partition_items(order.items, coffee_category_id)
    return _build_ticket(
        order,
        coffee,
        (COFFEE_TICKET_TITLE, COFFEE_COUNTER_BANNER),
        COFFEE_ITEMS_HEADER,
        COFFEE_INSTRUCTION,
        venue,
        printed_at,
    )


def build_documents(
    order: Order,
    order_type: str | None = None,
    venue: VenueConfig = DEFAULT_VENUE,
    printed_at: datetime | None = None,
) -> PrintBatch:
    """Build all three documents with one shared timestamp."""
    printed_at = resolve_printed_at(printed_at)
    return PrintBatch(
        bill=build_bill(order, order_type, venue, printed_at),
        food_ticket=build_food_ticket(order, venue, printed_at),
        coffee_ticket=build_coffee_ticket(order, venue, printed_at),
    )
