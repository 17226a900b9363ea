"""Order payload parsing, venue loading and default-value resolution."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from kiosk_print.config import DEFAULT_KIOSK, DEFAULT_ORDER_TYPE, VENUE_PATH_ENV
from kiosk_print.constant import VENUE_DEFAULTS
from kiosk_print.models import (
    Customization,
    LineItem,
    NamedCustomization,
    Order,
    PlainCustomization,
    PrintRequest,
    VenueConfig,
)

logger = logging.getLogger(__name__)

_MISSING = object()


class OrderPayloadError(ValueError):
    """Raised when an order payload cannot be turned into an Order."""


def _venue_from_mapping(raw: Mapping[str, object]) -> VenueConfig:
    return VenueConfig(
        short_name=str(raw["short_name"]),
        business_name=str(raw["business_name"]),
        tagline=str(raw["tagline"]),
        branch=str(raw["branch"]),
        ticket_header=str(raw["ticket_header"]),
        bill_no_prefix=str(raw["bill_no_prefix"]),
        thank_you=str(raw["thank_you"]),
        address_lines=tuple(str(line) for line in raw["address_lines"]),  # type: ignore[union-attr]
        footer_lines=tuple(str(line) for line in raw["footer_lines"]),  # type: ignore[union-attr]
    )


DEFAULT_VENUE = _venue_from_mapping(VENUE_DEFAULTS)


def load_venue(path: str | Path | None = None) -> VenueConfig:
    """
    Load venue details, falling back to the built-in defaults.

    Resolution order:
    1. ``path`` (if given)
    2. KIOSK_PRINT_VENUE_PATH (if set)
    3. Built-in defaults

    Keys missing from the file keep their default values.
    """
    if path is None:
        env_path = os.environ.get(VENUE_PATH_ENV, "").strip()
        if not env_path:
            return DEFAULT_VENUE
        path = env_path

    venue_file = Path(path)
    try:
        raw = json.loads(venue_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Cannot read venue file {venue_file}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValueError(f"Venue file {venue_file} must contain a JSON object")

    unknown = sorted(set(raw) - set(VENUE_DEFAULTS))
    if unknown:
        raise ValueError(f"Unknown venue keys in {venue_file}: {', '.join(unknown)}")

    merged = {**VENUE_DEFAULTS, **raw}
    logger.debug("Loaded venue %r from %s", merged["branch"], venue_file)
    return _venue_from_mapping(merged)


def resolve_order_type(order_type: str | None, order: Order) -> str:
    """Order type printed on the bill: call-site value, then bill type, then default."""
    return order_type or order.bill_type or DEFAULT_ORDER_TYPE


def resolve_bill_type(order: Order) -> str:
    """Bill type printed on tickets."""
    return order.bill_type or DEFAULT_ORDER_TYPE


def resolve_kiosk(order: Order) -> str:
    return order.kiosk or DEFAULT_KIOSK


def resolve_printed_at(printed_at: datetime | None) -> datetime:
    return printed_at if printed_at is not None else datetime.now()


def _pick(mapping: Mapping[str, object], *keys: str, default: object = _MISSING) -> object:
    for key in keys:
        if key in mapping and mapping[key] is not None:
            return mapping[key]
    if default is _MISSING:
        raise OrderPayloadError(f"Missing required field {keys[0]!r}")
    return default


def _optional_text(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _money(value: object, field_name: str) -> Decimal:
    if isinstance(value, bool):
        raise OrderPayloadError(f"{field_name} must be a number, got {value!r}")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise OrderPayloadError(f"{field_name} must be a number, got {value!r}") from exc
    if not amount.is_finite() or amount < 0:
        raise OrderPayloadError(f"{field_name} must be a non-negative amount, got {value!r}")
    return amount


def _quantity(value: object, item_name: str) -> int:
    if isinstance(value, bool):
        raise OrderPayloadError(f"quantity for {item_name!r} must be an integer, got {value!r}")
    try:
        as_decimal = Decimal(str(value))
    except InvalidOperation as exc:
        raise OrderPayloadError(f"quantity for {item_name!r} must be an integer, got {value!r}") from exc
    if not as_decimal.is_finite() or as_decimal != as_decimal.to_integral_value():
        raise OrderPayloadError(f"quantity for {item_name!r} must be an integer, got {value!r}")
    quantity = int(as_decimal)
    if quantity <= 0:
        raise OrderPayloadError(f"quantity for {item_name!r} must be positive, got {value!r}")
    return quantity


def customization_from_payload(value: object) -> Customization:
    """Map a raw customization (label or record) onto the tagged variant."""
    if isinstance(value, Mapping):
        name = value.get("name")
        if name:
            return NamedCustomization(str(name))
    return PlainCustomization(str(value))


def line_item_from_payload(raw: Mapping[str, object]) -> LineItem:
    name = str(_pick(raw, "itemName", "item_name", "name"))
    customizations = _pick(raw, "selectedCustomizations", "customizations", default=())
    if not isinstance(customizations, (list, tuple)):
        raise OrderPayloadError(f"Customizations for {name!r} must be a list")
    return LineItem(
        name=name,
        price=_money(_pick(raw, "price"), f"price for {name!r}"),
        quantity=_quantity(_pick(raw, "quantity"), name),
        category_id=str(_pick(raw, "categoryId", "category_id", default="")),
        customizations=tuple(customization_from_payload(c) for c in customizations),  # type: ignore[union-attr]
    )


def order_from_payload(
    order_id: object,
    ticket_code: object,
    external_invoice_id: object,
    order_details: Mapping[str, object],
) -> Order:
    """Build an Order from the order details record the front end submits."""
    if not isinstance(order_details, Mapping):
        raise OrderPayloadError("Order details must be an object")

    raw_items = _pick(order_details, "items", default=[])
    if not isinstance(raw_items, list):
        raise OrderPayloadError("Order items must be a list")
    items = []
    for idx, raw_item in enumerate(raw_items):
        if not isinstance(raw_item, Mapping):
            raise OrderPayloadError(f"Order item {idx} must be an object")
        items.append(line_item_from_payload(raw_item))

    return Order(
        order_id=str(order_id),
        ticket_code=str(ticket_code),
        subtotal=_money(_pick(order_details, "subtotal"), "subtotal"),
        tax=_money(_pick(order_details, "tax"), "tax"),
        total=_money(_pick(order_details, "total"), "total"),
        items=tuple(items),
        external_invoice_id=_optional_text(external_invoice_id),
        bill_type=_optional_text(order_details.get("billType", order_details.get("bill_type"))),
        kiosk=_optional_text(order_details.get("kiosk")),
    )


def print_request_from_payload(payload: Mapping[str, object]) -> PrintRequest:
    """Parse a full print request (order id, KOT code, details, call-site options)."""
    if not isinstance(payload, Mapping):
        raise OrderPayloadError("Print request must be an object")
    order_details = _pick(payload, "orderDetails", "order_details")
    order = order_from_payload(
        _pick(payload, "orderId", "order_id"),
        _pick(payload, "kotCode", "kot_code", "ticket_code"),
        _pick(payload, "KDSInvoiceId", "external_invoice_id", default=None),
        order_details,  # type: ignore[arg-type]
    )
    transaction_details = _pick(payload, "transactionDetails", "transaction_details", default=None)
    return PrintRequest(
        order=order,
        order_type=_optional_text(_pick(payload, "orderType", "order_type", default=None)),
        transaction_details=dict(transaction_details) if isinstance(transaction_details, Mapping) else None,
    )


def load_print_request(path: str | Path) -> PrintRequest:
    """Read a print request from a JSON file."""
    request_file = Path(path)
    try:
        payload = json.loads(request_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise OrderPayloadError(f"Cannot read order file {request_file}: {exc}") from exc
    return print_request_from_payload(payload)
