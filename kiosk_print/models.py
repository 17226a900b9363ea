"""Domain models for kiosk-print."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PlainCustomization:
    """A customization given as a bare label."""

    label: str


@dataclass(frozen=True)
class NamedCustomization:
    """A customization given as a record with a display name."""

    name: str


Customization = PlainCustomization | NamedCustomization


def customization_text(customization: Customization) -> str:
    """Return the text printed for a customization."""
    if isinstance(customization, NamedCustomization):
        return customization.name
    return customization.label


@dataclass(frozen=True)
class LineItem:
    """One ordered item as printed on the bill and tickets."""

    name: str
    price: Decimal
    quantity: int
    category_id: str = ""
    customizations: tuple[Customization, ...] = ()

    @property
    def amount(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class Order:
    """A placed order handed over by the ordering front end."""

    order_id: str
    ticket_code: str
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    items: tuple[LineItem, ...] = ()
    external_invoice_id: str | None = None
    bill_type: str | None = None
    kiosk: str | None = None


@dataclass(frozen=True)
class VenueConfig:
    """Business details printed in document headers and footers."""

    short_name: str
    business_name: str
    tagline: str
    branch: str
    ticket_header: str
    bill_no_prefix: str
    thank_you: str
    address_lines: tuple[str, ...] = ()
    footer_lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class PrintBatch:
    """The three documents built for one order; tickets are None when empty."""

    bill: str
    food_ticket: str | None = None
    coffee_ticket: str | None = None


@dataclass(frozen=True)
class PrintRequest:
    """An order plus the call-site options sent along with a print request."""

    order: Order
    order_type: str | None = None
    transaction_details: dict[str, object] | None = None
