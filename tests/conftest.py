from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable

import pytest

from kiosk_print.config import COFFEE_CATEGORY_ID
from kiosk_print.models import LineItem, NamedCustomization, Order, PlainCustomization

FOOD_CATEGORY_ID = "6868ca5dc29c8ed4d3c98dd9"
PRINTED_AT = datetime(2026, 3, 7, 21, 5)


def make_item(name: str, price: str, quantity: int = 1, coffee: bool = False, customizations=()) -> LineItem:
    return LineItem(
        name=name,
        price=Decimal(price),
        quantity=quantity,
        category_id=COFFEE_CATEGORY_ID if coffee else FOOD_CATEGORY_ID,
        customizations=tuple(customizations),
    )


def make_order(items, subtotal="100.00", tax="10.00", total="110", **kwargs) -> Order:
    fields = {
        "order_id": "ORD-482913-A",
        "ticket_code": "KOT-0427",
        "subtotal": Decimal(subtotal),
        "tax": Decimal(tax),
        "total": Decimal(total),
        "items": tuple(items),
    }
    fields.update(kwargs)
    return Order(**fields)


class RecordingBridge:
    def __init__(self, fail_on: Callable[[str], bool] | None = None) -> None:
        self.calls: list[tuple[str, str, str]] = []
        self.fail_on = fail_on

    def print_bill(self, channel: str, secondary: str, payload: str) -> None:
        if self.fail_on is not None and self.fail_on(payload):
            raise RuntimeError("paper jam")
        self.calls.append((channel, secondary, payload))

    @property
    def payloads(self) -> list[str]:
        return [payload for _, _, payload in self.calls]


class FakeHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Records deferred tasks; ``run_all`` fires the uncancelled ones in delay order."""

    def __init__(self) -> None:
        self.tasks: list[tuple[float, Callable[..., Any], tuple[Any, ...], FakeHandle]] = []

    def call_later(self, delay_s: float, fn: Callable[..., Any], *args: Any) -> FakeHandle:
        handle = FakeHandle()
        self.tasks.append((delay_s, fn, args, handle))
        return handle

    @property
    def delays(self) -> list[float]:
        return [delay for delay, *_ in self.tasks]

    def run_all(self) -> None:
        for _, fn, args, handle in sorted(self.tasks, key=lambda task: task[0]):
            if not handle.cancelled:
                fn(*args)


@pytest.fixture
def food_order() -> Order:
    """Two kitchen items adding up to 100.00 with 10.00 tax."""
    return make_order(
        [
            make_item("Rava Idli", "40.00", customizations=[PlainCustomization("Extra Chutney")]),
            make_item("Masala Dosa", "30.00", quantity=2),
        ]
    )


@pytest.fixture
def coffee_order() -> Order:
    return make_order(
        [
            make_item("Filter Coffee", "40", coffee=True, customizations=[NamedCustomization("Less Sugar")]),
            make_item("Badam Milk", "60", coffee=True),
        ],
        subtotal="100",
        tax="5",
        total="105",
    )


@pytest.fixture
def mixed_order() -> Order:
    return make_order(
        [
            make_item("Ghee Podi Idli", "120"),
            make_item("Filter Coffee", "40", coffee=True),
            make_item("Benne Masala Dosa", "150"),
        ],
        subtotal="310",
        tax="15.50",
        total="325.50",
    )


@pytest.fixture
def bridge() -> RecordingBridge:
    return RecordingBridge()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()
