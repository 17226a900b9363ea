from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import RecordingBridge
import kiosk_print.main as main_module
from kiosk_print.preview_app import PreviewApp

EXAMPLE_ORDER = Path(__file__).resolve().parents[1] / "examples" / "order.json"


def test_dummy_print_writes_all_three_documents(tmp_path):
    output = tmp_path / "out.bin"
    assert main_module.main([str(EXAMPLE_ORDER), "--dummy", "--output", str(output)]) == 0

    data = output.read_bytes()
    assert data.count(b"\x1b@") == 3
    assert data.count(b"\x1dVA\x00") == 3
    bill_at = data.index(b"BILL NO : ORD-482913-A")
    assert bill_at < data.index(b"*** FOOD KOT ***") < data.index(b"*** COFFEE KOT ***")
    assert b"TYPE    : TAKE AWAY" in data
    assert b"KDS ID  : KDS-99812" in data


def test_missing_bridge_falls_back_to_preview_without_sending(monkeypatch):
    previews = []

    def fail_dispatch(*args, **kwargs):
        raise AssertionError("nothing may be sent without a bridge")

    monkeypatch.setattr(main_module, "_connect_bridge", lambda dummy: None)
    monkeypatch.setattr(main_module, "dispatch_all", fail_dispatch)
    monkeypatch.setattr(PreviewApp, "run", lambda self: previews.append(self))

    assert main_module.main([str(EXAMPLE_ORDER)]) == 0
    assert len(previews) == 1
    assert previews[0].bridge is None
    assert previews[0].batch.coffee_ticket is not None


def test_bad_order_file_exits_with_error(tmp_path, caplog):
    path = tmp_path / "order.json"
    path.write_text(json.dumps({"orderId": "ORD-1", "kotCode": "KOT-0001", "orderDetails": {"tax": 1}}))

    assert main_module.main([str(path), "--dummy"]) == 2
    assert "subtotal" in caplog.text


def test_order_argument_is_required():
    with pytest.raises(SystemExit):
        main_module.main([])


class _ClosableBridge(RecordingBridge):
    def __init__(self, fail_on=None) -> None:
        super().__init__(fail_on)
        self.closed = False

    def close(self) -> None:
        self.closed = True


def test_failed_bill_still_prints_tickets_and_exits_non_zero(monkeypatch, caplog):
    bridge = _ClosableBridge(fail_on=lambda payload: "BILL NO :" in payload)
    monkeypatch.setattr(main_module, "_connect_bridge", lambda dummy: bridge)

    assert main_module.main([str(EXAMPLE_ORDER)]) == 1
    assert bridge.closed
    assert len(bridge.payloads) == 2
    assert "*** FOOD KOT ***" in bridge.payloads[0]
    assert "*** COFFEE KOT ***" in bridge.payloads[1]
    assert "paper jam" in caplog.text
