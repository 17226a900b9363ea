"""Entry point: print an order's bill and tickets, or preview them."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from kiosk_print.config import LOG_LEVEL_ENV
from kiosk_print.data import load_print_request, load_venue
from kiosk_print.printer import (
    BillPrintError,
    EscposBridge,
    check_printer_dependencies,
    detect_bridge,
    dispatch_all,
    dummy_bridge,
    usb_bridge,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kiosk-print",
        description="Print the bill, food KOT and coffee KOT for an order.",
    )
    parser.add_argument("order", type=Path, help="JSON print request file")
    parser.add_argument("--venue", type=Path, default=None, help="JSON venue file overriding the defaults")
    parser.add_argument("--preview", action="store_true", help="open the preview app instead of printing")
    parser.add_argument(
        "--dummy",
        action="store_true",
        help="print to an in-memory printer instead of the USB printer",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="with --dummy, write the raw printer bytes to this file",
    )
    return parser


def _connect_bridge(dummy: bool) -> EscposBridge | None:
    if not dummy:
        ok, msg = check_printer_dependencies()
        logger.info(msg)
        if not ok:
            return None
    bridge = dummy_bridge() if dummy else usb_bridge()
    if not bridge.connect():
        return None
    return bridge


def main(argv: list[str] | None = None) -> int:
    """Run the command line tool."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=os.environ.get(LOG_LEVEL_ENV, "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        request = load_print_request(args.order)
        venue = load_venue(args.venue)
        bridge = _connect_bridge(args.dummy)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    if args.preview or bridge is None or not detect_bridge(bridge):
        if not args.preview:
            logger.warning("No print bridge available - opening preview instead")
        from kiosk_print.preview_app import PreviewApp

        try:
            PreviewApp(request, venue=venue, bridge=bridge).run()
        finally:
            if bridge is not None:
                bridge.close()
        return 0

    status = 0
    try:
        try:
            handles = dispatch_all(
                bridge,
                request.order,
                request.order_type,
                request.transaction_details,
                venue=venue,
            )
        except BillPrintError as exc:
            logger.error("%s", exc)
            handles = exc.handles
            status = 1
        handles.join()
        if args.dummy and args.output is not None:
            args.output.write_bytes(bridge.printer.output)
            logger.info("Wrote printer output to %s", args.output)
    finally:
        bridge.close()
    return status


if __name__ == "__main__":
    raise SystemExit(main())
