"""Runtime configuration defaults for document layout and printing."""

from __future__ import annotations

# 58mm paper at the printer's default font.
LINE_WIDTH = 40

# Must match the coffee category used by the ordering front end.
COFFEE_CATEGORY_ID = "6868ca5dc29c8ed4d3c98dd8"

PRINT_CHANNEL = "USB"
PRINT_SECONDARY_PARAM = ""

# Both delays are measured from the start of a dispatch, not chained.
FOOD_TICKET_DELAY_S = 0.35
COFFEE_TICKET_DELAY_S = 0.70

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_ENCODING = "utf-8"

DEFAULT_ORDER_TYPE = "DINE IN"
DEFAULT_KIOSK = "KTR1"

DEBUG_LOG_PATH = "/tmp/kiosk-print-debug.log"

VENUE_PATH_ENV = "KIOSK_PRINT_VENUE_PATH"
USB_VENDOR_ID_ENV = "KIOSK_PRINT_USB_VENDOR_ID"
USB_PRODUCT_ID_ENV = "KIOSK_PRINT_USB_PRODUCT_ID"
LOG_LEVEL_ENV = "KIOSK_PRINT_LOG_LEVEL"
DEBUG_LOG_ENV = "KIOSK_PRINT_DEBUG_LOG"
