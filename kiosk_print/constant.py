"""Editable static venue data printed on bills and tickets."""

from __future__ import annotations

VENUE_DEFAULTS: dict[str, object] = {
    "short_name": "KTR",
    "business_name": "Karnataka Tiffin Room",
    "tagline": "Bringing the flavors of Bengaluru",
    "branch": "KTR-Versova",
    "address_lines": [
        "Shop 202, JP Rd, Aram Nagar Pt 2,",
        "Versova, Andheri West, Mumbai 400061",
    ],
    "ticket_header": "Karnataka Tiffin Room (Versova)",
    "bill_no_prefix": "KTR",
    "footer_lines": [
        "GST: 27AA0FH7156G1Z0",
        "CIN: 6731",
        "FSSAI: 21524005001190",
    ],
    "thank_you": "Thank You! Visit Again :)",
}

FOOD_TICKET_TITLE = "*** FOOD KOT ***"
COFFEE_TICKET_TITLE = "*** COFFEE KOT ***"
COFFEE_COUNTER_BANNER = "--- COFFEE COUNTER ---"
FOOD_ITEMS_HEADER = "QTY  ITEM"
COFFEE_ITEMS_HEADER = "QTY  COFFEE ITEM"
FOOD_INSTRUCTION = "Instruction:"
COFFEE_INSTRUCTION = "Instruction: COFFEE COUNTER"

# The tax is always split in half; no rate is passed in with the order.
CGST_LABEL = "CGST 2.5%:"
SGST_LABEL = "SGST 2.5%:"

CURRENCY_PREFIX = "Rs "
