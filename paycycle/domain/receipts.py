"""Heuristic extraction of an amount and a date from receipt text"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional
from dateutil import parser as date_parser
from paycycle.domain.models import ReceiptDraft

AMOUNT_PATTERN = re.compile(r"(\$|\b)(\d+[.,]?\d{0,2})")
DATE_PATTERN = re.compile(r"(\d{2,4}[/\-.]\d{1,2}[/\-.]\d{1,2})")

DRAFT_DESCRIPTION = "Extracted automatically"


def _parse_amount_cents(token: str) -> Optional[int]:
    """'12,50' → 1250. Comma is treated as the decimal separator."""
    try:
        amount = Decimal(token.replace(",", "."))
    except InvalidOperation:
        return None
    return int((amount * 100).to_integral_value())


def _parse_date(token: str) -> Optional[date]:
    """Best effort: year-first when the first group has four digits, else day-first"""
    yearfirst = len(re.split(r"[/\-.]", token)[0]) == 4
    try:
        return date_parser.parse(token, yearfirst=yearfirst, dayfirst=not yearfirst).date()
    except (ValueError, OverflowError):
        return None


def parse_receipt_text(text: str) -> ReceiptDraft:
    """
    Pull the first amount-like and first date-like tokens out of receipt text.

    Lines are scanned in order and scanning stops once both are found. The
    result is a draft only: it must be reviewed by a person before it is
    saved as a transaction.

    Example:
        "SUPER MART\\n2024/03/10\\nTOTAL $123.45" → 2024 is read as the
        amount (the first numeric token wins), date 2024-03-10
    """
    amount_cents: Optional[int] = None
    date_text: Optional[str] = None

    for line in text.split("\n"):
        if amount_cents is None:
            match = AMOUNT_PATTERN.search(line)
            if match:
                amount_cents = _parse_amount_cents(match.group(2))

        if date_text is None:
            match = DATE_PATTERN.search(line)
            if match:
                date_text = match.group(1)

        if amount_cents is not None and date_text is not None:
            break

    return ReceiptDraft(
        amount_cents=amount_cents,
        date_text=date_text,
        date=_parse_date(date_text) if date_text else None,
        description=DRAFT_DESCRIPTION,
        source_text=text,
    )
