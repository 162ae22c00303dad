"""
Transaction Parser for bank statement CSV uploads
Columns: date, amount, type, description (extra trailing columns ignored)
"""
import logging
import math
import uuid
from datetime import datetime, date
from typing import Optional
from models.schemas import Transaction

logger = logging.getLogger(__name__)

DELIMITER = ","
MIN_COLUMNS = 4

# Tried in order after ISO 8601
DATE_FORMATS = [
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%m/%d/%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d/%m/%y",
    "%Y/%m/%d",
]

CURRENCY_SYMBOLS = ["₹", "£", "$", "€"]

SAMPLE_CSV = """date,amount,type,description
2024-01-01,5200.00,credit,Monthly Contract Retainer
2024-01-02,2100.00,debit,Office Rent
2024-01-05,145.20,debit,AWS Cloud Services
2024-01-10,450.00,debit,Business Insurance
2024-01-15,85.00,debit,Software Subscription
2024-02-01,5200.00,credit,Monthly Contract Retainer
2024-02-03,2100.00,debit,Office Rent
2024-02-12,1200.00,debit,Emergency Laptop Repair
2024-02-15,300.00,debit,Marketing Ads
2024-02-20,150.00,credit,Referral Bonus
2024-03-01,3200.00,credit,Partial Project Payment
2024-03-02,2100.00,debit,Office Rent
2024-03-05,600.00,debit,Tax Consultant
2024-03-10,400.00,debit,Equipment Upgrade
2024-03-15,120.00,debit,Client Lunch"""


class EmptyResultError(ValueError):
    """Raised when an upload contains no usable transaction rows"""

    def __init__(self, message: str = "No valid transactions found in CSV."):
        super().__init__(message)


def parse_date(value: str) -> Optional[date]:
    """Parse a statement date, returning None when no known format matches"""
    value = value.strip()
    if not value:
        return None

    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    return None


def parse_amount(value: str) -> Optional[float]:
    """Parse an amount column; the sign is dropped since `type` carries it"""
    amount_str = value.strip()
    for symbol in CURRENCY_SYMBOLS:
        amount_str = amount_str.replace(symbol, "")

    # float() would read "1_000" as a digit-grouped number
    if "_" in amount_str:
        return None

    try:
        amount = float(amount_str)
    except ValueError:
        return None

    if not math.isfinite(amount):
        return None
    return abs(amount)


class TransactionParser:
    """Parse raw statement text into validated transactions"""

    def __init__(self, owner_ref: str = "current-user"):
        self.owner_ref = owner_ref
        self.transactions: list[Transaction] = []

    def normalize(self, raw_text: str) -> list[Transaction]:
        """
        Normalize raw CSV text

        The first line is a header. Blank lines, rows with fewer than four
        columns and rows with an unusable amount or date are skipped.

        Raises:
            EmptyResultError: if no row survives
        """
        self.transactions = []

        # Handle BOM
        if raw_text.startswith('\ufeff'):
            raw_text = raw_text[1:]

        # Rows end at "\n" only; other line-break characters stay in the field
        lines = [line.rstrip("\r") for line in raw_text.split("\n")]
        rows = [line for line in lines if line.strip()][1:]

        for row_no, row in enumerate(rows, start=1):
            tx = self._parse_row(row)
            if tx is None:
                logger.debug("Skipping malformed row %d: %r", row_no, row[:80])
                continue
            self.transactions.append(tx)

        if not self.transactions:
            raise EmptyResultError()

        return self.transactions

    def _parse_row(self, row: str) -> Optional[Transaction]:
        columns = [c.strip() for c in row.split(DELIMITER)]
        if len(columns) < MIN_COLUMNS:
            return None

        amount = parse_amount(columns[1])
        if amount is None:
            return None

        tx_date = parse_date(columns[0])
        if tx_date is None:
            return None

        return Transaction(
            id=uuid.uuid4().hex,
            date=tx_date,
            amount=amount,
            type=columns[2].lower(),
            description=columns[3],
            owner_ref=self.owner_ref,
        )


# Convenience function
def normalize_transactions(raw_text: str, owner_ref: str = "current-user") -> list[Transaction]:
    """Normalize an uploaded statement into a fresh transaction set"""
    return TransactionParser(owner_ref=owner_ref).normalize(raw_text)
