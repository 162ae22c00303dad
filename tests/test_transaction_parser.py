"""
Tests for the RiskRadar transaction parser
"""
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tools.transaction_parser import (
    EmptyResultError,
    SAMPLE_CSV,
    TransactionParser,
    normalize_transactions,
    parse_amount,
    parse_date,
)


HEADER = "date,amount,type,description"


def test_well_formed_rows_counted():
    """Only well formed rows survive, malformed ones are dropped silently"""
    raw = "\n".join([
        HEADER,
        "2024-01-01,5200.00,credit,Retainer",
        "2024-01-02,2100.00,debit,Rent",
        "2024-01-03,abc,debit,Broken amount",
        "2024-01-04,10.00,debit",
        "",
        "2024-01-05,99.50,debit,Lunch",
    ])

    transactions = normalize_transactions(raw)

    assert len(transactions) == 3
    assert [t.description for t in transactions] == ["Retainer", "Rent", "Lunch"]
    print(f"✓ {len(transactions)} of 5 rows kept")


def test_no_valid_rows_raises():
    """Zero valid rows is the only hard failure"""
    raw = "\n".join([HEADER, "2024-01-01,n/a,debit,Rent", "only,three,columns"])

    try:
        normalize_transactions(raw)
        assert False, "Should have raised EmptyResultError"
    except EmptyResultError as e:
        assert "No valid transactions" in str(e)


def test_header_only_raises():
    try:
        normalize_transactions(HEADER + "\n\n")
        assert False, "Should have raised EmptyResultError"
    except EmptyResultError:
        pass


def test_first_line_is_always_header():
    """The first non-blank line is discarded even when it looks like data"""
    raw = "2024-01-01,1.00,debit,Looks like data\n2024-01-02,2.00,debit,Kept"

    transactions = normalize_transactions(raw)

    assert len(transactions) == 1
    assert transactions[0].description == "Kept"


def test_fields_normalized():
    raw = "\ufeff" + HEADER + "\n 2024-03-15 , 120.00 , DEBIT , Client Lunch , extra, cols\n"

    tx = normalize_transactions(raw, owner_ref="user-42")[0]

    assert tx.date == date(2024, 3, 15)
    assert tx.amount == 120.0
    assert tx.type == "debit"
    assert tx.description == "Client Lunch"
    assert tx.owner_ref == "user-42"


def test_unrecognized_type_kept_verbatim():
    """Types other than credit/debit are accepted after lower-casing"""
    raw = HEADER + "\n2024-01-01,50.00,Refund,Store credit"

    tx = normalize_transactions(raw)[0]

    assert tx.type == "refund"


def test_amount_sign_dropped():
    """Sign is carried by the type column, never by amount"""
    raw = HEADER + "\n2024-01-01,-75.25,debit,Card payment"

    tx = normalize_transactions(raw)[0]

    assert tx.amount == 75.25


def test_fresh_ids_per_record():
    raw = HEADER + "\n2024-01-01,1,debit,A\n2024-01-01,1,debit,A"

    first = normalize_transactions(raw)
    second = normalize_transactions(raw)

    ids = {t.id for t in first} | {t.id for t in second}
    assert len(ids) == 4


def test_parser_keeps_last_result():
    parser = TransactionParser()
    parser.normalize(SAMPLE_CSV)

    assert len(parser.transactions) == 15


def test_parse_amount():
    assert parse_amount("1,200") is None
    assert parse_amount("₹450.00") == 450.0
    assert parse_amount("nan") is None
    assert parse_amount("inf") is None
    assert parse_amount("") is None
    assert parse_amount("1_000") is None
    assert parse_amount("₹1_200.50") is None


def test_parse_date_formats():
    assert parse_date("2024-02-29") == date(2024, 2, 29)
    assert parse_date("15/03/2024") == date(2024, 3, 15)
    assert parse_date("15 Mar 2024") == date(2024, 3, 15)
    assert parse_date("2024-01-01T10:30:00") == date(2024, 1, 1)
    assert parse_date("2024-01-01T10:00:00Z") == date(2024, 1, 1)
    assert parse_date("yesterday") is None


def test_unparseable_date_dropped():
    raw = HEADER + "\nsometime,10.00,debit,Mystery\n2024-01-01,5.00,debit,Coffee"

    transactions = normalize_transactions(raw)

    assert [t.description for t in transactions] == ["Coffee"]


def test_rows_split_on_newline_only():
    """Other line-break characters stay inside the description"""
    raw = "\r\n".join([
        HEADER,
        "2024-01-01,10.00,debit,Cafe\x0bBakery",
        "2024-01-02,5.00,debit,Tea Shop",
        "2024-01-03,7.50,debit,Book\x85Store",
    ])

    transactions = normalize_transactions(raw)

    assert [t.description for t in transactions] == ["Cafe\x0bBakery", "Tea Shop", "Book\x85Store"]
    assert [t.amount for t in transactions] == [10.0, 5.0, 7.5]


if __name__ == "__main__":
    print("\n🧪 Running RiskRadar Parser Tests\n")
    print("-" * 50)

    test_well_formed_rows_counted()
    test_no_valid_rows_raises()
    test_header_only_raises()
    test_first_line_is_always_header()
    test_fields_normalized()
    test_unrecognized_type_kept_verbatim()
    test_amount_sign_dropped()
    test_fresh_ids_per_record()
    test_parser_keeps_last_result()
    test_parse_amount()
    test_parse_date_formats()
    test_unparseable_date_dropped()
    test_rows_split_on_newline_only()

    print("-" * 50)
    print("\n✅ All tests passed!\n")
