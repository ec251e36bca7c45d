"""Tests for transaction CSV parsing"""

import pytest
from datetime import datetime
import smartledger.tools.csv_parser as csv_parser
from smartledger.tools.csv_parser import parse_transactions, load_transactions, parse_amount, parse_date
from smartledger.utils.errors import FormatError, ParseError

HEADER = "id,date,description,amount,account,category,merchant"


def test_header_only_fails_with_format_error():
    with pytest.raises(FormatError):
        parse_transactions(HEADER)


def test_blank_lines_do_not_count_as_rows():
    with pytest.raises(FormatError):
        parse_transactions(f"\n   \n{HEADER}\n\n  \n")


def test_three_field_row_skipped_four_field_row_accepted():
    content = f"{HEADER}\nT1,2024-01-01,Short row\nT2,2024-01-02,Coffee Shop Purchase,4.50\n"

    transactions = parse_transactions(content)

    assert len(transactions) == 1
    txn = transactions[0]
    assert txn.id == "T2"
    assert txn.amount == 4.50
    assert txn.account == "Unknown"
    assert txn.category == "Uncategorized"
    assert txn.merchant == "Coffee"


def test_all_rows_short_returns_empty_list():
    assert parse_transactions(f"{HEADER}\nT1,2024-01-01,x\n") == []


def test_quotes_stripped_and_fields_trimmed():
    content = f'{HEADER}\n "T9" , "2024-03-05T08:15:00" , "Book Store" , "19.99" , "Savings-9" , "Books" , "Powell"\r\n'

    txn = parse_transactions(content)[0]

    assert txn.id == "T9"
    assert txn.date == datetime(2024, 3, 5, 8, 15)
    assert txn.description == "Book Store"
    assert txn.amount == 19.99
    assert txn.account == "Savings-9"
    assert txn.category == "Books"
    assert txn.merchant == "Powell"


def test_header_is_positional_only():
    content = "foo,bar,baz,qux\nT1,2024-01-01,Taxi Ride,12\n"

    txn = parse_transactions(content)[0]

    assert txn.id == "T1"
    assert txn.amount == 12.0


def test_non_numeric_amount_becomes_zero():
    txn = parse_transactions(f"{HEADER}\nT1,2024-01-01,Refund,n/a\n")[0]
    assert txn.amount == 0.0


def test_missing_id_is_synthesized():
    transactions = parse_transactions(f"{HEADER}\n,2024-01-01,Lunch,10\n,2024-01-01,Dinner,20\n")

    assert all(t.id for t in transactions)
    assert transactions[0].id.endswith("1")
    assert transactions[1].id.endswith("2")


def test_missing_date_defaults_to_now():
    before = datetime.now()
    txn = parse_transactions(f"{HEADER}\nT1,,Lunch,10\n")[0]
    after = datetime.now()

    assert before <= txn.date <= after


def test_empty_description_gives_unknown_merchant():
    txn = parse_transactions(f"{HEADER}\nT1,2024-01-01,,10\n")[0]
    assert txn.merchant == "Unknown"


def test_duplicate_ids_are_kept():
    transactions = parse_transactions(f"{HEADER}\nT1,2024-01-01,A,1\nT1,2024-01-02,B,2\n")
    assert [t.id for t in transactions] == ["T1", "T1"]


def test_unparseable_date_keeps_row():
    content = (
        "id,date,description,amount,account\n"
        "T1,2024-01-15,Lunch,10,A\n"
        "T2,pending,Dinner,20,A\n"
        "T3,2024-01-16,Taxi,30,A\n"
    )

    transactions = parse_transactions(content)

    assert [t.id for t in transactions] == ["T1", "T2", "T3"]
    assert transactions[1].date is None
    assert transactions[1].amount == 20.0
    assert transactions[2].date == datetime(2024, 1, 16)


def test_row_decoding_failure_raises_parse_error(monkeypatch):
    def broken(value):
        raise RuntimeError("decoder exploded")
    monkeypatch.setattr(csv_parser, "parse_amount", broken)

    with pytest.raises(ParseError) as exc_info:
        parse_transactions(f"{HEADER}\nT1,2024-01-01,Lunch,10\n")
    assert "correct format" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.parametrize("raw,expected", [
    ("12.50", 12.5),
    ("-40", -40.0),
    ("42abc", 42.0),
    (".5", 0.5),
    ("1e3", 1000.0),
    ("", 0.0),
    ("abc", 0.0),
])
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_parse_date_date_only_and_timezone():
    assert parse_date("2024-01-15") == datetime(2024, 1, 15)
    assert parse_date("2024-01-15T10:00:00+02:00") == datetime(2024, 1, 15, 8, 0)


@pytest.mark.parametrize("raw", ["pending", "not-a-date"])
def test_parse_date_unreadable_gives_none(raw):
    assert parse_date(raw) is None


def test_load_transactions_from_file(sample_csv_path):
    transactions = load_transactions(sample_csv_path)

    assert len(transactions) == 10
    assert transactions[0].id == "T001"
    assert transactions[-1].merchant == "Dunkin"


def test_load_transactions_missing_file(tmp_path):
    with pytest.raises(FormatError):
        load_transactions(tmp_path / "missing.csv")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
