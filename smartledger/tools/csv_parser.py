"""Transaction CSV parsing - positional columns, lenient defaults"""

import re
import time
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union
import pandas as pd
from smartledger.models import Transaction
from smartledger.utils.errors import FormatError, ParseError
from smartledger.utils.logging import get_logger
from smartledger.utils.metrics import transactions_parsed, rows_skipped

logger = get_logger(__name__)

DELIMITER = ","
MIN_FIELDS = 4

# Column order: id, date, description, amount, account, category, merchant
COLUMNS = ['id', 'date', 'description', 'amount', 'account', 'category', 'merchant']

_LEADING_NUMBER = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')


def parse_amount(value: str) -> float:
    """
    Parse the leading numeric part of a field, 0.0 when there is none.

    "12.50" -> 12.5, "42abc" -> 42.0, "n/a" -> 0.0
    """
    match = _LEADING_NUMBER.match(value.strip())
    if not match:
        return 0.0
    return float(match.group(0))


def parse_date(value: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp or date-only string.

    Timezone-aware values are converted to UTC and made naive so that every
    date in a batch can be subtracted from every other. Unreadable values
    give None; the row is kept but cannot take part in timing checks.
    """
    if not value:
        return datetime.now()

    try:
        ts = pd.Timestamp(value)
    except ValueError:
        logger.debug(f"Unparseable date: {value!r}")
        return None
    if ts is pd.NaT:
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert('UTC').tz_localize(None)
    return ts.to_pydatetime()


def _split_row(line: str) -> List[str]:
    return [field.strip().replace('"', '') for field in line.split(DELIMITER)]


def _row_to_transaction(values: List[str], index: int) -> Transaction:
    def field(position: int) -> str:
        return values[position] if position < len(values) else ''

    description = field(2)
    return Transaction(
        id=field(0) or f"{int(time.time() * 1000)}{index}",
        date=parse_date(field(1)),
        description=description,
        amount=parse_amount(field(3)),
        account=field(4) or 'Unknown',
        category=field(5) or 'Uncategorized',
        merchant=field(6) or description.split(' ')[0] or 'Unknown',
    )


def parse_transactions(content: str) -> List[Transaction]:
    """
    Parse raw delimited text into transactions.

    The first non-empty line is a header and is ignored; columns are read by
    position. Rows with fewer than 4 fields are skipped.

    Args:
        content: Raw file content

    Returns:
        Transactions in input order

    Raises:
        FormatError: If there is no header plus at least one data row
        ParseError: If a row cannot be decoded
    """
    lines = [line for line in content.split('\n') if line.strip()]

    if len(lines) < 2:
        raise FormatError("CSV file must have header and data rows")

    transactions = []
    skipped = 0

    try:
        for index in range(1, len(lines)):
            values = _split_row(lines[index])
            if len(values) < MIN_FIELDS:
                skipped += 1
                logger.debug(f"Skipping row {index}: {len(values)} fields")
                continue
            transactions.append(_row_to_transaction(values, index))

    except Exception as e:
        logger.error(f"CSV parsing failed: {e}")
        raise ParseError("Failed to parse CSV file. Please ensure it has the correct format.") from e

    transactions_parsed.inc(len(transactions))
    rows_skipped.inc(skipped)
    logger.info(f"Parsed {len(transactions)} transactions", skipped_rows=skipped)
    return transactions


def load_transactions(path: Union[str, Path]) -> List[Transaction]:
    """
    Read a CSV file and parse its transactions

    Args:
        path: File path

    Returns:
        Transactions in file order

    Raises:
        FormatError: If the file is missing or unreadable
        ParseError: If a row cannot be decoded
    """
    filepath = Path(path)
    if not filepath.is_file():
        raise FormatError(f"CSV file not found: {filepath}")

    try:
        content = filepath.read_text(encoding='utf-8-sig')
    except (OSError, UnicodeDecodeError) as e:
        raise FormatError(f"Unable to read CSV file {filepath}: {e}") from e

    logger.info(f"Loaded {filepath.name}", bytes=len(content))
    return parse_transactions(content)
