import csv
import logging
import sys
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Dict, Iterable, Iterator, Optional

from errors import RecordDecodeError
from models import Transaction, TransactionType, DISPUTABLE_TYPES, AMOUNT_QUANTUM

logger = logging.getLogger(__name__)

CLIENT_ID_MAX = 2**16 - 1
TRANSACTION_ID_MAX = 2**32 - 1
REQUIRED_COLUMNS = ("type", "client", "tx")
STDIN_PATH = "-"
# Leaves headroom in the 28-digit decimal context for summing many 4-place amounts.
AMOUNT_MAX_INTEGER_DIGITS = 15


def read_transactions(filepath: str) -> Iterator[Transaction]:
    """Lazily read transactions from a CSV file, or stdin when filepath is "-"."""
    if filepath == STDIN_PATH:
        yield from iter_transactions(sys.stdin)
        return

    with open(filepath, "r", newline="", encoding="utf-8") as f:
        yield from iter_transactions(f)


def iter_transactions(lines: Iterable[str]) -> Iterator[Transaction]:
    """
    Decode CSV lines (header first) into transactions, in order.
    Raises RecordDecodeError on the first row that cannot be decoded.
    """
    reader = csv.DictReader(lines)
    try:
        if reader.fieldnames is None:
            logger.info("Input is empty, no transactions to read")
            return

        columns = {name.strip().lower() for name in reader.fieldnames if name}
        missing = [name for name in REQUIRED_COLUMNS if name not in columns]
        if missing:
            raise RecordDecodeError(f"header is missing columns: {', '.join(missing)}", reader.line_num)

        for row in reader:
            yield parse_csv_row(row, reader.line_num)
    except (csv.Error, UnicodeDecodeError) as e:
        raise RecordDecodeError(f"unreadable input: {e}", reader.line_num) from e


def parse_csv_row(row: Dict[Optional[str], str], line_num: Optional[int] = None) -> Transaction:
    """Parse CSV row into Transaction."""
    if None in row:
        raise RecordDecodeError(f"too many fields: {row[None]}", line_num)

    normalized = {k.strip().lower(): (v or "").strip() for k, v in row.items()}

    try:
        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_id(normalized["client"], CLIENT_ID_MAX, "client")
        transaction_id = _parse_id(normalized["tx"], TRANSACTION_ID_MAX, "tx")
        amount = None
        if transaction_type in DISPUTABLE_TYPES:
            amount = _parse_amount(normalized.get("amount", ""))
    except KeyError as e:
        raise RecordDecodeError(f"missing field {e}", line_num) from e
    except (ValueError, InvalidOperation) as e:
        raise RecordDecodeError(f"failed to parse row {row}: {e}", line_num) from e

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(value: str, maximum: int, name: str) -> int:
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"{name} {value!r} is not an unsigned integer")
    parsed = int(value)
    if parsed > maximum:
        raise ValueError(f"{name} {parsed} out of range 0..{maximum}")
    return parsed


def _parse_amount(value: str) -> Decimal:
    """Parse an amount and round it to 4 fractional digits, half to even."""
    if not value:
        raise ValueError("amount is required")
    amount = Decimal(value)
    if not amount.is_finite():
        raise ValueError(f"amount {value} is not a finite number")
    if amount.adjusted() >= AMOUNT_MAX_INTEGER_DIGITS:
        raise ValueError(f"amount {value} has more than {AMOUNT_MAX_INTEGER_DIGITS} integer digits")
    return amount.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_EVEN)
