import csv
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Iterable, List, TextIO

from models import AccountSnapshot, AMOUNT_QUANTUM

OUTPUT_COLUMNS = ("client", "available", "held", "total", "locked")


def format_decimal(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places, rounding half to even."""
    quantized = value.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_EVEN)
    if quantized.is_zero():
        quantized = quantized.copy_abs()
    return f"{quantized:f}"


def render_row(snapshot: AccountSnapshot) -> List[str]:
    return [
        str(snapshot.client_id),
        format_decimal(snapshot.available),
        format_decimal(snapshot.held),
        format_decimal(snapshot.total),
        str(snapshot.locked).lower(),
    ]


def write_summaries(snapshots: Iterable[AccountSnapshot], stream: TextIO) -> int:
    """
    Write one CSV row per snapshot to stream. Returns the number of rows written.
    Every row is rendered before the first one is written, so a formatting error leaves stream untouched.
    """
    rows = [render_row(snapshot) for snapshot in snapshots]

    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_COLUMNS)
    writer.writerows(rows)
    return len(rows)
