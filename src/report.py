import csv
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Iterable, TextIO

from models import AccountSnapshot

HEADER = ("client", "available", "held", "total", "locked")
FOUR_PLACES = Decimal("0.0001")


def format_amount(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    quantized = value.quantize(FOUR_PLACES, rounding=ROUND_HALF_EVEN)
    if quantized.is_zero():
        quantized = abs(quantized)
    return f"{quantized:f}"


def write_accounts(accounts: Iterable[AccountSnapshot], stream: TextIO, sort_by_client: bool = False) -> int:
    """Write account snapshots as CSV. Returns the number of rows written."""
    if sort_by_client:
        accounts = sorted(accounts, key=lambda account: account.client_id)

    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(HEADER)

    rows = 0
    for account in accounts:
        writer.writerow((
            account.client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ))
        rows += 1
    return rows
