import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, List, Optional, TextIO

from errors import InputSourceError, MalformedRecordError
from models import Transaction, TransactionType, MAX_CLIENT_ID, MAX_TRANSACTION_ID

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("type", "client", "tx")
AMOUNT_COLUMN = "amount"

# Column name -> position in a row.
DEFAULT_LAYOUT: Dict[str, int] = {"type": 0, "client": 1, "tx": 2, "amount": 3}


def parse_header(row: List[str]) -> Optional[Dict[str, int]]:
    """Map header names to column positions, or None if the row does not name the required columns."""
    names = [name.strip().lower() for name in row]
    if any(column not in names for column in REQUIRED_COLUMNS):
        return None

    layout = {}
    for column in REQUIRED_COLUMNS + (AMOUNT_COLUMN,):
        if column in names:
            layout[column] = names.index(column)
    return layout


def parse_row(
    row: List[str],
    layout: Optional[Dict[str, int]] = None,
    line_number: Optional[int] = None,
) -> Transaction:
    """
    Decode one CSV row into a Transaction.

    Every field is whitespace-trimmed. A missing or empty amount column is
    treated as absent. The amount of dispute, resolve and chargeback rows is
    ignored.

    Raises:
        MalformedRecordError: unknown type, bad or out-of-range ids,
            unparseable amount, or a row with too few/many fields.
    """
    if layout is None:
        layout = DEFAULT_LAYOUT

    fields = [value.strip() for value in row]
    if len(fields) > len(layout):
        raise MalformedRecordError(f"expected at most {len(layout)} fields, got {len(fields)}", line_number)

    def column(name: str) -> Optional[str]:
        index = layout.get(name)
        if index is None or index >= len(fields):
            return None
        return fields[index]

    type_str = column("type")
    client_str = column("client")
    tx_str = column("tx")
    if type_str is None or client_str is None or tx_str is None:
        raise MalformedRecordError(f"expected at least {len(REQUIRED_COLUMNS)} fields, got {len(fields)}", line_number)

    try:
        transaction_type = TransactionType(type_str.lower())
    except ValueError:
        raise MalformedRecordError(f"unknown transaction type {type_str!r}", line_number) from None

    client_id = _parse_id(client_str, "client", MAX_CLIENT_ID, line_number)
    transaction_id = _parse_id(tx_str, "tx", MAX_TRANSACTION_ID, line_number)

    amount = None
    if transaction_type.carries_amount:
        amount = _parse_amount(column(AMOUNT_COLUMN), line_number)

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(text: str, name: str, maximum: int, line_number: Optional[int]) -> int:
    if not (text.isascii() and text.isdigit()):
        raise MalformedRecordError(f"{name} id {text!r} is not an unsigned integer", line_number)
    value = int(text)
    if value > maximum:
        raise MalformedRecordError(f"{name} id {value} exceeds maximum {maximum}", line_number)
    return value


def _parse_amount(text: Optional[str], line_number: Optional[int]) -> Optional[Decimal]:
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise MalformedRecordError(f"amount {text!r} is not a decimal number", line_number) from None
    if not amount.is_finite():
        raise MalformedRecordError(f"amount {text!r} is not finite", line_number)
    return amount


class TransactionReader:
    """
    Streams transactions out of a CSV text source, one row at a time.
    The first non-blank row is the header when it names the type, client and
    tx columns; rows are yielded in input order.
    """

    def __init__(self, stream: TextIO, source_name: str = "<stream>"):
        self._stream = stream
        self._source_name = source_name
        self.malformed_count = 0

    @classmethod
    def from_path(cls, filepath: str) -> "TransactionReader":
        try:
            stream = open(filepath, "r", encoding="utf-8-sig", newline="")
        except OSError as e:
            raise InputSourceError(f"Cannot open input {filepath}: {e}") from e
        return cls(stream, source_name=str(filepath))

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "TransactionReader":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def records(self, skip_malformed: bool = True) -> Iterator[Transaction]:
        """
        Lazily yield parsed transactions.

        Malformed rows are logged, counted in ``malformed_count`` and skipped,
        unless skip_malformed is False, in which case MalformedRecordError
        propagates. Failures of the underlying stream raise InputSourceError.
        """
        reader = csv.reader(self._stream)
        layout = None
        try:
            for row in reader:
                if not any(value.strip() for value in row):
                    continue

                if layout is None:
                    layout = parse_header(row)
                    if layout is not None:
                        continue
                    # No header: the first row is data in the default column order.
                    logger.warning(f"No header row in {self._source_name}, reading columns as type, client, tx, amount")
                    layout = DEFAULT_LAYOUT

                try:
                    transaction = parse_row(row, layout, reader.line_num)
                except MalformedRecordError as e:
                    if not skip_malformed:
                        raise
                    self.malformed_count += 1
                    logger.warning(f"Skipping malformed record in {self._source_name}: {e}")
                    continue

                yield transaction
        except (csv.Error, UnicodeDecodeError, OSError) as e:
            raise InputSourceError(f"Cannot read input {self._source_name}: {e}") from e
