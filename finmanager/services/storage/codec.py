"""
Persistence Codec

Line-oriented text format for ledgers and user directories.

Every line is one JSON array whose first element is a tag naming the
record. JSON string escaping means a category or name containing a
newline, a quote or any other separator can't break the framing.
Non-ASCII text is written as \\u escapes, so every file is plain ASCII
whatever encoding it is saved in.

Ledger file:

    ["ledger", <count>, "<total_income>", "<total_expense>", <last_transaction_id>]
    ["txn", <id>, "Income" | "Expense", "<category>", "<amount>"]      x count

Directory file:

    ["directory", <user_count>, <last_user_id>, <last_transaction_id>]
    ["user", <id>, "<name>", "<total_income>", "<total_expense>", <count>]
    ["txn", ...]                                                       x count
    ...                                                                x user_count

Amounts are decimal strings so they round-trip exactly. The last issued
IDs are stored in the header so a reload never reissues the ID of a
record that was deleted before the save.

DESIGN DECISION: Decoding is strict. Any fault raises CorruptDataError
carrying a partial result built from every complete record before the
fault; read_ledger/read_directory turn that into a logged recovery.
"""

import json
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import structlog

from finmanager.exceptions import CorruptDataError
from finmanager.ledger.directory import UserDirectory
from finmanager.ledger.ledger import Ledger
from finmanager.models.transaction import Transaction, TransactionKind


logger = structlog.get_logger(__name__)

LEDGER_TAG = "ledger"
DIRECTORY_TAG = "directory"
USER_TAG = "user"
TRANSACTION_TAG = "txn"


class _Malformed(Exception):
    def __init__(self, message: str, line_number: int):
        super().__init__(message)
        self.message = message
        self.line_number = line_number


# =============================================================================
# ENCODING
# =============================================================================

def _dump(row: list) -> str:
    return json.dumps(row, ensure_ascii=True)


def _transaction_row(txn: Transaction) -> list:
    return [TRANSACTION_TAG, txn.id, txn.kind.value, txn.category, str(txn.amount)]


def encode_ledger(ledger: Ledger) -> str:
    """Serialize a single ledger."""
    lines = [_dump([
        LEDGER_TAG,
        len(ledger),
        str(ledger.total_income),
        str(ledger.total_expense),
        ledger.last_transaction_id,
    ])]
    lines.extend(_dump(_transaction_row(txn)) for txn in ledger.list_transactions())
    return "\n".join(lines) + "\n"


def encode_directory(directory: UserDirectory) -> str:
    """Serialize a user directory with every user's ledger."""
    lines = [_dump([
        DIRECTORY_TAG,
        len(directory),
        directory.user_ids.last_id,
        directory.transaction_ids.last_id,
    ])]
    for user in directory.users():
        ledger = user.ledger
        lines.append(_dump([
            USER_TAG,
            user.id,
            user.name,
            str(ledger.total_income),
            str(ledger.total_expense),
            len(ledger),
        ]))
        lines.extend(_dump(_transaction_row(txn)) for txn in ledger.list_transactions())
    return "\n".join(lines) + "\n"


# =============================================================================
# DECODING
# =============================================================================

class _LineReader:
    """Hands out parsed rows with their 1-based line numbers."""

    def __init__(self, text: str):
        # Split on "\n" only: str.splitlines() would also break on
        # characters like U+2028 that JSON leaves unescaped.
        lines = text.split("\n")
        while lines and not lines[-1].strip():
            lines.pop()
        self._lines = lines
        self._index = 0

    def next_row(self, tag: str) -> tuple[int, list]:
        line_number = self._index + 1
        if self._index >= len(self._lines):
            raise _Malformed(f"file ends where a '{tag}' record was expected", line_number)

        raw = self._lines[self._index]
        self._index += 1
        try:
            row = json.loads(raw)
        except json.JSONDecodeError as e:
            raise _Malformed(f"not a valid record ({e.msg})", line_number)

        if not isinstance(row, list) or not row or row[0] != tag:
            raise _Malformed(f"expected a '{tag}' record", line_number)
        return line_number, row

    def expect_end(self) -> None:
        if self._index < len(self._lines):
            raise _Malformed("unexpected data after the last record", self._index + 1)


def _expect_length(row: list, length: int, line_number: int) -> None:
    if len(row) != length:
        raise _Malformed(
            f"'{row[0]}' record has {len(row)} fields, expected {length}",
            line_number,
        )


def _parse_int(value: Any, field: str, line_number: int, minimum: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise _Malformed(f"{field} must be an integer >= {minimum}, got {value!r}", line_number)
    return value


def _parse_decimal(value: Any, field: str, line_number: int) -> Decimal:
    if not isinstance(value, str):
        raise _Malformed(f"{field} must be a decimal string, got {value!r}", line_number)
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise _Malformed(f"{field} is not a number: {value!r}", line_number)
    if not amount.is_finite():
        raise _Malformed(f"{field} must be finite, got {value!r}", line_number)
    return amount


def _parse_text(value: Any, field: str, line_number: int) -> str:
    if not isinstance(value, str):
        raise _Malformed(f"{field} must be a string, got {value!r}", line_number)
    return value


def _parse_transaction(reader: _LineReader, seen_ids: set[int]) -> Transaction:
    line_number, row = reader.next_row(TRANSACTION_TAG)
    _expect_length(row, 5, line_number)

    txn_id = _parse_int(row[1], "transaction id", line_number, minimum=1)
    if txn_id in seen_ids:
        raise _Malformed(f"duplicate transaction id {txn_id}", line_number)

    try:
        kind = TransactionKind(row[2])
    except ValueError:
        raise _Malformed(f"unknown transaction kind {row[2]!r}", line_number)

    txn = Transaction(
        id=txn_id,
        kind=kind,
        category=_parse_text(row[3], "category", line_number),
        amount=_parse_decimal(row[4], "amount", line_number),
    )
    seen_ids.add(txn_id)
    return txn


def decode_ledger(text: str) -> Ledger:
    """
    Parse a single-ledger file.

    Raises:
        CorruptDataError: On any fault. .partial holds the complete
                          records read before it, with recomputed totals.
    """
    reader = _LineReader(text)
    transactions: list[Transaction] = []
    seen_ids: set[int] = set()
    last_transaction_id = 0

    try:
        line_number, header = reader.next_row(LEDGER_TAG)
        _expect_length(header, 5, line_number)
        count = _parse_int(header[1], "transaction count", line_number)
        total_income = _parse_decimal(header[2], "total income", line_number)
        total_expense = _parse_decimal(header[3], "total expense", line_number)
        last_transaction_id = _parse_int(header[4], "last transaction id", line_number)

        for _ in range(count):
            transactions.append(_parse_transaction(reader, seen_ids))
        reader.expect_end()
    except _Malformed as e:
        partial = Ledger.restore(transactions, last_transaction_id=last_transaction_id)
        raise CorruptDataError(e.message, e.line_number, partial=partial) from None

    return Ledger.restore(
        transactions,
        total_income=total_income,
        total_expense=total_expense,
        last_transaction_id=last_transaction_id,
    )


def decode_directory(text: str) -> UserDirectory:
    """
    Parse a directory file.

    Raises:
        CorruptDataError: On any fault. .partial holds every user read
                          before it; a user whose block was cut short keeps
                          the transactions that were complete, with totals
                          recomputed from them.
    """
    reader = _LineReader(text)
    directory = UserDirectory()
    seen_ids: set[int] = set()
    pending: Optional[tuple[int, str, list[Transaction]]] = None

    try:
        line_number, header = reader.next_row(DIRECTORY_TAG)
        _expect_length(header, 4, line_number)
        user_count = _parse_int(header[1], "user count", line_number)
        directory.user_ids.advance_to(_parse_int(header[2], "last user id", line_number))
        directory.transaction_ids.advance_to(
            _parse_int(header[3], "last transaction id", line_number)
        )

        for _ in range(user_count):
            line_number, row = reader.next_row(USER_TAG)
            _expect_length(row, 6, line_number)
            user_id = _parse_int(row[1], "user id", line_number, minimum=1)
            if user_id in directory:
                raise _Malformed(f"duplicate user id {user_id}", line_number)
            name = _parse_text(row[2], "name", line_number)
            total_income = _parse_decimal(row[3], "total income", line_number)
            total_expense = _parse_decimal(row[4], "total expense", line_number)
            count = _parse_int(row[5], "transaction count", line_number)

            pending = (user_id, name, [])
            for _ in range(count):
                pending[2].append(_parse_transaction(reader, seen_ids))

            ledger = Ledger.restore(
                pending[2],
                total_income=total_income,
                total_expense=total_expense,
                allocator=directory.transaction_ids,
            )
            directory.restore_user(user_id, name, ledger)
            pending = None

        reader.expect_end()
    except _Malformed as e:
        if pending is not None:
            user_id, name, transactions = pending
            ledger = Ledger.restore(transactions, allocator=directory.transaction_ids)
            directory.restore_user(user_id, name, ledger)
        raise CorruptDataError(e.message, e.line_number, partial=directory) from None

    return directory


# =============================================================================
# LOAD POLICY
# =============================================================================

def read_ledger(text: Optional[str], source: str) -> Ledger:
    """
    Decode a ledger, treating absence and damage as recoverable.

    None (no data) gives an empty ledger. A damaged file gives whatever
    could be recovered, with a warning.
    """
    if text is None:
        return Ledger()

    try:
        ledger = decode_ledger(text)
    except CorruptDataError as e:
        logger.warning(
            "data_file_corrupt",
            source=source,
            line=e.line_number,
            error=str(e),
            recovered_transactions=len(e.partial),
        )
        return e.partial

    logger.info("data_loaded", source=source, transactions=len(ledger))
    return ledger


def read_directory(text: Optional[str], source: str) -> UserDirectory:
    """Directory counterpart of read_ledger."""
    if text is None:
        return UserDirectory()

    try:
        directory = decode_directory(text)
    except CorruptDataError as e:
        logger.warning(
            "data_file_corrupt",
            source=source,
            line=e.line_number,
            error=str(e),
            recovered_users=len(e.partial),
            recovered_transactions=e.partial.transaction_count,
        )
        return e.partial

    logger.info(
        "data_loaded",
        source=source,
        users=len(directory),
        transactions=directory.transaction_count,
    )
    return directory
