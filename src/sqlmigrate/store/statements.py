"""SQL script splitting.

The sqlite3 module only executes one statement per ``execute()`` call,
and ``executescript()`` commits any open transaction before it runs. To
keep a migration script and its control-table row in one transaction
the script is split into single statements first.
"""

import re
import sqlite3

_COMMENTS = re.compile(r"--[^\n]*|/\*.*?\*/", re.DOTALL)


def _is_blank(fragment: str) -> bool:
    return not _COMMENTS.sub("", fragment).strip()


def split_sql_statements(script: str) -> list[str]:
    """Split a SQL script into individual statements.

    Statement boundaries are found with ``sqlite3.complete_statement``,
    so semicolons inside string literals, comments and trigger bodies
    do not end a statement. Fragments holding only whitespace or
    comments are dropped. A trailing statement without a semicolon is
    kept.

    Args:
        script: SQL text, possibly holding many statements.

    Returns:
        Statements in script order.
    """
    statements = []
    start = 0
    for i, char in enumerate(script):
        if char != ";":
            continue
        candidate = script[start : i + 1]
        if sqlite3.complete_statement(candidate):
            if not _is_blank(candidate[:-1]):
                statements.append(candidate.strip())
            start = i + 1

    tail = script[start:]
    if not _is_blank(tail):
        statements.append(tail.strip())
    return statements


_LEADING_COMMENTS = re.compile(r"\A(?:\s+|--[^\n]*|/\*.*?\*/)*", re.DOTALL)
_TRANSACTION_CONTROL = re.compile(
    r"(BEGIN|COMMIT|END|ROLLBACK|SAVEPOINT|RELEASE)\b", re.IGNORECASE
)


def find_transaction_control(statements: list[str]) -> str | None:
    """Return the first statement that opens or ends a transaction.

    Migrations run inside a transaction owned by the backend; a script
    that commits or rolls back on its own would split the script from
    its control-table row. ``CREATE TRIGGER ... BEGIN`` bodies are not
    matched since only the leading keyword is inspected.

    Args:
        statements: Statements as returned by ``split_sql_statements``.

    Returns:
        The offending statement, or None.
    """
    for statement in statements:
        body = _LEADING_COMMENTS.sub("", statement, count=1)
        if _TRANSACTION_CONTROL.match(body):
            return statement
    return None
