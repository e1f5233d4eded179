"""Public interface for the ``statement_desk`` package.

Re-exports the table engine, the record models and the record source/client
helpers as the stable import surface. No runtime logic lives here.
"""

from .client import fetch_statements
from .columns import (
    DEFAULT_FILTER_FIELD,
    STATEMENT_COLUMNS,
    TableConfigError,
)
from .models import (
    UNSORTED,
    Ascending,
    ColumnDescriptor,
    Descending,
    SortState,
    Statement,
    Unsorted,
)
from .shell import Empty, Failed, Loading, Ready, StatementsView
from .source import (
    RecordSourceError,
    generate_sample_statements,
    load_statements,
)
from .table import PaginatedTable

__all__ = [
    # Table engine
    "PaginatedTable",
    "TableConfigError",
    "STATEMENT_COLUMNS",
    "DEFAULT_FILTER_FIELD",
    # Models / types
    "Statement",
    "ColumnDescriptor",
    "SortState",
    "Unsorted",
    "Ascending",
    "Descending",
    "UNSORTED",
    # Records
    "RecordSourceError",
    "fetch_statements",
    "generate_sample_statements",
    "load_statements",
    # Shell
    "StatementsView",
    "Loading",
    "Failed",
    "Empty",
    "Ready",
]
