from .committer import ImportCommitError
from .kinds import KINDS, ORDERS, RETURNS, ImportKind
from .parser import ColumnMismatchError, EmptyUploadError
from .service import import_orders, import_returns, run_import

__all__ = [
    "ImportKind", "KINDS", "ORDERS", "RETURNS",
    "EmptyUploadError", "ColumnMismatchError", "ImportCommitError",
    "run_import", "import_orders", "import_returns",
]
