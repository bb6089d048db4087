"""Shared domain utilities.

- Result type for explicit error handling at I/O boundaries
- Identifier, clock and percentage helpers
"""

from tasknest.domain.shared.common import ensure_aware, new_id, percent, utcnow
from tasknest.domain.shared.result import Err, Ok, Result

__all__ = [
    # Result
    "Ok",
    "Err",
    "Result",
    # Helpers
    "new_id",
    "utcnow",
    "ensure_aware",
    "percent",
]
