"""Municipality ID format validation.

Shared by the document store (every tenant-scoped path) and the API
dependencies so a crafted ID can never address another tenant's sub-tree.
"""

import re

MUNICIPALITY_ID_MAX_LENGTH = 64
_MUNICIPALITY_ID_RE = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(MUNICIPALITY_ID_MAX_LENGTH) + r"}$"
)


def is_valid_municipality_id_format(value: str | None) -> bool:
    """Return True if value is safe to embed in a document path."""
    if not value or len(value) > MUNICIPALITY_ID_MAX_LENGTH:
        return False
    return bool(_MUNICIPALITY_ID_RE.fullmatch(value))
