"""Record identifiers."""

from cuid2 import cuid_wrapper

# One generator per process: shared counter and host fingerprint.
_next_cuid = cuid_wrapper()


def new_record_id() -> str:
    """Return a new CUID2 string used as the primary key of every persisted row."""
    return _next_cuid()
