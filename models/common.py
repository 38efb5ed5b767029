import uuid


def new_id() -> str:
    """Opaque unique identifier for ledger entities."""
    return str(uuid.uuid4())


def reject_null(value):
    """For partial updates: a field may be omitted, but not sent as null."""
    if value is None:
        raise ValueError("Field may be omitted but not null")
    return value
