"""ObjectId helpers."""
from bson import ObjectId, errors


def safe_object_id(value):
    try:
        return ObjectId(str(value))
    except (errors.InvalidId, TypeError):
        return None


def object_ids(values):
    """Convert a list of id strings, dropping anything that isn't an ObjectId."""
    return [oid for oid in (safe_object_id(v) for v in values) if oid is not None]
