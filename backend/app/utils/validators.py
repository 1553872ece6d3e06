"""Request payload validators."""
from app.utils.errors import ValidationError


def require_keys(payload, *keys):
    missing = [k for k in keys if (payload or {}).get(k) in (None, "", [])]
    if missing:
        raise ValidationError(f"missing keys: {missing}")
    return True


def require_list(payload, key):
    value = (payload or {}).get(key)
    if not isinstance(value, list):
        raise ValidationError(f"{key} must be a list")
    return value
