from typing import Any, Optional

MESSAGE_KEYS = ("message", "detail", "error", "non_field_errors")


def extract_error_message(payload: Any) -> Optional[str]:
    """
    Pull a human readable message out of an API error body.

    Understands `{"message": ...}`, `{"detail": ...}`, `{"error": ...}` and
    field errors such as `{"quantity": ["Only 3 left in stock."]}`.
    """
    if not payload:
        return None

    if isinstance(payload, str):
        return payload.strip() or None

    if isinstance(payload, list):
        return extract_error_message(payload[0]) if payload else None

    if not isinstance(payload, dict):
        return None

    for key in MESSAGE_KEYS:
        if payload.get(key):
            return extract_error_message(payload[key])

    for value in payload.values():
        message = extract_error_message(value)
        if message:
            return message

    return None


def field_error(payload: Any, field: str) -> Optional[str]:
    if isinstance(payload, dict) and payload.get(field):
        return extract_error_message(payload[field])
    return None
