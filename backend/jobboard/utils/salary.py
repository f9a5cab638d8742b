from __future__ import annotations


def _has_required_amount(pay_type: str, low, high, amount) -> bool:
    if pay_type == "fixed":
        return amount is not None
    if pay_type == "range":
        return low is not None and high is not None
    if pay_type == "minimum":
        return low is not None
    if pay_type == "maximum":
        return high is not None
    return False


def resolve_pay_type(pay_type: str | None, low, high, amount) -> str | None:
    """Keep a declared pay type only when its amount is present, else infer one from the amounts."""
    if pay_type is not None and _has_required_amount(pay_type, low, high, amount):
        return pay_type
    if amount is not None:
        return "fixed"
    if low is not None and high is not None:
        return "range"
    if low is not None:
        return "minimum"
    if high is not None:
        return "maximum"
    return None
