from __future__ import annotations

BIRTHDAY_ROLE = "birthday"


def name_day_role(index: int) -> str:
    return f"nameday_{index}"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def derive_notification_id(contact_id: int, role: str) -> int:
    """Stable non-negative handle for ``"<contact_id>_<role>"``.

    A 31-multiplier rolling hash over UTF-16 code units with signed 32-bit
    wrap-around, so the same pair maps to the same id across restarts.
    """
    seed = f"{contact_id}_{role}"
    units = seed.encode("utf-16-le")

    hash_value = 0
    for offset in range(0, len(units), 2):
        code_unit = int.from_bytes(units[offset : offset + 2], "little")
        hash_value = _to_int32((hash_value << 5) - hash_value + code_unit)
    return abs(hash_value)
