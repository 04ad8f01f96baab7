from __future__ import annotations
from .models import UNITS

def format_bytes(num: int) -> str:
    if num < 0:
        return str(num)
    units = ["B", "KB", "MB", "GB", "TB", "PB", "EB"]
    x = float(num)
    for u in units:
        if x < 1024.0 or u == units[-1]:
            return f"{x:.2f} {u}" if u != "B" else f"{int(x)} {u}"
        x /= 1024.0
    return f"{x:.2f} EB"

def parse_units(text: str) -> str:
    """Map a unit argument to its canonical name by its first letter.

    "k", "kb", "KiB" all give "kB"; "g" gives "GB" and so on.
    Raises ValueError for anything else.
    """
    if not text:
        raise ValueError("empty units")
    first = text[0].lower()
    for u in UNITS:
        if u[0].lower() == first:
            return u
    raise ValueError(f"unknown units: {text}")

def days_label(days: int) -> str:
    return "day" if days == 1 else "days"
