from __future__ import annotations
import os
import sys
from typing import List, Optional, TextIO, Tuple

from .models import DirectoryGroup, ScanContext
from .store import AggregationStore
from .utils import days_label

INDENT = "│  "
BRANCH = "├──"

def report_header(ctx: ScanContext) -> Tuple[str, str, str]:
    value = "Cost [$]" if ctx.cost_mode else f"Size [{ctx.unit}]"
    age = f">{ctx.atime_days} {days_label(ctx.atime_days)} [%]"
    return value, age, "Directory"

def scaled_value(group: DirectoryGroup, ctx: ScanContext) -> float:
    value = group.stale_bytes / ctx.unit_scale
    if ctx.cost_mode:
        value = value * ctx.cost_rate * ctx.atime_days
    return value

def pretty_path(key: str, level: int) -> str:
    if level <= 0:
        return key
    return INDENT * (level - 1) + BRANCH + os.path.basename(key)

def _row(group: DirectoryGroup, level: int, ctx: ScanContext, widths: Tuple[int, int]) -> str:
    vw, pw = widths
    return (f"{scaled_value(group, ctx):>{vw}.2f}  "
            f"{group.stale_percent:>{pw}.0f}   "
            f"{pretty_path(group.key, level)}")

def render_lines(store: AggregationStore, ctx: ScanContext) -> List[str]:
    """Build the report rows: header, the root group, then every other group by key.

    The store passed in is left untouched; the root group is taken out of a copy
    so it is printed once and never again in the sorted body.
    """
    value_h, age_h, dir_h = report_header(ctx)
    widths = (len(value_h), len(age_h))
    lines = [f"{value_h}  {age_h}   {dir_h}"]

    body = store.copy()
    root_group: Optional[DirectoryGroup] = body.remove(ctx.root)
    if root_group is not None:
        lines.append(_row(root_group, 0, ctx, widths))

    for group in body.iter_sorted():
        lines.append(_row(group, group.level, ctx, widths))
    return lines

def render_report(store: AggregationStore, ctx: ScanContext) -> str:
    return "\n".join(render_lines(store, ctx)) + "\n"

def print_report(store: AggregationStore, ctx: ScanContext, out: Optional[TextIO] = None) -> None:
    out = out if out is not None else sys.stdout
    out.write(render_report(store, ctx))
