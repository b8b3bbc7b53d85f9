"""
Helpers to turn calculation results into a compact, human-readable console
summary. Also reads back batch output files written by ``mazerion batch``.
"""

from __future__ import annotations

import json
from itertools import groupby
from pathlib import Path
from typing import Any

from mazerion.models.outputs import CalcResponse, CalculatorInfo


def _fmt_meta_key(key: str) -> str:
    """Turn a metadata key like ``honey_kg`` into ``Honey kg``."""
    text = key.replace("_", " ")
    return text[:1].upper() + text[1:]


def _key_width(keys: list[str], minimum: int = 12, maximum: int = 32) -> int:
    if not keys:
        return minimum
    return max(minimum, min(maximum, max(len(_fmt_meta_key(k)) for k in keys)))


def print_result(response: CalcResponse) -> None:
    """Print one calculation: the headline value, warnings, then metadata."""
    print(f"{response.calculator_id}: {response.display}")

    if response.warnings:
        print("Warnings:")
        for w in response.warnings:
            print(f"  ! {w}")

    if response.metadata:
        width = _key_width(list(response.metadata))
        print("Details:")
        for key, value in response.metadata.items():
            print(f"  {_fmt_meta_key(key):<{width}}  {value}")


def print_calculator_list(calculators: list[CalculatorInfo]) -> None:
    """Print calculators grouped by category, keeping the given order."""
    width = max((len(c.id) for c in calculators), default=10)
    for category, group in groupby(calculators, key=lambda c: c.category):
        print(f"\n{category}")
        for calc in group:
            print(f"  {calc.id:<{width}}  {calc.name}")


def print_calculator_info(info: CalculatorInfo) -> None:
    print(f"{info.name} ({info.id})")
    print(f"Category: {info.category}")
    print(info.description)


def _summarize_item(item: dict[str, Any]) -> str:
    calc_id = item.get("calculator_id", "?")
    if item.get("error"):
        return f"{calc_id}: FAILED ({item.get('error_kind', 'error')}) {item['error']}"
    result = item.get("result") or {}
    warnings = result.get("warnings") or []
    suffix = f" [{len(warnings)} warning(s)]" if warnings else ""
    return f"{calc_id}: {result.get('display', 'n/a')}{suffix}"


def print_readable_output(json_path: Path) -> None:
    """
    Print a human-friendly summary of a batch output JSON file.

    Args:
        json_path: Path to a file written by ``mazerion batch --output``.
    """
    data = json.loads(Path(json_path).read_text())
    results = data.get("results", [])

    print(
        f"Batch: {len(results)} entries | "
        f"{data.get('succeeded', 0)} succeeded | {data.get('failed', 0)} failed"
    )
    for idx, item in enumerate(results, 1):
        print(f"[{idx}] {_summarize_item(item)}")
