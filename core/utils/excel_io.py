"""Excel 写出公共逻辑：按行写入表头与数据，可选将失败行标红。"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import openpyxl  # type: ignore[import-untyped]
from openpyxl.styles import Font  # type: ignore[import-untyped]


def write_sheet(
    output_path: Path,
    sheet_title: str,
    headers: tuple[str, ...],
    rows: list[tuple[Any, ...]],
    *,
    failed_row_predicate: Callable[[tuple[Any, ...]], bool] | None = None,
    red_font_hex: str = "FF0000",
) -> None:
    """写表头与数据行；若 failed_row_predicate(row) 为 True，该行单元格标红。父目录会自动创建。"""
    wb = openpyxl.Workbook()
    ws = wb.active
    if ws is None:
        raise RuntimeError("无法创建工作表")
    ws.title = sheet_title
    red_font = Font(color=red_font_hex)
    for col, h in enumerate(headers, start=1):
        ws.cell(row=1, column=col, value=h)
    for row_idx, row_data in enumerate(rows, start=2):
        failed = bool(failed_row_predicate and failed_row_predicate(row_data))
        for col_idx, value in enumerate(row_data, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if failed:
                cell.font = red_font
    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output_path)
