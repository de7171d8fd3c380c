"""
Excel export of a directory.
Writes one sheet per table plus a Summary sheet, for inspecting directory contents.
"""
from datetime import datetime
from pathlib import Path
from typing import Dict, Mapping, Union

import pandas as pd
from openpyxl import load_workbook
from openpyxl.styles import Font

from .directory import Directory
from .logger import get_logger
from .records import NamedList

ENTRY_COLUMNS = ["Code", "Description", "Item number", "Entry", "Status", "Max repeat"]
SHEETS = {
    "composites": "Composites",
    "segments": "Segments",
    "messages": "Messages",
}


def _list_frame(table: Mapping[str, NamedList]) -> pd.DataFrame:
    rows = []
    for code in sorted(table):
        named_list = table[code]
        for entry in named_list:
            rows.append([code, named_list.desc, entry.item_no, entry.name, entry.status, entry.max_repeat])
    return pd.DataFrame(rows, columns=ENTRY_COLUMNS)


def directory_frames(directory: Directory) -> Dict[str, pd.DataFrame]:
    """
    Tabular view of a directory, one DataFrame per table.

    Composite, segment and message frames hold one row per entry with the
    owning code and description repeated.
    """
    frames = {
        "data_elements": pd.DataFrame(
            [[d.name, d.format, d.description] for _, d in sorted(directory.data_elements.items())],
            columns=["Code", "Format", "Description"],
        ),
    }
    frames["composites"] = _list_frame(directory.composites)
    frames["segments"] = _list_frame(directory.segments)
    frames["messages"] = _list_frame(directory.messages)
    return frames


def write_directory_workbook(directory: Directory, output_path: Union[str, Path]) -> str:
    """
    Write the directory tables to an .xlsx workbook.

    Args:
        directory: Directory to export
        output_path: Target .xlsx file, or an existing directory to place a
                     timestamped workbook in

    Returns:
        Path of the written workbook
    """
    logger = get_logger()

    output_file = Path(output_path)
    if output_file.is_dir():
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_file = output_file / f"directory_{timestamp}.xlsx"
    output_file.parent.mkdir(parents=True, exist_ok=True)

    frames = directory_frames(directory)
    with pd.ExcelWriter(output_file, engine="openpyxl") as writer:
        frames["data_elements"].to_excel(writer, sheet_name="Data elements", index=False)
        for key, sheet in SHEETS.items():
            frames[key].to_excel(writer, sheet_name=sheet, index=False)

    _add_summary_sheet(output_file, directory)
    logger.info(f"Directory exported to: {output_file}")
    return str(output_file)


def _add_summary_sheet(output_file: Path, directory: Directory) -> None:
    wb = load_workbook(output_file)
    ws = wb.create_sheet("Summary", 0)

    ws['A1'] = "Directory Summary"
    ws['A1'].font = Font(bold=True, size=14)

    metrics = [("Standard", directory.standard.value)]
    metrics += [(key, str(value)) for key, value in sorted(directory.params.items())]
    metrics += [
        ("Data elements", len(directory.data_elements)),
        ("Composites", len(directory.composites)),
        ("Segments", len(directory.segments)),
        ("Messages", len(directory.messages)),
        ("Malformed lines", len(directory.report.diagnostics)),
        ("Timestamp", datetime.now().strftime("%Y-%m-%d %H:%M:%S")),
    ]
    for idx, (metric, value) in enumerate(metrics, start=3):
        ws[f'A{idx}'] = metric
        ws[f'B{idx}'] = value

    row = len(metrics) + 4
    for diagnostic in directory.report.diagnostics:
        ws[f'A{row}'] = f"{diagnostic.file_type} line {diagnostic.line_no}"
        ws[f'B{row}'] = diagnostic.kind
        ws[f'C{row}'] = diagnostic.line
        row += 1

    wb.save(output_file)
