"""
CSV Loader Module
Parses the semicolon-delimited directory files (ED, CD, SD, MD) into lookup tables.

Parsing is best-effort: a malformed line is reported and loading continues
with whatever could be read from it.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from .logger import get_logger
from .path_resolver import data_element_prefix, find_path
from .records import (
    DataElementProperties,
    Entry,
    NamedList,
    ParseDiagnostic,
    ParseReport,
)

# Message branches are unnumbered at this level
MESSAGE_ITEM_NO = "0000"

_TRAILING_TERMINATOR_RE = re.compile(r";\s*$")
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")
_MESSAGE_TYPE_RE = re.compile(r"[A-Z]{6}")


def split_fields(text: str) -> List[str]:
    """Split on ';', dropping trailing empty fields as the directory files expect."""
    fields = text.split(";")
    while fields and fields[-1] == "":
        fields.pop()
    return fields


def to_int(value: Optional[str]) -> int:
    """Leading integer of a field, 0 when there is none."""
    if not value:
        return 0
    m = _LEADING_INT_RE.match(value)
    return int(m.group(1)) if m else 0


def _head_and_list(line: str) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """Split a CD/SD/MD line into name, description and the raw entry list."""
    parts = line.split(";", 2)
    if parts == [""]:
        parts = []
    parts += [None] * (3 - len(parts))
    return parts[0], parts[1], parts[2]


def _groups(remainder: str, size: int) -> Iterator[Tuple[List[Optional[str]], bool]]:
    fields = split_fields(_TRAILING_TERMINATOR_RE.sub("", remainder, count=1))
    for i in range(0, len(fields), size):
        group: List[Optional[str]] = list(fields[i:i + size])
        complete = len(group) == size
        group += [None] * (size - len(group))
        yield group, complete


def parse_data_element_line(line: str) -> Tuple[Optional[DataElementProperties], List[str]]:
    """
    Parse an ED line: name;format;dummy;description

    Returns:
        (properties or None for a blank line, list of problem kinds)
    """
    fields = split_fields(line.strip())
    if not fields:
        return None, ["line"]
    fields += [None] * (4 - len(fields))
    name, fmt, _dummy, description = fields[:4]
    problems = ["line"] if description is None else []
    return DataElementProperties(name=name, format=fmt, description=description), problems


def _parse_list_line(line: str, size: int,
                     make_entry: Callable[[List[Optional[str]]], Entry]) -> Tuple[NamedList, List[str]]:
    name, desc, remainder = _head_and_list(line)
    named_list = NamedList(name=name, desc=desc)
    if remainder is None or not name:
        return named_list, ["line"]

    problems = []
    for group, complete in _groups(remainder, size):
        if not complete:
            problems.append("list")
        named_list.append(make_entry(group))
    return named_list, problems


def parse_composite_line(line: str) -> Tuple[NamedList, List[str]]:
    """
    Parse a CD line: name;desc;(item_no;code;status;format)*

    The format field is read but not kept: composite entries never repeat.
    """
    return _parse_list_line(
        line, 4, lambda g: Entry(item_no=g[0], name=g[1], status=g[2], max_repeat=1)
    )


def parse_segment_line(line: str) -> Tuple[NamedList, List[str]]:
    """Parse an SD line: name;desc;(item_no;code;status;maxrep)*"""
    return _parse_list_line(
        line, 4, lambda g: Entry(item_no=g[0], name=g[1], status=g[2], max_repeat=to_int(g[3]))
    )


def parse_message_line(line: str) -> Tuple[NamedList, List[str]]:
    """Parse an MD line: name;desc;(code;status;maxrep)*"""
    return _parse_list_line(
        line, 3, lambda g: Entry(item_no=MESSAGE_ITEM_NO, name=g[0], status=g[1], max_repeat=to_int(g[2]))
    )


def message_type_filter(params: Mapping[str, Any]) -> Optional[str]:
    """
    Six-letter message type to restrict MD parsing to, if d0065 names one.

    Lines are then selected by plain substring match on the raw line.
    """
    d0065 = params.get("d0065")
    if not isinstance(d0065, str):
        return None
    m = _MESSAGE_TYPE_RE.search(d0065)
    return m.group(0) if m else None


def read_lines(path: str, encoding: str = "utf-8") -> Iterator[Tuple[int, str]]:
    """Yield (line number, line without its terminator) for each line of a file."""
    with open(path, "r", encoding=encoding, errors="replace", newline="") as f:
        for line_no, line in enumerate(f, start=1):
            yield line_no, line.rstrip("\r\n")


@dataclass
class DirectoryTables:
    """The four lookup tables of a directory, keyed by code."""
    data_elements: Dict[str, DataElementProperties] = field(default_factory=dict)
    composites: Dict[str, NamedList] = field(default_factory=dict)
    segments: Dict[str, NamedList] = field(default_factory=dict)
    messages: Dict[str, NamedList] = field(default_factory=dict)


class CsvLoader:
    """Loads the four directory files resolved from one prefix/extension pair."""

    def __init__(self, prefix: str, ext: str, search_path: str, encoding: str = "utf-8"):
        self.prefix = prefix
        self.ext = ext
        self.search_path = search_path
        self.encoding = encoding
        self.logger = get_logger()
        self.report = ParseReport()

    def _diagnose(self, file_type: str, line_no: int, problems: List[str], line: str) -> None:
        for kind in problems:
            diagnostic = ParseDiagnostic(file_type=file_type, line_no=line_no, kind=kind, line=line)
            self.report.diagnostics.append(diagnostic)
            self.logger.warning(f"{diagnostic} [{self.report.files.get(file_type, '')}]")

    def _locate(self, file_type: str, prefix: Optional[str] = None) -> str:
        path = find_path(prefix or self.prefix, self.ext, file_type, self.search_path)
        self.report.files[file_type] = path
        self.logger.debug(f"Reading {file_type} file: {path}")
        return path

    def load_data_elements(self) -> Dict[str, DataElementProperties]:
        path = self._locate("ED", data_element_prefix(self.prefix))
        table: Dict[str, DataElementProperties] = {}
        for line_no, line in read_lines(path, self.encoding):
            props, problems = parse_data_element_line(line)
            self._diagnose("ED", line_no, problems, line)
            if props is not None:
                table[props.name] = props
        self.report.counts["ED"] = len(table)
        return table

    def _load_lists(self, file_type: str,
                    parse: Callable[[str], Tuple[NamedList, List[str]]],
                    only: Optional[str] = None) -> Dict[str, NamedList]:
        path = self._locate(file_type)
        table: Dict[str, NamedList] = {}
        for line_no, line in read_lines(path, self.encoding):
            if only and only not in line:
                continue
            named_list, problems = parse(line)
            self._diagnose(file_type, line_no, problems, line)
            if named_list.name:
                table[named_list.name] = named_list
        self.report.counts[file_type] = len(table)
        return table

    def load_composites(self) -> Dict[str, NamedList]:
        return self._load_lists("CD", parse_composite_line)

    def load_segments(self) -> Dict[str, NamedList]:
        return self._load_lists("SD", parse_segment_line)

    def load_messages(self, params: Mapping[str, Any]) -> Dict[str, NamedList]:
        return self._load_lists("MD", parse_message_line, only=message_type_filter(params))

    def load(self, params: Mapping[str, Any]) -> DirectoryTables:
        """
        Read all four files. Any missing file aborts the whole load.

        Returns:
            DirectoryTables; diagnostics are collected in self.report
        """
        tables = DirectoryTables(
            data_elements=self.load_data_elements(),
            composites=self.load_composites(),
            segments=self.load_segments(),
            messages=self.load_messages(params),
        )
        self.logger.info(
            f"Loaded directory {self.prefix}*.{self.ext}: "
            f"{len(tables.data_elements)} DE, {len(tables.composites)} CDE, "
            f"{len(tables.segments)} segments, {len(tables.messages)} messages, "
            f"{len(self.report.diagnostics)} malformed lines"
        )
        return tables


def load_tables(prefix: str, ext: str, params: Mapping[str, Any], search_path: str,
                encoding: str = "utf-8") -> Tuple[DirectoryTables, ParseReport]:
    """Load the directory files for a prefix/extension pair."""
    loader = CsvLoader(prefix, ext, search_path, encoding=encoding)
    tables = loader.load(params)
    return tables, loader.report
