"""
Record types held by a Directory.

DataElementProperties describes one simple data element, Entry one line item
of a composite, segment or message branch, and NamedList the ordered list of
entries that makes up such a structure.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence


@dataclass(frozen=True)
class DataElementProperties:
    """One line of an ED file."""
    name: Optional[str]
    format: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class Entry:
    """Common shape of a B)ranch, C)omposite, D)ata element or S)egment item."""
    item_no: Optional[str]
    name: Optional[str]
    status: Optional[str]
    max_repeat: int


@dataclass
class NamedList:
    """
    Ordered entries of a composite, segment or message branch,
    tagged with the owning code (name) and its description.
    """
    name: Optional[str]
    desc: Optional[str] = None
    entries: Sequence[Entry] = field(default_factory=list)

    def append(self, entry: Entry) -> None:
        if isinstance(self.entries, tuple):
            raise TypeError(f"NamedList {self.name} is read-only")
        self.entries.append(entry)

    def freeze(self) -> "NamedList":
        self.entries = tuple(self.entries)
        return self

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class ParseDiagnostic:
    """A malformed line found while loading a directory file."""
    file_type: str   # ED, CD, SD or MD
    line_no: int
    kind: str        # "line" or "list"
    line: str

    def __str__(self) -> str:
        return f"ERR {self.file_type} {self.kind} (line {self.line_no}): {self.line}"


@dataclass
class ParseReport:
    """Diagnostics and record counts collected while loading a directory."""
    files: Dict[str, str] = field(default_factory=dict)
    counts: Dict[str, int] = field(default_factory=dict)
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def for_file(self, file_type: str) -> List[ParseDiagnostic]:
        return [d for d in self.diagnostics if d.file_type == file_type]
