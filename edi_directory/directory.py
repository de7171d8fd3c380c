"""
Directory Module.
A Directory holds the data elements, composites, segments and message branches
of one EDI standards directory and provides lookups over them.
"""
import re
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from .config import get_search_path
from .csv_loader import DirectoryTables, load_tables
from .errors import LookupNotFoundError
from .identifiers import EntityKind, EntityRef, classify
from .path_resolver import SyntaxStandard, resolve_prefix_ext
from .records import DataElementProperties, Entry, NamedList, ParseReport

PatternLike = Union[str, re.Pattern]


def _first_matching(table: Mapping[str, Any], pattern: PatternLike) -> Optional[Any]:
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    for key in sorted(table):
        if regex.search(key):
            return table[key]
    return None


def _frozen(table: Mapping[str, NamedList]) -> Mapping[str, NamedList]:
    return MappingProxyType({name: named_list.freeze() for name, named_list in table.items()})


class Directory:
    """
    Immutable set of lookup tables for one directory.

    Use DirectoryRegistry.create() (or edi_directory.create()) to obtain
    instances; Directory.load() builds one without caching.
    """

    def __init__(self, standard: Union[str, SyntaxStandard], params: Mapping[str, Any],
                 tables: DirectoryTables, report: Optional[ParseReport] = None):
        self.standard = SyntaxStandard.parse(standard)
        self.params = MappingProxyType(dict(params))
        self.data_elements: Mapping[str, DataElementProperties] = MappingProxyType(dict(tables.data_elements))
        self.composites: Mapping[str, NamedList] = _frozen(tables.composites)
        self.segments: Mapping[str, NamedList] = _frozen(tables.segments)
        self.messages: Mapping[str, NamedList] = _frozen(tables.messages)
        self.report = report or ParseReport()

    @classmethod
    def load(cls, standard: Union[str, SyntaxStandard], params: Mapping[str, Any],
             search_path: Optional[str] = None, encoding: str = "utf-8") -> "Directory":
        """
        Resolve, read and parse the directory files for the given parameters.

        Args:
            standard: 'E' (UN/EDIFACT) or 'I' (SAP IDoc)
            params: Normalized directory parameters
            search_path: Data directories separated by os.pathsep;
                         defaults to the configured EDI_NDB_PATH

        Raises:
            UnsupportedStandardError, InvalidParameterError: before any file access
            DirectoryFileNotFoundError: one of the four files is missing
        """
        prefix, ext = resolve_prefix_ext(standard, params)
        if search_path is None:
            search_path = get_search_path()
        return cls.from_files(standard, params, prefix, ext, search_path, encoding=encoding)

    @classmethod
    def from_files(cls, standard: Union[str, SyntaxStandard], params: Mapping[str, Any],
                   prefix: str, ext: str, search_path: str, encoding: str = "utf-8") -> "Directory":
        """Build a directory from an already resolved prefix/extension pair."""
        tables, report = load_tables(prefix, ext, params, search_path, encoding=encoding)
        return cls(standard, params, tables, report)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Directory):
            return NotImplemented
        return (
            self.standard == other.standard
            and dict(self.params) == dict(other.params)
            and dict(self.data_elements) == dict(other.data_elements)
            and dict(self.composites) == dict(other.composites)
            and dict(self.segments) == dict(other.segments)
            and dict(self.messages) == dict(other.messages)
        )

    __hash__ = object.__hash__

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in sorted(self.params.items()))
        return f"<Directory {self.standard.value} {params}>"

    # Data elements

    def data_element(self, name: str) -> Optional[DataElementProperties]:
        """Properties of data element +name+, or None."""
        return self.data_elements.get(name)

    def data_element_matching(self, pattern: PatternLike) -> Optional[DataElementProperties]:
        """First data element (in sorted name order) whose name matches pattern."""
        return _first_matching(self.data_elements, pattern)

    def data_element_names(self) -> List[str]:
        return sorted(self.data_elements)

    # Composites

    def composite(self, name: str) -> Optional[NamedList]:
        return self.composites.get(name)

    def composite_names(self) -> List[str]:
        return sorted(self.composites)

    # Segments

    def segment(self, name: str) -> Optional[NamedList]:
        return self.segments.get(name)

    def segment_matching(self, pattern: PatternLike) -> Optional[NamedList]:
        """First segment (in sorted name order) whose name matches pattern."""
        return _first_matching(self.segments, pattern)

    def segment_names(self) -> List[str]:
        return sorted(self.segments)

    # Messages

    def message(self, name: str) -> Optional[NamedList]:
        """Top branch of message +name+ (e.g. 'ORDERS:'), or None."""
        return self.messages.get(name)

    def message_names(self) -> List[str]:
        return sorted(self.messages)

    # Dispatch by identifier shape

    def resolve(self, ref: EntityRef) -> Union[DataElementProperties, NamedList, None]:
        if ref.kind is EntityKind.COMPOSITE:
            return self.composite(ref.code)
        if ref.kind is EntityKind.DATA_ELEMENT:
            return self.data_element(ref.code)
        if ref.kind is EntityKind.SEGMENT:
            return self.segment(ref.code)
        return self.message(ref.code)

    def lookup(self, identifier: str) -> Union[DataElementProperties, NamedList]:
        """
        Return the object named by identifier, see identifiers.classify().

        Raises:
            InvalidIdentifierError: identifier has no recognized shape
            LookupNotFoundError: the code is not in this directory
        """
        found = self.resolve(classify(identifier))
        if found is None:
            raise LookupNotFoundError(f"{identifier} not in directory!")
        return found

    def entries(self, identifier: str) -> Iterator[Union[Entry, DataElementProperties]]:
        """
        Entries of the branch, composite, data element or segment named by identifier.

        A data element has no sub-entries and yields its own properties once.
        """
        found = self.lookup(identifier)
        if isinstance(found, DataElementProperties):
            return iter((found,))
        return iter(found)

    def each_entry(self, identifier: str, visit: Callable[[Union[Entry, DataElementProperties]], Any]) -> None:
        """Call visit once per entry, in stored order."""
        for entry in self.entries(identifier):
            visit(entry)

    def counts(self) -> Dict[str, int]:
        return {
            "data_elements": len(self.data_elements),
            "composites": len(self.composites),
            "segments": len(self.segments),
            "messages": len(self.messages),
        }
