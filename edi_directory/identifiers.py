"""
Classification of directory identifiers.

The kind of object an identifier names is not explicit; it follows from a
naming convention. Plain EDIFACT codes are recognized by shape, while the
d/s/m prefixes mark data elements, segments and message branches whose codes
have no distinctive shape (SAP IDoc names).
"""
import re
from enum import Enum
from typing import List, NamedTuple, Tuple

from .errors import InvalidIdentifierError


class EntityKind(str, Enum):
    DATA_ELEMENT = "data_element"
    COMPOSITE = "composite"
    SEGMENT = "segment"
    MESSAGE = "message"


class EntityRef(NamedTuple):
    kind: EntityKind
    code: str


# (pattern, kind, regex group holding the code); first match wins
_RULES: List[Tuple[re.Pattern, EntityKind, int]] = [
    (re.compile(r"[CES][0-9]{3}"), EntityKind.COMPOSITE, 0),
    (re.compile(r"[0-9]{4}"), EntityKind.DATA_ELEMENT, 0),
    (re.compile(r"[A-Z][A-Z0-9]{2}"), EntityKind.SEGMENT, 0),
    (re.compile(r"[A-Z]{6}:"), EntityKind.MESSAGE, 0),
    (re.compile(r"d(.*)", re.DOTALL), EntityKind.DATA_ELEMENT, 1),
    (re.compile(r"s(.*)", re.DOTALL), EntityKind.SEGMENT, 1),
    (re.compile(r"m(.*)", re.DOTALL), EntityKind.MESSAGE, 1),
]


def classify(identifier: str) -> EntityRef:
    """
    Determine which table an identifier refers to.

    Examples:
        "C082"    -> composite C082
        "4457"    -> data element 4457
        "NAD"     -> segment NAD
        "ORDERS:" -> message branch ORDERS:
        "dBELNR"  -> data element BELNR
        "sE1EDK01"-> segment E1EDK01

    Raises:
        InvalidIdentifierError: the identifier matches no rule
    """
    if isinstance(identifier, str):
        for pattern, kind, group in _RULES:
            m = pattern.fullmatch(identifier)
            if m:
                return EntityRef(kind, m.group(group))
    raise InvalidIdentifierError(f"Not a legal BCDS entry id: '{identifier}'")
