"""Tests for Directory lookups and dispatch."""

import re

import pytest

from edi_directory.directory import Directory
from edi_directory.errors import (
    ConfigurationError,
    InvalidIdentifierError,
    InvalidParameterError,
    LookupNotFoundError,
    UnsupportedStandardError,
)
from edi_directory.records import DataElementProperties, Entry, NamedList


def test_data_element_lookup(d96a):
    de = d96a.data_element("4457")
    assert de == DataElementProperties(name="4457", format="an..3", description="Excluded")
    assert d96a.data_element("0000") is None


def test_data_element_matching_uses_sorted_order(d96a):
    """Test the first match in sorted name order wins."""
    assert d96a.data_element_matching(r"^10").name == "1004"
    assert d96a.data_element_matching(re.compile(r"60$")).name == "6060"
    assert d96a.data_element_matching("^7") is None


def test_segment_matching(d96a):
    assert d96a.segment_matching("^[NQ]").name == "NAD"
    assert d96a.segment_matching("^Z") is None


def test_names_are_sorted(d96a):
    assert d96a.data_element_names() == ["1004", "1082", "3035", "3039", "4457", "6060", "6063", "9999"]
    assert d96a.composite_names() == ["C001", "C082", "C186"]
    assert d96a.segment_names() == ["BGM", "NAD", "QTY", "UNH"]
    assert d96a.message_names() == ["ORDERS:", "ORDERS:SG2", "ORDRSP:"]


def test_composite_and_message_lookup(d96a):
    c082 = d96a.composite("C082")
    assert c082.desc == "PARTY IDENTIFICATION DETAILS"
    assert [e.name for e in c082] == ["3039", "1131", "3055"]

    orders = d96a.message("ORDERS:")
    assert [e.name for e in orders] == ["UNH", "BGM", "SG2", "UNT"]
    assert d96a.message("INVOIC:") is None


def test_each_entry_visits_in_order(d96a):
    visited = []
    d96a.each_entry("NAD", visited.append)
    assert visited == [
        Entry(item_no="010", name="3035", status="M", max_repeat=1),
        Entry(item_no="020", name="C082", status="C", max_repeat=1),
    ]


def test_each_entry_composite_and_message(d96a):
    assert [e.name for e in d96a.entries("C186")] == ["6063", "6060", "6411"]
    assert [e.max_repeat for e in d96a.entries("ORDERS:")] == [1, 1, 99, 1]


def test_each_entry_data_element(d96a):
    """Test a data element is visited once with its properties."""
    visited = []
    d96a.each_entry("4457", visited.append)
    assert visited == [d96a.data_element("4457")]


def test_each_entry_prefixed_data_element_miss(d96a):
    """Test dORDERS strips the prefix and looks up ORDERS among data elements."""
    with pytest.raises(LookupNotFoundError, match="dORDERS not in directory"):
        d96a.each_entry("dORDERS", lambda e: None)


def test_prefixed_lookups(d96a):
    assert d96a.lookup("d4457").name == "4457"
    assert d96a.lookup("sNAD").name == "NAD"
    assert d96a.lookup("mORDERS:SG2").name == "ORDERS:SG2"


def test_each_entry_invalid_identifier(d96a):
    visited = []
    with pytest.raises(InvalidIdentifierError):
        d96a.each_entry("ZZZ999", visited.append)
    assert visited == []


def test_lookup_miss(d96a):
    with pytest.raises(LookupNotFoundError):
        d96a.lookup("C999")
    with pytest.raises(LookupNotFoundError):
        d96a.entries("INVOIC:")


def test_directory_is_read_only(d96a):
    with pytest.raises(TypeError):
        d96a.segments["XYZ"] = NamedList(name="XYZ")
    with pytest.raises(TypeError):
        d96a.segment("NAD").append(Entry(item_no="030", name="C058", status="C", max_repeat=1))
    assert len(d96a.segment("NAD")) == 2


def test_report_attached(d96a):
    assert [d.kind for d in d96a.report.diagnostics] == ["line", "list"]
    assert d96a.counts() == {"data_elements": 8, "composites": 3, "segments": 4, "messages": 3}


def test_iso9735_directory(test_data):
    d = Directory.load("E", {"d0002": 4}, search_path=str(test_data))
    assert d.segment_names() == ["UNB", "UNZ"]
    assert "0076" not in d.data_elements

    d41 = Directory.load("E", {"d0002": 4, "d0076": "01"}, search_path=str(test_data))
    assert "0076" in d41.data_elements


def test_interactive_directory(test_data):
    d = Directory.load("E", {"d0052": "D", "d0054": "96A", "is_iedi": True}, search_path=str(test_data))
    assert d.segment_names() == ["UIH"]
    assert d.composite("E001").desc == "INTERACTIVE DETAILS"
    assert d.data_element("1004") is not None


def test_idoc_directory_with_extension(test_data):
    params = {"SAPTYPE": "40", "IDOCTYPE": "ORDERS05", "EXTENSION": "/GIL/EPG_ORDERS05"}
    d = Directory.load("I", params, search_path=str(test_data))

    assert d.data_element_names() == ["BELNR", "ZZGIL"]
    assert d.composite_names() == []
    assert [e.name for e in d.entries("sZ1GIL01")] == ["ZZGIL"]
    assert [e.max_repeat for e in d.entries("mORDERS05:")] == [1, 9999]
    assert d.lookup("dZZGIL").description == "Customer extension field"


def test_idoc_directory_without_extension(test_data):
    d = Directory.load("I", {"SAPTYPE": "40", "IDOCTYPE": "ORDERS04"}, search_path=str(test_data))
    assert [e.name for e in d.entries("sE1EDK01")] == ["CURCY", "BELNR"]


def test_sap_control_directory(test_data):
    d = Directory.load("I", {"SAPTYPE": "40"}, search_path=str(test_data))
    assert d.segment_names() == ["EDI_DC40"]
    assert d.message_names() == []


def test_invalid_parameters_fail_before_file_access(tmp_path):
    """Test bad parameters are rejected even with an empty search path."""
    with pytest.raises(InvalidParameterError):
        Directory.load("E", {"d0002": 5}, search_path=str(tmp_path))
    with pytest.raises(UnsupportedStandardError):
        Directory.load("I", {"SAPTYPE": "31"}, search_path=str(tmp_path))


def test_search_path_from_environment(ndb_path):
    d = Directory.load("E", {"d0002": 4})
    assert d.segment_names() == ["UNB", "UNZ"]


def test_missing_search_path():
    with pytest.raises(ConfigurationError, match="EDI_NDB_PATH"):
        Directory.load("E", {"d0002": 4})


def test_equality(test_data):
    params = {"d0052": "D", "d0054": "96A", "d0051": "", "d0057": "", "is_iedi": False}
    a = Directory.load("E", params, search_path=str(test_data))
    b = Directory.load("E", params, search_path=str(test_data))
    c = Directory.load("E", {"d0002": 4}, search_path=str(test_data))

    assert a == b
    assert a is not b
    assert a != c
