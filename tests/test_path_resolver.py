"""Tests for prefix/extension resolution and the search-path locator."""

import os

import pytest

from edi_directory.errors import (
    DirectoryFileNotFoundError,
    InvalidParameterError,
    UnsupportedStandardError,
)
from edi_directory.path_resolver import (
    data_element_prefix,
    find_path,
    resolve_prefix_ext,
    split_search_path,
)


@pytest.mark.parametrize("version,ext", [
    (1, "10000.csv"),
    (2, "20000.csv"),
    (3, "30000.csv"),
    (4, "40000.csv"),
])
def test_iso9735_syntax_versions(version, ext):
    """Test syntax versions map to the ISO9735 file extensions."""
    assert resolve_prefix_ext("E", {"d0002": version}) == ("/edifact/iso9735/SD", ext)


def test_iso9735_release_of_version_4():
    """Test any d0076 value selects syntax version 4-1."""
    assert resolve_prefix_ext("E", {"d0002": 4, "d0076": "01"}) == ("/edifact/iso9735/SD", "40100.csv")
    assert resolve_prefix_ext("E", {"d0002": 4, "d0076": ""})[1] == "40100.csv"
    assert resolve_prefix_ext("E", {"d0002": 4, "d0076": None})[1] == "40000.csv"


def test_iso9735_release_ignored_below_version_4():
    assert resolve_prefix_ext("E", {"d0002": 3, "d0076": "01"})[1] == "30000.csv"


def test_syntax_version_digit_string():
    assert resolve_prefix_ext("E", {"d0002": "2"})[1] == "20000.csv"


@pytest.mark.parametrize("version", [0, 5, "x", 4.0])
def test_invalid_syntax_version(version):
    """Test unknown syntax versions fail before any file access."""
    with pytest.raises(InvalidParameterError, match="Invalid syntax version"):
        resolve_prefix_ext("E", {"d0002": version})


def test_untdid_batch():
    """Test UN/TDID extension is version + release, lowercased."""
    params = {"d0052": "D", "d0054": "96A", "d0051": "UN", "is_iedi": False}
    assert resolve_prefix_ext("E", params) == ("/edifact/untdid/ED", "d96a.csv")


def test_untdid_interactive():
    params = {"d0052": "D", "d0054": "96A", "is_iedi": True}
    assert resolve_prefix_ext("E", params) == ("/edifact/untdid/ID", "d96a.csv")


def test_untdid_missing_release():
    with pytest.raises(InvalidParameterError):
        resolve_prefix_ext("E", {"d0052": "D"})


def test_idoc_without_extension():
    params = {"SAPTYPE": "40", "IDOCTYPE": "ORDERS04"}
    assert resolve_prefix_ext("I", params) == ("/sap/idocs40/ORDERS04/ED", ".csv")


def test_idoc_empty_extension():
    params = {"SAPTYPE": "40", "IDOCTYPE": "ORDERS04", "EXTENSION": ""}
    assert resolve_prefix_ext("I", params) == ("/sap/idocs40/ORDERS04/ED", ".csv")


def test_idoc_namespaced_extension():
    """Test a namespaced extension splits into sub-directory and suffix."""
    params = {"SAPTYPE": "40", "IDOCTYPE": "ORDERS05", "EXTENSION": "/GIL/EPG_ORDERS05"}
    assert resolve_prefix_ext("I", params) == ("/sap/idocs40/ORDERS05/GIL/ED", "EPG_ORDERS05.csv")


def test_idoc_plain_extension():
    params = {"SAPTYPE": "40", "IDOCTYPE": "ORDERS05", "EXTENSION": "ZORDERS05"}
    assert resolve_prefix_ext("I", params) == ("/sap/idocs40/ORDERS05/ED", "ZORDERS05.csv")


def test_idoc_missing_saptype():
    with pytest.raises(InvalidParameterError):
        resolve_prefix_ext("I", {"IDOCTYPE": "ORDERS05"})


def test_sap_control_records():
    assert resolve_prefix_ext("I", {"SAPTYPE": "40"}) == ("/sap/controls/SD", "04000.csv")


def test_unsupported_sap_type():
    with pytest.raises(UnsupportedStandardError, match="Unsupported SAP Type: 30"):
        resolve_prefix_ext("I", {"SAPTYPE": "30"})


def test_unsupported_standard():
    with pytest.raises(UnsupportedStandardError, match="Unsupported syntax standard: X"):
        resolve_prefix_ext("X", {"d0002": 4})


def test_resolution_is_deterministic():
    params = {"d0052": "D", "d0054": "96A", "d0065": "ORDERS"}
    before = dict(params)
    assert resolve_prefix_ext("E", params) == resolve_prefix_ext("E", params)
    assert params == before


def test_data_element_prefix():
    """Test interactive prefixes share the batch data element file."""
    assert data_element_prefix("/edifact/untdid/ID") == "/edifact/untdid/ED"
    assert data_element_prefix("/edifact/untdid/ED") == "/edifact/untdid/ED"
    assert data_element_prefix("/sap/idocs40/ORDERS04/ED") == "/sap/idocs40/ORDERS04/ED"


def test_find_path_first_readable(tmp_path, test_data):
    """Test search path entries are tried in order."""
    search_path = os.pathsep.join([str(tmp_path), str(test_data)])
    path = find_path("/edifact/untdid/ED", "d96a.csv", "SD", search_path)
    assert path == str(test_data) + "/edifact/untdid/EDSD.d96a.csv"

    shadow = tmp_path / "edifact" / "untdid"
    shadow.mkdir(parents=True)
    (shadow / "EDSD.d96a.csv").write_text("UNH;MESSAGE HEADER;010;0062;M;1;\n")
    path = find_path("/edifact/untdid/ED", "d96a.csv", "SD", search_path)
    assert path == str(tmp_path) + "/edifact/untdid/EDSD.d96a.csv"


def test_find_path_not_found(test_data):
    with pytest.raises(DirectoryFileNotFoundError) as exc_info:
        find_path("/edifact/untdid/ED", "d01b.csv", "SD", str(test_data))

    assert exc_info.value.filename == "/edifact/untdid/EDSD.d01b.csv"
    assert exc_info.value.search_path == str(test_data)
    assert "EDSD.d01b.csv" in str(exc_info.value)


def test_split_search_path_drops_trailing_empty_entries():
    sep = os.pathsep
    assert split_search_path(f"/data{sep}") == ["/data"]
    assert split_search_path(f"/data{sep}/more{sep}{sep}") == ["/data", "/more"]
    assert split_search_path(f"{sep}/data") == ["", "/data"]
    assert split_search_path("") == []
