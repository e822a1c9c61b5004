from pathlib import Path

import pytest

from wordcomplete.host import HostError, LocalDocument, LocalView
from wordcomplete.rope import Delta, Interval


def test_document_line_index_includes_newlines() -> None:
    document = LocalDocument.from_text("ab\ncd\n")

    assert document.line_count == 3
    assert document.get_line(0) == "ab\n"
    assert document.get_line(1) == "cd\n"
    assert document.get_line(2) == ""
    assert document.offset_of_line(1) == 3
    assert document.line_of_offset(3) == 1
    assert document.line_of_offset(6) == 2


def test_document_locations_round_trip_through_bytes() -> None:
    document = LocalDocument.from_text("é\nxyz")

    assert document.offset_for_location((0, 1)) == 2
    assert document.offset_for_location((1, 2)) == 5
    assert document.location_for_offset(5) == (1, 2)


def test_document_apply_bumps_version() -> None:
    document = LocalDocument.from_text("abc")

    updated = document.apply(Delta.simple_edit(Interval(1, 2), "XY", 3))

    assert updated.text == "aXYc"
    assert updated.version == 1
    assert updated.dirty is True
    assert document.text == "abc"


def test_view_maps_index_errors_to_host_errors() -> None:
    view = LocalView("view-1", LocalDocument.from_text("abc"))

    with pytest.raises(HostError) as excinfo:
        view.get_line(4)

    assert excinfo.value.method == "get_line"
    assert excinfo.value.view_id == "view-1"


def test_view_rejects_stale_validated_edit() -> None:
    view = LocalView("view-1", LocalDocument.from_text("abc"))
    stale = Delta.simple_edit(Interval(0, 1), "Z", 2)

    with pytest.raises(HostError):
        view.submit_edit(stale, 0, False, True, "wordcomplete")
    assert view.submitted == []
    assert view.text == "abc"


def test_closed_view_refuses_queries() -> None:
    view = LocalView("view-1", LocalDocument.from_text("abc"), path=Path("a.txt"))
    view.closed = True

    with pytest.raises(HostError):
        view.get_document()
