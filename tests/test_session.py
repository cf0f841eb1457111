import pytest

from document import DocumentView
from errors import (
    PageIndexError, ParseError, RenderError, SerializationError, SessionBusyError,
)
from rendering import RasterPage
from tests.conftest import make_pdf, page_texts


def assert_page_invariant(session):
    if session.total_pages > 0:
        assert 1 <= session.current_page <= session.total_pages
    else:
        assert session.current_page == 1
        assert session.document_view is None


def test_load_renders_first_page_and_thumbnails(loaded, surface):
    assert loaded.total_pages == 3
    assert loaded.current_page == 1
    assert surface.pages == [(918, 1188)]
    assert len(surface.thumbnails[-1]) == 3
    assert loaded.raster_view.page_count == loaded.document_view.page_count == 3


def test_round_trip_keeps_pages_and_text(loaded, three_page_pdf):
    data = loaded.document_view.serialize()
    assert DocumentView.parse(data).page_count == 3
    for number in (1, 2, 3):
        assert sorted(page_texts(data, number)) == sorted(page_texts(three_page_pdf, number))


def test_failed_load_keeps_previous_session(loaded):
    raster = loaded.raster_view
    with pytest.raises(ParseError):
        loaded.load(b"this is not a pdf")
    assert loaded.total_pages == 3
    assert loaded.raster_view is raster
    assert not loaded.busy


def test_load_empty_buffer_fails_on_empty_session(session):
    with pytest.raises(ParseError):
        session.load(b"")
    assert session.total_pages == 0


def test_navigate_rebuilds_raster_view_only(loaded, surface):
    document = loaded.document_view
    raster = loaded.raster_view
    loaded.navigate_to(2)
    assert loaded.current_page == 2
    assert loaded.document_view is document
    assert loaded.raster_view is not raster
    assert surface.selected == 2
    assert sorted(p.text for p in loaded.proxies) == ["Hello", "Page 2"]


def test_navigate_out_of_range(loaded):
    with pytest.raises(PageIndexError):
        loaded.navigate_to(7)
    assert loaded.current_page == 1


def test_add_page_on_empty_session(session):
    session.add_page()
    assert session.total_pages == 1
    assert session.current_page == 1
    assert session.document_view.page_count == 1


def test_add_page_appends_and_shows_it(loaded):
    loaded.add_page()
    assert loaded.total_pages == 4
    assert loaded.current_page == 4
    assert page_texts(loaded.original_bytes, 4) == []


def test_delete_last_page_is_clamped_by_reload(loaded):
    loaded.navigate_to(3)
    loaded.delete_page()
    assert loaded.total_pages == 2
    assert loaded.current_page == 2


def test_delete_middle_page_keeps_index(loaded):
    loaded.navigate_to(2)
    loaded.delete_page()
    assert loaded.total_pages == 2
    assert loaded.current_page == 2
    assert page_texts(loaded.original_bytes, 2) == ["Page 3"]


def test_delete_sole_page_empties_viewer(session, surface):
    session.load(make_pdf([[((72, 100), "only", 12)]]))
    session.delete_page()
    assert session.total_pages == 0
    assert session.current_page == 1
    assert session.document_view is None
    assert session.original_bytes is None
    assert surface.cleared == 1
    assert surface.actions.delete is False

    # and the empty session can grow again
    session.add_page()
    assert (session.total_pages, session.current_page) == (1, 1)


def test_delete_on_empty_session_is_noop(session, surface):
    session.delete_page()
    assert surface.cleared == 0


def test_move_boundaries_are_noops(loaded, surface):
    renders = len(surface.pages)
    loaded.move_page_up()
    assert len(surface.pages) == renders

    loaded.navigate_to(3)
    renders = len(surface.pages)
    loaded.move_page_down()
    assert len(surface.pages) == renders
    assert loaded.current_page == 3


def test_move_down_then_up_follows_the_page(loaded):
    loaded.move_page_down()
    assert loaded.current_page == 2
    assert page_texts(loaded.original_bytes, 2) == ["Page 1"]

    loaded.move_page_up()
    assert loaded.current_page == 1
    assert page_texts(loaded.original_bytes, 1) == ["Page 1"]


def test_page_index_invariant_over_operation_sequence(loaded):
    ops = [
        loaded.add_page, loaded.move_page_up, loaded.move_page_up, loaded.delete_page,
        loaded.move_page_down, loaded.delete_page, loaded.delete_page, loaded.move_page_up,
        loaded.delete_page, loaded.delete_page, loaded.delete_page, loaded.add_page,
        loaded.add_page, loaded.move_page_up, loaded.delete_page,
    ]
    for op in ops:
        op()
        assert_page_invariant(loaded)
        assert loaded.total_pages == (loaded.raster_view.page_count if loaded.raster_view else 0)


def test_failed_mutation_rolls_back(loaded, monkeypatch):
    loaded.navigate_to(2)
    before = loaded.original_bytes

    def broken():
        raise SerializationError("disk full")

    monkeypatch.setattr(loaded.document_view, "serialize", broken)
    with pytest.raises(SerializationError):
        loaded.add_page()

    assert loaded.total_pages == 3
    assert loaded.current_page == 2
    assert loaded.original_bytes is before
    assert loaded.document_view.page_count == 3
    assert not loaded.busy


def test_overlapping_operation_is_rejected(session, surface, three_page_pdf):
    surface.on_show_page = session.add_page
    with pytest.raises(SessionBusyError):
        session.load(three_page_pdf)
    assert not session.busy
    assert session.total_pages == 0
    assert session.document_view is None


def test_save_hands_bytes_to_host(loaded, host):
    assert loaded.save() == "modified.pdf"
    (data,) = host.saved
    assert DocumentView.parse(data).page_count == 3


def test_save_without_document_is_silent(session, host):
    assert session.save() is None
    assert host.saved == []


def test_failed_page_render_keeps_old_thumbnails(loaded, surface, monkeypatch):
    def broken(self):
        raise RenderError("bad content stream")

    monkeypatch.setattr(RasterPage, "text_runs", broken)
    with pytest.raises(RenderError):
        loaded.load(make_pdf([[], []]))

    assert len(surface.thumbnails) == 1
    assert len(surface.thumbnails[0]) == 3
    assert loaded.total_pages == 3
