import pytest

from errors import PageIndexError
from render_controller import PageActions
from rendering import RasterView
from tests.conftest import make_pdf


@pytest.mark.parametrize("page,total,expected", [
    (1, 0, (False, False, False)),
    (1, 1, (True, False, False)),
    (1, 3, (True, False, True)),
    (2, 3, (True, True, True)),
    (3, 3, (True, True, False)),
])
def test_page_actions(page, total, expected):
    a = PageActions.for_page(page, total)
    assert (a.delete, a.move_up, a.move_down) == expected


def test_out_of_range_page_leaves_surface_untouched(renderer, surface, three_page_pdf):
    view = RasterView.parse(three_page_pdf)
    for bad in (0, 4):
        with pytest.raises(PageIndexError):
            renderer.render_page(bad, view)
    assert surface.pages == []
    assert surface.overlays == []


def test_render_page_sizes_surface_and_builds_overlay(renderer, surface, three_page_pdf):
    proxies = renderer.render_page(2, RasterView.parse(three_page_pdf))
    assert surface.pages == [(918, 1188)]
    assert surface.overlays == [proxies]
    assert sorted(p.text for p in proxies) == ["Hello", "Page 2"]
    assert surface.selected == 2
    assert surface.actions == PageActions(delete=True, move_up=True, move_down=True)


def test_each_page_gets_its_own_dimensions(renderer, surface):
    renderer.render_page(1, RasterView.parse(make_pdf([[]], size=(612, 792))))

    small = RasterView.parse(make_pdf([[]], size=(200, 100)))
    renderer.render_page(1, small)
    assert surface.pages == [(918, 1188), (300, 150)]


def test_thumbnails_render_every_page_at_thumbnail_zoom(renderer, surface, three_page_pdf):
    view = RasterView.parse(three_page_pdf)
    pixmaps = renderer.thumbnail_pixmaps(view)
    assert surface.thumbnails == []
    assert len(pixmaps) == 3
    expected = view.page(1).viewport(0.3)
    assert (pixmaps[0].width, pixmaps[0].height) == (expected.width, expected.height)


def test_clear_hides_page_actions(renderer, surface):
    renderer.clear()
    assert surface.cleared == 1
    assert surface.actions == PageActions(delete=False, move_up=False, move_down=False)


def test_thumbnails_are_shown_with_the_page(renderer, surface, three_page_pdf):
    view = RasterView.parse(three_page_pdf)
    renderer.render_page(2, view, renderer.thumbnail_pixmaps(view))
    assert len(surface.thumbnails) == 1
    assert len(surface.thumbnails[0]) == 3
    assert surface.selected == 2


def test_failed_render_keeps_the_old_thumbnails(renderer, surface, three_page_pdf):
    view = RasterView.parse(three_page_pdf)
    thumbnails = renderer.thumbnail_pixmaps(view)
    with pytest.raises(PageIndexError):
        renderer.render_page(9, view, thumbnails)
    assert surface.thumbnails == []


def ink_bbox(pix):
    """(x0, y0, x1, y1) of every non-white pixel."""
    n, row_len = pix.n, pix.width * pix.n
    samples = pix.samples
    xs, ys = [], []
    for y in range(pix.height):
        row = samples[y * pix.stride: y * pix.stride + row_len]
        if not row.strip(b"\xff"):
            continue
        xs.append((row_len - len(row.lstrip(b"\xff"))) // n)
        xs.append((len(row.rstrip(b"\xff")) - 1) // n)
        ys.append(y)
    return min(xs), min(ys), max(xs), max(ys)


@pytest.mark.parametrize("rotation", [0, 90, 180, 270])
def test_proxy_sits_on_its_glyphs_on_rotated_pages(renderer, surface, rotation):
    view = RasterView.parse(make_pdf([[((100, 100), "Hello", 12)]], rotation=rotation))
    page = view.page(1)
    (proxy,) = renderer.render_page(1, view)

    viewport = page.viewport(1.5)
    pix = page.rasterize(viewport)
    assert surface.pages == [(pix.width, pix.height)]
    expected_size = (1188, 918) if rotation in (90, 270) else (918, 1188)
    assert (pix.width, pix.height) == expected_size

    x0, y0, x1, y1 = ink_bbox(pix)
    rx, ry, rw, rh = proxy.screen_rect
    # the whole ink box lies inside the proxy, give or take antialiasing
    assert rx - 2 <= x0 and x1 <= rx + rw + 2
    assert ry - 2 <= y0 and y1 <= ry + rh + 2
    assert proxy.derived_font_size == pytest.approx(18.0)
