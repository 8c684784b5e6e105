import pytest

from stocktw.data.providers.yahoo import YahooPriceExtractor, extract_price, parse_price_text


def _page(body: str) -> str:
    return f"<html><head><title>quote</title></head><body>{body}</body></html>"


def test_reads_large_desktop_price_and_strips_separators():
    html = _page(
        "<div class='D(f) Ai(fe)'>"
        "<span class='Fz(32px) Fw(b) Lh(1) Mend(16px) C(#fff)'>27,600.50</span>"
        "<span class='Fz(20px)'>▲120.00</span>"
        "</div>"
    )

    assert extract_price(html) == pytest.approx(27600.50)


def test_skips_unparsable_marker_elements():
    html = _page(
        "<span class='Fz(32px)'>--</span>"
        "<span class='Fz(32px) Fw(b)'>16.80</span>"
    )

    assert extract_price(html) == pytest.approx(16.8)


def test_desktop_marker_wins_over_other_sizes():
    html = _page(
        "<span class='Fz(28px)'>100.00</span>"
        "<span class='Fz(32px)'>200.00</span>"
    )

    assert extract_price(html) == pytest.approx(200.0)


def test_falls_back_to_responsive_size():
    html = _page("<span class='Fz(24px) Fw(b)'>27,624</span>")

    assert extract_price(html) == pytest.approx(27624.0)


def test_falls_back_to_data_test_marker():
    html = _page("<fin-streamer data-test='qsp-price'>28,015.25</fin-streamer>")

    assert extract_price(html) == pytest.approx(28015.25)


def test_falls_back_to_meta_price():
    html = (
        "<html><head><meta itemprop='price' content='27,536.66'></head>"
        "<body><p>no price here</p></body></html>"
    )

    assert extract_price(html) == pytest.approx(27536.66)


@pytest.mark.parametrize(
    "html",
    [
        "",
        "   ",
        _page("<p>Service unavailable</p>"),
        _page("<span class='Fz(32px)'>N/A</span>"),
    ],
)
def test_returns_zero_when_no_price(html):
    assert extract_price(html) == 0.0


def test_custom_markers_replace_defaults():
    extractor = YahooPriceExtractor(class_markers=("last-price",), attribute_markers=())
    html = _page(
        "<span class='Fz(32px)'>1.00</span>"
        "<span class='quote last-price'>2.50</span>"
    )

    assert extractor.extract_price(html) == pytest.approx(2.5)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("27,600.50", 27600.5),
        ("  16.8 ", 16.8),
        ("1,234點", 1234.0),
        ("-0.5%", -0.5),
        ("abc", 0.0),
        (None, 0.0),
    ],
)
def test_parse_price_text(text, expected):
    assert parse_price_text(text) == pytest.approx(expected)
