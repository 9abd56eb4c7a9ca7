import io

from nibilang.errors import ErrorReport


def test_has_locator():
    assert not ErrorReport("boom").has_locator()
    assert ErrorReport("boom", locator="file.nibi:3").has_locator()


def test_draw_without_locator():
    out = io.StringIO()
    ErrorReport("boom").draw(stream=out)
    assert out.getvalue() == "ERROR: boom\n"


def test_draw_without_markup_ignores_locator():
    out = io.StringIO()
    ErrorReport("boom", locator="file.nibi:3").draw(markup=False, stream=out)
    assert out.getvalue() == "ERROR: boom\n"


def test_draw_with_locator():
    out = io.StringIO()
    ErrorReport("boom", locator="file.nibi:3").draw(stream=out)
    text = out.getvalue()
    assert text.startswith("file.nibi:3\n")
    assert "Message: boom" in text
    assert "ERROR" not in text


def test_message_retained():
    report = ErrorReport("boom")
    assert report.message == "boom"
    assert report.locator is None