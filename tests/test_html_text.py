from nanosearch.search.html import html_to_text


def test_main_section_is_preferred() -> None:
    html = (
        "<html><head><title>T</title></head><body>"
        "<header>Site header</header>"
        "<main><h1>Heading</h1><p>Body text</p></main>"
        "<footer>Footer</footer></body></html>"
    )

    assert html_to_text(html) == "Heading\n\nBody text"


def test_navigation_links_and_forms_are_skipped() -> None:
    html = (
        "<body><nav>Home | About</nav>"
        "<p>Keep <a href='/x'>link text</a>this</p>"
        "<form><input name='q'><button>Go</button></form>"
        "<script>var x = 1;</script><img src='a.png'>"
        "</body>"
    )

    text = html_to_text(html)

    assert "Keep" in text and "this" in text
    for dropped in ("Home", "link text", "Go", "var x", "a.png"):
        assert dropped not in text


def test_empty_input() -> None:
    assert html_to_text("") == ""


def test_escaped_markup_in_text_stays_literal() -> None:
    html = "<body><p>keep &amp;lt;tag&amp;gt; and &lt;b&gt;</p></body>"

    assert html_to_text(html) == "keep &lt;tag&gt; and <b>"
