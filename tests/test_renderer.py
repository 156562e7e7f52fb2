from __future__ import annotations

from osrswiki.app.ui.renderer import ArticleRenderer, DocumentLayout, wrap_lines
from osrswiki.app.ui.styles import LINK_FOREGROUND, SELECTED_BACKGROUND, TextStyle, TokenStyles
from osrswiki.wiki.parser import parse_wikitext
from osrswiki.wiki.tokens import TokenType


def test_wrap_lines_breaks_on_spaces() -> None:
    assert wrap_lines("aaa bbb ccc", 7) == ["aaa bbb", "ccc"]


def test_wrap_lines_keeps_blank_lines() -> None:
    assert wrap_lines("a\n\nb", 10) == ["a", "", "b"]


def test_wrap_never_splits_a_placeholder() -> None:
    doc = parse_wikitext("'''Grand Exchange''' is big")
    (bold,) = doc.tokens.visible()
    layout = DocumentLayout(doc, 10)
    assert layout.lines == [bold.placeholder, "is big"]


def test_layout_scroll_math_on_short_document() -> None:
    layout = DocumentLayout(parse_wikitext("1\n2\n3\n4\n5"), 20)
    assert layout.total_lines == 5
    assert layout.max_scroll(10) == 0
    assert layout.max_scroll(2) == 3
    assert layout.clamp_scroll(9, 2) == 3
    assert layout.clamp_scroll(-4, 2) == 0
    assert layout.visible_range(3, 10) == (3, 5)
    assert layout.visible_text(1, 2) == "2\n3"


def test_line_of_counts_wrapped_lines() -> None:
    doc = parse_wikitext("alpha beta gamma [[Lumbridge]]")
    (link,) = doc.tokens.links()
    layout = DocumentLayout(doc, 11)
    assert layout.lines == ["alpha beta", "gamma", link.placeholder]
    assert layout.line_of(link.placeholder) == 2
    assert layout.line_of("missing") is None
    assert layout.line_of("") is None


def test_render_substitutes_content_and_highlights_selection() -> None:
    doc = parse_wikitext("Visit [[Grand Exchange|GE]] & '''Varrock'''")
    link = doc.tokens.links()[0]
    renderer = ArticleRenderer(gutter_width=5)
    view = renderer.render(DocumentLayout(doc, 80), 0, 10, selected_token_id=link.id)

    assert view.text == "Visit GE & Varrock"
    assert view.highlight is not None
    assert (view.highlight.row, view.highlight.column, view.highlight.length) == (0, 6, 2)
    assert view.highlight.token_id == link.id

    segments = view.lines[0].segments
    styled = {segment.token_id: segment.style for segment in segments if segment.token_id is not None}
    assert styled[link.id].background == SELECTED_BACKGROUND
    assert styled[link.id].foreground == LINK_FOREGROUND
    bold_id = doc.tokens.visible()[0].id
    assert styled[bold_id].bold is True
    assert styled[bold_id].background is None


def test_render_keeps_line_width_of_placeholder_text() -> None:
    doc = parse_wikitext("== Location ==\n[[Varrock]] is north of [[Lumbridge|L]].")
    layout = DocumentLayout(doc, 30)
    view = ArticleRenderer().render(layout, 0, 10)
    assert [len(line.text) for line in view.lines] == [len(line) for line in layout.lines]


def test_render_window_uses_absolute_line_numbers() -> None:
    doc = parse_wikitext("\n".join(f"line {n}" for n in range(10)))
    view = ArticleRenderer().render(DocumentLayout(doc, 20), 4, 3)
    assert [line.number for line in view.lines] == [4, 5, 6]
    assert [line.text for line in view.lines] == ["line 4", "line 5", "line 6"]
    assert view.highlight is None


def test_render_past_the_end_is_empty() -> None:
    doc = parse_wikitext("one\ntwo")
    view = ArticleRenderer().render(DocumentLayout(doc, 20), 50, 5)
    assert view.lines == ()


def test_render_skips_tokens_outside_the_window() -> None:
    doc = parse_wikitext("[[Varrock]]\nplain\n[[Lumbridge]]")
    view = ArticleRenderer().render(DocumentLayout(doc, 20), 1, 2)
    assert view.text == "plain\nLumbridge"


def test_to_html_escapes_text_and_adds_gutter() -> None:
    doc = parse_wikitext("a < b [[Lumbridge]]")
    renderer = ArticleRenderer(gutter_width=5)
    html = renderer.to_html(renderer.render(DocumentLayout(doc, 80), 0, 5))
    assert "a &lt; b " in html
    assert ">0    </span>" in html
    assert f"color: {LINK_FOREGROUND}" in html
    assert html.startswith("<pre")


def test_custom_styles_are_used() -> None:
    styles = TokenStyles(heading=TextStyle(foreground="#00ff00"))
    assert styles.for_type(TokenType.HEADING).foreground == "#00ff00"
    assert styles.for_type(TokenType.FILE) is None
    doc = parse_wikitext("== Drops ==")
    renderer = ArticleRenderer(styles, gutter_width=0)
    html = renderer.to_html(renderer.render(DocumentLayout(doc, 40), 0, 1))
    assert "color: #00ff00" in html
    assert "<span" in html


def test_gutter_text_truncates_to_width() -> None:
    renderer = ArticleRenderer(gutter_width=3)
    assert renderer.gutter_text(7) == "7  "
    assert renderer.gutter_text(12345) == "123"
    assert ArticleRenderer(gutter_width=0).gutter_text(4) == ""
