"""Tests for the wikitext tokenizer and token registry."""
from __future__ import annotations

import pytest

from osrswiki.app.ui.navigator import NavigationRequest, Navigator
from osrswiki.wiki.parser import PLACEHOLDER_PAD, parse_wikitext, placeholder_for, placeholder_id
from osrswiki.wiki.tokens import HiddenToken, TokenType, VisibleToken

SAMPLE_PAGES = [
    "'''Varrock'''  [[Grand Exchange|GE]]",
    "{{redirect|Varrock (disambiguation)}}\n'''Varrock''' is a city.\n== History ==\nSee [[Lumbridge]].",
    "([[File:Varrock.png|thumb|The city]]) [[A|B]] [[C]] '''D''' == not a heading ==",
    "== Location ==\n=== Shops ===\n* [[Aubury's Rune Shop|Aubury]]\n* [[Zaff's Superior Staffs!]]",
    "Unclosed [[link and '''bold and {{redirect|x",
    "'''[[Varrock]]''' and [['''Lumbridge''']] and [[|empty]]",
]


class TestTokenizerExample:
    def test_bold_and_link_example(self):
        doc = parse_wikitext("'''Varrock'''  [[Grand Exchange|GE]]")
        tokens = list(doc.tokens)
        assert [t.type for t in tokens] == [TokenType.BOLD, TokenType.LINK]
        bold, link = tokens
        assert bold.content == "Varrock"
        assert link.content == "GE"
        assert link.target == "Grand Exchange"
        assert doc.text == bold.placeholder + "  " + link.placeholder
        assert len(doc.text) == len("Varrock  GE")

    def test_link_without_label_targets_its_text(self):
        doc = parse_wikitext("Walk to [[Lumbridge]].")
        (link,) = doc.tokens.links()
        assert link.content == "Lumbridge"
        assert link.target == "Lumbridge"

    def test_single_character_label_keeps_width(self):
        doc = parse_wikitext("[[Lumbridge|L]]")
        (link,) = doc.tokens.links()
        assert len(link.placeholder) == 1
        assert doc.text == link.placeholder


class TestPassOrder:
    def test_ids_follow_pass_order(self):
        doc = parse_wikitext("[[Lumbridge]] '''Bold'''\n== Heading ==")
        visible = doc.tokens.visible()
        assert [(t.id, t.type) for t in visible] == [
            (0, TokenType.HEADING),
            (1, TokenType.BOLD),
            (2, TokenType.LINK),
        ]

    def test_redirect_notice_is_hidden_and_removed(self):
        doc = parse_wikitext("{{Redirect|Bob|the cat}}Bob is a cat.")
        (token,) = list(doc.tokens)
        assert isinstance(token, HiddenToken)
        assert token.type is TokenType.REDIRECT
        assert token.hidden
        assert doc.text == "Bob is a cat."

    def test_file_embed_is_hidden_and_removed(self):
        doc = parse_wikitext("([[File:Bob.png|thumb|left]]) Bob")
        assert [t.type for t in doc.tokens.hidden()] == [TokenType.FILE]
        assert doc.text == " Bob"
        assert doc.tokens.visible() == ()

    def test_heading_content_is_trimmed(self):
        doc = parse_wikitext("== Location ==\nText")
        (heading,) = doc.tokens.visible()
        assert heading.type is TokenType.HEADING
        assert heading.content == "Location"
        assert doc.text == heading.placeholder + "\nText"

    def test_unbalanced_heading_stays_literal(self):
        doc = parse_wikitext("=== Shops ==")
        assert len(doc.tokens) == 0
        assert doc.text == "=== Shops =="

    def test_windows_line_endings(self):
        doc = parse_wikitext("== Drops ==\r\nBones")
        assert [t.content for t in doc.tokens.visible()] == ["Drops"]

    def test_link_inside_bold_stays_a_link(self):
        doc = parse_wikitext("The '''[[Varrock]]''' city")
        (link,) = doc.tokens.visible()
        assert link.type is TokenType.LINK
        assert link.target == "Varrock"
        assert doc.text == "The " + link.placeholder + " city"

        nav = Navigator(80, 5)
        nav.set_document(doc)
        nav.push("l")
        assert nav.selected_token_id == link.id
        assert nav.push("enter") == NavigationRequest(target="Varrock")

    def test_link_inside_heading_stays_a_link(self):
        doc = parse_wikitext("== [[Grand Exchange|GE]] ==\nPrices")
        (link,) = doc.tokens.visible()
        assert link.type is TokenType.LINK
        assert link.content == "GE"
        assert doc.text == link.placeholder + "\nPrices"

    def test_bold_drops_nested_quote_markup(self):
        doc = parse_wikitext("'''Rune ''2h'' sword'''")
        (bold,) = doc.tokens.visible()
        assert bold.content == "Rune 2h sword"

    def test_link_around_placeholder_stays_literal(self):
        doc = parse_wikitext("[['''Lumbridge''']]")
        (bold,) = doc.tokens.visible()
        assert doc.text == "[[" + bold.placeholder + "]]"


class TestMalformedInput:
    def test_unclosed_link_is_left_as_text(self):
        doc = parse_wikitext("See [[Lumbridge for details")
        assert len(doc.tokens) == 0
        assert doc.text == "See [[Lumbridge for details"

    def test_empty_link_target_is_left_as_text(self):
        doc = parse_wikitext("[[|label]] and [[ ]]")
        assert doc.tokens.links() == ()

    def test_reserved_code_points_are_removed(self):
        doc = parse_wikitext("a" + PLACEHOLDER_PAD + "b\U000f0001c")
        assert doc.text == "abc"

    def test_empty_input(self):
        doc = parse_wikitext("")
        assert doc.text == ""
        assert len(doc.tokens) == 0


@pytest.mark.parametrize("markup", SAMPLE_PAGES)
def test_placeholder_width_matches_content(markup):
    doc = parse_wikitext(markup)
    for token in doc.tokens.visible():
        assert len(token.placeholder) == len(token.content)


@pytest.mark.parametrize("markup", SAMPLE_PAGES)
def test_matched_markup_is_gone(markup):
    doc = parse_wikitext(markup)
    for token in doc.tokens:
        assert token.text not in doc.text


@pytest.mark.parametrize("markup", SAMPLE_PAGES)
def test_reparsing_stripped_text_finds_nothing(markup):
    doc = parse_wikitext(markup)
    assert len(parse_wikitext(doc.text).tokens) == 0


class TestPlaceholders:
    def test_placeholder_encodes_id(self):
        placeholder = placeholder_for(41, "Varrock")
        assert len(placeholder) == 7
        assert placeholder_id(placeholder) == 41
        assert placeholder[1:] == PLACEHOLDER_PAD * 6

    def test_placeholder_ids_past_first_plane(self):
        placeholder = placeholder_for(70000, "x")
        assert placeholder_id(placeholder) == 70000

    def test_placeholder_rejects_empty_content(self):
        with pytest.raises(ValueError):
            placeholder_for(0, "")

    def test_placeholder_id_ignores_plain_text(self):
        assert placeholder_id("a") is None
        assert placeholder_id("") is None


class TestTokenRegistry:
    def test_lookup_by_id_and_placeholder(self):
        doc = parse_wikitext("'''Varrock''' [[Lumbridge]]")
        bold = doc.tokens.by_id(0)
        link = doc.tokens.by_id(1)
        assert isinstance(bold, VisibleToken) and bold.type is TokenType.BOLD
        assert doc.tokens.by_placeholder(link.placeholder) == link
        assert doc.tokens.max_id == 1

    def test_lookup_misses_return_none(self):
        doc = parse_wikitext("[[Lumbridge]]")
        assert doc.tokens.by_id(7) is None
        assert doc.tokens.by_id(None) is None
        assert doc.tokens.by_placeholder("Lumbridge") is None

    def test_registry_keeps_hidden_tokens_in_order(self):
        doc = parse_wikitext("{{redirect|x}}[[File:a.png]][[Lumbridge]]")
        assert [t.type for t in doc.tokens] == [TokenType.REDIRECT, TokenType.FILE, TokenType.LINK]
        assert len(doc.tokens) == 3
        assert doc.tokens.max_id == 0

    def test_iteration_follows_pass_order_not_position(self):
        doc = parse_wikitext("[[Lumbridge]] then '''Varrock''' then [[Falador]] {{redirect|x}}")
        assert [t.type for t in doc.tokens] == [
            TokenType.REDIRECT,
            TokenType.BOLD,
            TokenType.LINK,
            TokenType.LINK,
        ]
        assert [t.content for t in doc.tokens.links()] == ["Lumbridge", "Falador"]
