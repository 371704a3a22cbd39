# File: tests/test_page_filter.py
import pytest
from bs4 import BeautifulSoup

from conftest import html_page
from doc_scout.crawler.models import PageVerdict, Verdict
from doc_scout.parser.html_parser import parse_html
from doc_scout.parser.page_filter import (
    PageFilter,
    has_embedded_pdf,
    has_pgp_key_block,
    is_decision_guide,
    is_glossary_page,
    is_landing_page,
    is_missing_body,
)

PGP_BLOCK = "-----BEGIN PGP PUBLIC KEY BLOCK----- mQINBF -----END PGP PUBLIC KEY BLOCK-----"


def soup_of(html: str):
    return parse_html(html)


def test_missing_body_without_body_element():
    soup = BeautifulSoup("<head><title>Only head</title></head>", "html.parser")
    assert is_missing_body(soup)


@pytest.mark.parametrize("title", ["PDF Document", "pdf document", "PDF DOCUMENT"])
def test_pdf_rendering_title_counts_as_missing_body(title):
    assert is_missing_body(soup_of(html_page("<p>x</p>", title=title)))


def test_regular_page_has_body():
    assert not is_missing_body(soup_of(html_page("<p>x</p>", title="PDF Documents overview")))


@pytest.mark.parametrize(
    "markup,expected",
    [
        ('<embed type="application/x-google-chrome-pdf" src="a">', True),
        ('<object type="application/pdf" data="a.pdf"></object>', True),
        ('<embed type="video/mp4" src="a.mp4">', False),
        ("<p>no embeds</p>", False),
    ],
)
def test_embedded_pdf(markup, expected):
    assert has_embedded_pdf(soup_of(html_page(markup))) is expected


def test_pgp_block_detected_anywhere_in_body():
    assert has_pgp_key_block(soup_of(html_page(f"<div><pre>{PGP_BLOCK}</pre></div>")))
    assert has_pgp_key_block(soup_of(html_page("<p>-----BEGIN PGP PUBLIC KEY BLOCK-----</p>")))
    assert not has_pgp_key_block(soup_of(html_page("<p>BEGIN PGP</p>")))


def test_meta_predicates():
    assert is_decision_guide(soup_of(html_page("<p>hub</p>", meta={"guide": "AWS Decision Guide"})))
    assert is_landing_page(soup_of(html_page("<p>hub</p>", meta={"guide-name": "Landing Page"})))
    assert is_glossary_page(soup_of(html_page("<p>hub</p>", meta={"product": "AWS Glossary"})))
    assert not is_landing_page(soup_of(html_page("<p>hub</p>", meta={"guide-name": "User Guide"})))


@pytest.mark.parametrize(
    "html,expected",
    [
        (html_page("<p>content</p>"), PageVerdict(Verdict.EXTRACT)),
        (html_page("<p>x</p>", title="PDF Document"), PageVerdict(Verdict.SKIP, "missing-body")),
        (html_page('<embed type="application/pdf">'), PageVerdict(Verdict.SKIP, "embedded-pdf")),
        (html_page(f"<p>{PGP_BLOCK}</p>"), PageVerdict(Verdict.SKIP, "pgp-key-block")),
        (html_page("<p>hub</p>", meta={"guide": "AWS Decision Guide"}), PageVerdict(Verdict.NAVIGATE, "decision-guide")),
        (html_page("<p>hub</p>", meta={"guide-name": "Landing Page"}), PageVerdict(Verdict.NAVIGATE, "landing-page")),
        (html_page("<p>hub</p>", meta={"product": "AWS Glossary"}), PageVerdict(Verdict.NAVIGATE, "glossary-page")),
    ],
)
def test_filter_chain_verdicts(html, expected):
    assert PageFilter().evaluate(soup_of(html)) == expected


def test_skip_wins_over_navigation():
    html = html_page(f"<p>{PGP_BLOCK}</p>", meta={"guide-name": "Landing Page"})
    assert PageFilter().evaluate(soup_of(html)) == PageVerdict(Verdict.SKIP, "pgp-key-block")


def test_custom_chain():
    chain = [("always", lambda soup: True, Verdict.NAVIGATE)]
    assert PageFilter(chain).evaluate(soup_of(html_page("<p>x</p>"))) == PageVerdict(Verdict.NAVIGATE, "always")
