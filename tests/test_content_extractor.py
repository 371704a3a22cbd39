# File: tests/test_content_extractor.py
import json

from conftest import html_page
from doc_scout.parser.content_extractor import ContentExtractor, PageContent, build_record
from doc_scout.parser.html_parser import parse_html

PAGE = html_page(
    '<div class="awsdocs-container">'
    "<h1>Instances</h1>"
    "<p>Amazon EC2 provides <b>scalable</b> computing.</p>"
    "<p>Launch   an\n instance.</p>"
    "</div>"
    "<p>Footer paragraph</p>"
    "<table>"
    "<tr><th>Type</th><th>vCPU</th></tr>"
    "<tr><td>t3.micro</td><td>2</td></tr>"
    "<tr><td>m5.large</td><td>2</td><td>extra</td></tr>"
    "</table>"
    '<pre class="programlisting"><code class="bash">aws ec2 run-instances\n  --count 1</code></pre>'
    '<img src="/images/arch.png" alt="Architecture">'
    '<img src="/images/noalt.png">',
    title="Amazon EC2 instances",
)


def test_text_from_container_paragraphs():
    content = ContentExtractor().extract(parse_html(PAGE))
    assert content.text == "Amazon EC2 provides scalable computing.\nLaunch an instance."


def test_text_falls_back_to_body():
    soup = parse_html(html_page("<h2>Overview</h2><p>Plain   page</p>"))
    assert ContentExtractor().extract_text(soup) == "Overview Plain page"


def test_text_container_selector_is_configurable():
    soup = parse_html(html_page('<main><p>Main text</p></main><p>Other</p>'))
    assert ContentExtractor(content_selector="main").extract_text(soup) == "Main text"
    assert ContentExtractor(content_selector=None).extract_text(soup) == "Main text Other"


def test_tables_zip_cells_against_headers():
    content = ContentExtractor().extract(parse_html(PAGE))
    assert content.tables == [[
        {"Type": "t3.micro", "vCPU": "2"},
        {"Type": "m5.large", "vCPU": "2"},
    ]]


def test_excess_cells_are_dropped():
    soup = parse_html(html_page(
        "<table><tr><th>A</th><th>B</th></tr><tr><td>x</td><td>y</td><td>z</td></tr></table>"
    ))
    assert ContentExtractor.extract_tables(soup) == [[{"A": "x", "B": "y"}]]


def test_code_blocks_in_document_order_with_language():
    content = ContentExtractor().extract(parse_html(PAGE))
    assert content.code == [
        {"code": "aws ec2 run-instances\n  --count 1", "language": "programlisting"},
        {"code": "aws ec2 run-instances\n  --count 1", "language": "bash"},
    ]
    only_code = ContentExtractor(code_selector="code").extract(parse_html(PAGE))
    assert [c["language"] for c in only_code.code] == ["bash"]


def test_images_src_and_alt():
    content = ContentExtractor().extract(parse_html(PAGE))
    assert content.images == [
        {"src": "/images/arch.png", "alt": "Architecture"},
        {"src": "/images/noalt.png", "alt": ""},
    ]


def test_empty_document_gives_empty_sequences():
    content = ContentExtractor().extract(parse_html(html_page("")))
    assert content == PageContent(title="Doc", text="", tables=[], code=[], images=[])


def test_extraction_is_pure():
    soup = parse_html(PAGE)
    extractor = ContentExtractor()
    assert extractor.extract(soup) == extractor.extract(soup)


def test_record_serializes_structures():
    content = ContentExtractor().extract(parse_html(PAGE))
    record = build_record("https://docs.example.com/userguide/ec2.html", "UserGuidePage", content)

    assert record.title == "Amazon EC2 instances"
    assert json.loads(record.table_content) == content.tables
    assert json.loads(record.code_content) == content.code
    assert json.loads(record.image_content) == content.images
    assert build_record("u", "t", PageContent()).table_content == "[]"


def test_record_text_is_reduced_to_printable_ascii():
    # Lossy on purpose: non-Latin characters and the newlines between paragraphs are removed.
    content = PageContent(title="Café — guide", text="First über line\nSecond 日本 line")
    record = build_record("u", "UserGuidePage", content)
    assert record.title == "Caf  guide"
    assert record.text_content == "First ber lineSecond  line"
