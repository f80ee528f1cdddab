"""Unit tests for DocxTemplateEngine."""

import io
import zipfile

import pytest

from docfill.domain.exceptions import RenderFailureException
from docfill.infrastructure.rendering import DocxTemplateEngine


@pytest.fixture
def engine() -> DocxTemplateEngine:
    return DocxTemplateEngine()


def test_replaces_placeholder(engine, docx_builder, docx_reader, para) -> None:
    template = docx_builder([para("Client: {{ CLIENT_NAME }}")])
    xml = docx_reader(engine.render(template, {"CLIENT_NAME": "Acme Pvt Ltd"}))
    assert "Client: Acme Pvt Ltd" in xml
    assert "{{" not in xml


def test_placeholder_split_across_runs(engine, docx_builder, docx_reader, para) -> None:
    template = docx_builder([para("Amount: {", "{ AMO", "UNT }", "}")])
    xml = docx_reader(engine.render(template, {"AMOUNT": "₹1234.50"}))
    assert "₹1234.50" in xml
    assert "AMO" not in xml


def test_tokens_with_spaces_and_dots(engine, docx_builder, docx_reader, para) -> None:
    template = docx_builder([para("{{ Client Name }} / {{ pan.number }}")])
    xml = docx_reader(
        engine.render(template, {"Client Name": "Acme", "pan.number": "ABCDE1234F"})
    )
    assert "Acme / ABCDE1234F" in xml


def test_unknown_token_renders_empty(engine, docx_builder, docx_reader, para) -> None:
    template = docx_builder([para("[{{ MISSING }}]")])
    xml = docx_reader(engine.render(template, {}))
    assert "[]" in xml


def test_values_are_xml_escaped(engine, docx_builder, docx_reader, para) -> None:
    template = docx_builder([para("{{ NAME }}")])
    xml = docx_reader(engine.render(template, {"NAME": "A & B <Ltd>"}))
    assert "A &amp; B &lt;Ltd&gt;" in xml
    assert "<Ltd>" not in xml


def test_output_is_valid_docx(engine, docx_builder, para) -> None:
    template = docx_builder([para("{{ X }}")])
    rendered = engine.render(template, {"X": "1"})
    with zipfile.ZipFile(io.BytesIO(rendered)) as zf:
        assert "[Content_Types].xml" in zf.namelist()
        assert zf.testzip() is None


def test_header_and_footer_parts_rendered(engine, docx_builder, para) -> None:
    header = '<w:hdr xmlns:w="x"><w:p><w:r><w:t>{{ FY }}</w:t></w:r></w:p></w:hdr>'
    footer = '<w:ftr xmlns:w="x"><w:p><w:r><w:t>Page {{ FY }}</w:t></w:r></w:p></w:ftr>'
    template = docx_builder(
        [para("body")],
        extra_parts={"word/header1.xml": header, "word/footer2.xml": footer},
    )
    rendered = engine.render(template, {"FY": "2023-24"})
    with zipfile.ZipFile(io.BytesIO(rendered)) as zf:
        assert "2023-24" in zf.read("word/header1.xml").decode("utf-8")
        assert "Page 2023-24" in zf.read("word/footer2.xml").decode("utf-8")


def test_non_text_parts_untouched(engine, docx_builder, para) -> None:
    styles = "<w:styles>{{ NOT_A_FIELD }}</w:styles>"
    template = docx_builder([para("x")], extra_parts={"word/styles.xml": styles})
    rendered = engine.render(template, {"NOT_A_FIELD": "replaced"})
    with zipfile.ZipFile(io.BytesIO(rendered)) as zf:
        assert zf.read("word/styles.xml").decode("utf-8") == styles


def test_bad_zip_raises_render_failure(engine) -> None:
    with pytest.raises(RenderFailureException) as exc_info:
        engine.render(b"definitely not a zip", {})
    assert exc_info.value.error_code == "RENDER_FAILURE"


def test_missing_document_part_raises(engine) -> None:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("[Content_Types].xml", "<Types/>")
    with pytest.raises(RenderFailureException, match="word/document.xml"):
        engine.render(buffer.getvalue(), {})

def test_unclosed_placeholder_raises(engine, docx_builder, para) -> None:
    template = docx_builder([para("Client: {{ CLIENT_NAME")])
    with pytest.raises(RenderFailureException, match="word/document.xml"):
        engine.render(template, {"CLIENT_NAME": "Acme"})


@pytest.mark.parametrize("literal", ["Ref {#12}", "Discount {%}", "{% if %}", "a #} b %}"])
def test_brace_literals_are_plain_text(
    engine, docx_builder, docx_reader, para, literal: str
) -> None:
    template = docx_builder([para(f"{literal} for {{{{ NAME }}}}")])
    xml = docx_reader(engine.render(template, {"NAME": "Acme"}))
    assert f"{literal} for Acme" in xml


def test_multiline_value_becomes_line_breaks(engine, docx_builder, docx_reader, para) -> None:
    template = docx_builder([para("{{ ADDRESS }}")])
    xml = docx_reader(engine.render(template, {"ADDRESS": "12 Main Rd\r\nPune & Co\n411001"}))
    assert (
        '12 Main Rd</w:t><w:br/><w:t xml:space="preserve">Pune &amp; Co'
        '</w:t><w:br/><w:t xml:space="preserve">411001'
    ) in xml
    assert "\n" not in xml
    assert xml.count("<w:br/>") == 2


def test_single_line_value_has_no_break(engine, docx_builder, docx_reader, para) -> None:
    template = docx_builder([para("{{ NAME }}")])
    xml = docx_reader(engine.render(template, {"NAME": "Acme"}))
    assert "<w:br/>" not in xml


def test_corrupt_member_raises_render_failure(engine, para) -> None:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_STORED) as zf:
        zf.writestr("word/document.xml", f"<w:document>{para('ORIGINAL TEXT')}</w:document>")
    corrupted = buffer.getvalue().replace(b"ORIGINAL TEXT", b"TAMPERED TEXT")
    with pytest.raises(RenderFailureException, match="cannot be read") as exc_info:
        engine.render(corrupted, {})
    assert exc_info.value.error_code == "RENDER_FAILURE"
