"""Jinja rendering of .docx templates.

A .docx file is a zip of XML parts. Placeholders are written as {{ TOKEN }}
in the document body, headers, footers, footnotes and endnotes; Word often
splits them across several runs, so the run markup inside a placeholder is
removed before rendering. Tokens may contain any characters (spaces, dots,
non-ASCII), so each placeholder is rewritten to a slot lookup instead of
being evaluated as a Jinja expression. Only {{ is template syntax; Jinja's
block and comment delimiters are moved out of reach, so text like {#12} or
{%} stays literal. Line breaks in a value become Word line breaks.
"""

from __future__ import annotations

import io
import re
import zipfile
import zlib
from xml.sax.saxutils import unescape

from jinja2 import Environment, TemplateError
from markupsafe import Markup, escape

from docfill.domain.exceptions import RenderFailureException

DOCUMENT_PART = "word/document.xml"
_RENDERED_PART_RE = re.compile(
    r"^word/(document|header\d*|footer\d*|footnotes|endnotes)\.xml$"
)
# {{ ... }} possibly interleaved with XML tags (placeholder split across runs).
_PLACEHOLDER_RE = re.compile(r"\{(?:<[^>]+>)*\{(.*?)\}(?:<[^>]+>)*\}", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_NEWLINE_RE = re.compile(r"\r\n|\r|\n")
# Closes the current text element, breaks the line and reopens text in the same run.
_LINE_BREAK = Markup('</w:t><w:br/><w:t xml:space="preserve">')
# XML text cannot contain NUL, so these delimiters never match template text.
_UNREACHABLE_DELIMITERS = {
    "block_start_string": "\x00{%",
    "block_end_string": "%}\x00",
    "comment_start_string": "\x00{#",
    "comment_end_string": "#}\x00",
}
_UNREADABLE_MEMBER_ERRORS = (zipfile.BadZipFile, zlib.error, NotImplementedError, EOFError)


def _to_slots(xml: str) -> tuple[str, list[str]]:
    """Replace each placeholder with '{{ slot(n) }}'; return new xml and tokens by slot."""
    tokens: list[str] = []

    def _replace(match: re.Match[str]) -> str:
        token = unescape(_TAG_RE.sub("", match.group(1)), {"&quot;": '"', "&apos;": "'"})
        tokens.append(token.strip())
        return "{{ slot(%d) }}" % (len(tokens) - 1)

    return _PLACEHOLDER_RE.sub(_replace, xml), tokens


class DocxTemplateEngine:
    """Renders .docx template bytes with placeholder values. Stateless; safe to share across threads."""

    def __init__(self) -> None:
        # autoescape XML-escapes every inserted value.
        self._env = Environment(
            autoescape=True, keep_trailing_newline=True, **_UNREACHABLE_DELIMITERS
        )

    def _render_part(self, xml: str, values: dict[str, str]) -> str:
        source, tokens = _to_slots(xml)
        template = self._env.from_string(source)

        def slot(index: int) -> Markup:
            value = values.get(tokens[index])
            if value is None:
                return Markup("")
            return _LINE_BREAK.join(escape(line) for line in _NEWLINE_RE.split(str(value)))

        return template.render(slot=slot)

    def render(self, template_bytes: bytes, values: dict[str, str]) -> bytes:
        """Return rendered .docx bytes.

        Unknown tokens render as ''. Raises RenderFailureException for a bad
        zip, a missing document part, an unreadable zip member or a template
        syntax error.
        """
        try:
            source = zipfile.ZipFile(io.BytesIO(template_bytes))
        except zipfile.BadZipFile as e:
            raise RenderFailureException(f"Template is not a valid .docx file: {e}") from e

        out = io.BytesIO()
        with source, zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as target:
            names = source.namelist()
            if DOCUMENT_PART not in names:
                raise RenderFailureException(f"Template has no {DOCUMENT_PART}")
            for info in source.infolist():
                try:
                    data = source.read(info.filename)
                except _UNREADABLE_MEMBER_ERRORS as e:
                    raise RenderFailureException(
                        f"Template part {info.filename} cannot be read: {e}"
                    ) from e
                if _RENDERED_PART_RE.match(info.filename):
                    try:
                        rendered = self._render_part(data.decode("utf-8"), values)
                    except TemplateError as e:
                        raise RenderFailureException(
                            f"{info.filename}: {e.message or e}"
                        ) from e
                    except UnicodeDecodeError as e:
                        raise RenderFailureException(
                            f"{info.filename} is not UTF-8 XML: {e}"
                        ) from e
                    data = rendered.encode("utf-8")
                target.writestr(info.filename, data, compress_type=zipfile.ZIP_DEFLATED)
        return out.getvalue()
