"""xqDoc comment block parsing.

This module turns the raw text of an xqDoc comment block into a serialized
XML fragment. Each line of the block is classified into a section
(description, author, version, param, return, error, deprecated, see,
since or custom), its text is normalized and appended to that section's
buffer, and the buffers are joined in a fixed section order.

Example:
    from xqdoc.comment import CommentSectionParser

    parser = CommentSectionParser()
    parser.set_comment('''(:~ Adds two numbers.
     : @param $a the first number
     : @return the sum
    :)''')
    xml = parser.get_xml()

    # Or, for a one-off block
    from xqdoc.comment import parse_comment
    xml = parse_comment("(:~ A simple description. :)")

Notes:
    Tag keywords are found by plain substring search, so "@see" inside
    running text (or "@returns") still starts a new section.
"""

from __future__ import annotations

import io
import logging
import re

from xqdoc.base import (
    BEGIN_COMMENT,
    COMMENT_TAG,
    CONTINUATION_MARKER,
    END_COMMENT,
    SECTION_ORDER,
    CommentProcessingError,
    CommentStateError,
    Section,
    find_tag_keyword,
)
from xqdoc.config import CommentConfig
from xqdoc.markup import MarkupBuilder

logger = logging.getLogger(__name__)

_CONTINUATION_LINE = re.compile(r"^\s*" + re.escape(CONTINUATION_MARKER))


def _leading_whitespace(text: str) -> int:
    return len(text) - len(text.lstrip())


def _strip_indent(text: str, count: int) -> str:
    """Remove up to ``count`` leading whitespace characters.

    Text shorter than ``count`` is returned unchanged.
    """
    if len(text) < count:
        return text
    return text[min(count, _leading_whitespace(text)):]


def _end_index(line: str) -> int:
    index = line.find(END_COMMENT)
    return len(line) if index == -1 else index


class CommentSectionParser:
    """Parser for a single xqDoc comment block.

    The parser holds per-block state and must be cleared between blocks:

        parser.clear()
        parser.set_comment(text)
        xml = parser.get_xml()

    With ``strict_reset`` enabled (the default) a second ``get_xml()`` or
    ``set_comment()`` without ``clear()`` raises CommentStateError instead
    of appending the block to the previous output. Instances are not
    thread-safe; use one per thread or ``parse_comment``.

    Attributes:
        config: Parsing and serialization options
        markup: Tag builder used for every emitted element
    """

    def __init__(
        self,
        config: CommentConfig | None = None,
        markup: MarkupBuilder | None = None,
    ):
        self.config = config or CommentConfig()
        self.markup = markup or MarkupBuilder(
            prefix=self.config.namespace_prefix,
            attribute_name=self.config.custom_attribute,
        )
        self.clear()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def clear(self) -> None:
        """Reset buffers and state for a new comment block."""
        self._buffers: dict[Section, list[str]] = {
            section: [] for section in SECTION_ORDER
        }
        self._comment: str | None = None
        self._leading_spaces = 0
        self._section: Section | None = None
        self._open = False
        self._has_text = False
        self._parsed = False

    def set_comment(self, comment: str | None) -> None:
        """Set the comment block to parse on the next ``get_xml()``.

        Args:
            comment: Raw comment text, from ``(:~`` through ``:)``

        Raises:
            CommentStateError: A block was already parsed and the parser
                has not been cleared
        """
        if self.config.strict_reset and self._parsed:
            raise CommentStateError(
                "Comment block already parsed; call clear() before set_comment()"
            )
        self._comment = comment
        self._leading_spaces = 0

    def get_xml(self) -> str:
        """Parse the current comment block and serialize it.

        Returns:
            The ``comment`` element with one child per section entry, in
            fixed section order, or an empty string if no comment is set

        Raises:
            CommentProcessingError: The comment text could not be read
            CommentStateError: Called again without an intervening clear()
        """
        if self._comment is None:
            return ""
        if self.config.strict_reset and self._parsed:
            raise CommentStateError(
                "Comment block already parsed; call clear() before get_xml()"
            )
        self._parsed = True

        try:
            self._build_sections()
        except CommentProcessingError:
            self._buffers = {section: [] for section in SECTION_ORDER}
            self._open = False
            raise

        parts = [self.markup.begin_tag(COMMENT_TAG)]
        parts.extend("".join(self._buffers[section]) for section in SECTION_ORDER)
        parts.append(self.markup.end_tag(COMMENT_TAG))
        return "".join(parts)

    @property
    def current_section(self) -> Section | None:
        """Section receiving text, or None before anything started."""
        return self._section

    @property
    def leading_spaces(self) -> int:
        """Indentation baseline of the current section."""
        return self._leading_spaces

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def _split_lines(self) -> list[str]:
        try:
            with io.StringIO(self._comment, newline=None) as reader:
                return [line.rstrip("\n") for line in reader]
        except (OSError, TypeError, ValueError) as e:
            raise CommentProcessingError("Problems processing the comment block.") from e

    def _build_sections(self) -> None:
        lines = self._split_lines()

        for line in lines:
            self._process_line(line)

        if self._open and self.config.close_unterminated:
            logger.warning(
                "Comment block has no end marker %r; closing %s section",
                END_COMMENT,
                self._section.value,
            )
            self._close_entry()

        logger.debug("Parsed comment block of %d lines", len(lines))

    def _process_line(self, line: str) -> None:
        """Classify one line and append it to the matching section."""
        match = find_tag_keyword(line)
        if match is not None:
            keyword, section, index = match
            offset = index + len(keyword)
            attribute = None
            if section is Section.CUSTOM:
                attribute, offset = self._custom_attribute(line, offset)

            self._close_entry()
            logger.debug(
                "Section transition %s -> %s",
                self._section.value if self._section else None,
                section.value,
            )
            self._section = section
            self._open_entry(attribute)
            self._append_first_line(line, offset)
        else:
            if self._section is None:
                logger.debug("Starting implicit description section")
                self._section = Section.DESCRIPTION
            if not self._open:
                self._open_entry(None)
            self._append_line(line)

        if END_COMMENT in line:
            self._close_entry()

    @staticmethod
    def _custom_attribute(line: str, offset: int) -> tuple[str | None, int]:
        """Extract the ``:name`` following ``@custom``.

        Returns:
            Tuple of (attribute or None, offset where the text starts)
        """
        rest = line[offset:_end_index(line)]
        if not rest.startswith(":"):
            return None, offset
        rest = rest[1:]
        space = rest.find(" ")
        tag = rest if space == -1 else rest[:space]
        return tag, offset + 1 + len(tag)

    # -------------------------------------------------------------------------
    # Section buffers
    # -------------------------------------------------------------------------

    def _open_entry(self, attribute: str | None) -> None:
        buffer = self._buffers[self._section]
        buffer.append(self.markup.begin_tag(self._section.tag_name, attribute))
        buffer.append(self.markup.cdata_open())
        self._open = True
        self._has_text = False

    def _close_entry(self) -> None:
        if not self._open:
            return
        buffer = self._buffers[self._section]
        text = "".join(buffer).rstrip()
        buffer[:] = [
            text,
            self.markup.cdata_close(),
            self.markup.end_tag(self._section.tag_name),
        ]
        self._open = False

    def _write(self, text: str) -> None:
        if not text:
            return
        self._buffers[self._section].append(self.markup.escape_cdata(text))
        self._has_text = True

    def _newline_if_text(self) -> None:
        if self._has_text:
            self._write("\n")

    def _append_first_line(self, line: str, offset: int) -> None:
        # Text on a tag line sets the indentation baseline for the lines
        # that continue the section.
        text = line[offset:_end_index(line)]
        self._leading_spaces = _leading_whitespace(text)
        self._write(text.strip())

    def _append_line(self, line: str) -> None:
        last = _end_index(line)

        begin = line.find(BEGIN_COMMENT)
        if begin > -1:
            text = line[begin + len(BEGIN_COMMENT):last]
            self._leading_spaces = _leading_whitespace(text)
            self._newline_if_text()
            self._write(text[self._leading_spaces:])
            return

        if _CONTINUATION_LINE.match(line):
            colon = line.index(CONTINUATION_MARKER)
            if colon < last:
                text = line[colon + 1:last]
                if self._has_text:
                    self._write("\n")
                else:
                    self._leading_spaces = _leading_whitespace(text)
            else:
                # The colon belongs to the end marker.
                text = line[:last]
                self._newline_if_text()
        else:
            text = line[:last]
            if self._has_text:
                self._write("\n")
            else:
                self._leading_spaces = _leading_whitespace(text)

        self._write(_strip_indent(text, self._leading_spaces))


def parse_comment(comment: str | None, config: CommentConfig | None = None) -> str:
    """Serialize one comment block with a fresh parser.

    Args:
        comment: Raw comment text
        config: Optional configuration

    Returns:
        Serialized ``comment`` element, or "" for a None comment
    """
    parser = CommentSectionParser(config)
    parser.set_comment(comment)
    return parser.get_xml()
