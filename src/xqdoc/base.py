"""Base types for xqDoc comment processing.

This module provides the section enumeration, the tag keyword table and
the exception hierarchy shared by the parser, the markup builder and the
configuration layer.
"""

from __future__ import annotations

from enum import Enum


# =============================================================================
# Markers
# =============================================================================

BEGIN_COMMENT = "(:~"
END_COMMENT = ":)"
CONTINUATION_MARKER = ":"

COMMENT_TAG = "comment"


# =============================================================================
# Enums
# =============================================================================


class Section(str, Enum):
    """Sections of an xqDoc comment block.

    Declaration order is the output order of the serialized comment. Each
    value doubles as the XML element name of the section.
    """

    DESCRIPTION = "description"
    AUTHOR = "author"
    VERSION = "version"
    PARAM = "param"
    RETURN = "return"
    ERROR = "error"
    DEPRECATED = "deprecated"
    SEE = "see"
    SINCE = "since"
    CUSTOM = "custom"

    @property
    def tag_name(self) -> str:
        """XML element name for this section."""
        return self.value


SECTION_ORDER: tuple[Section, ...] = tuple(Section)

# Scanned top to bottom; the first keyword present in a line wins,
# regardless of where in the line it occurs.
TAG_KEYWORDS: tuple[tuple[str, Section], ...] = (
    ("@param", Section.PARAM),
    ("@return", Section.RETURN),
    ("@error", Section.ERROR),
    ("@deprecated", Section.DEPRECATED),
    ("@see", Section.SEE),
    ("@since", Section.SINCE),
    ("@custom", Section.CUSTOM),
    ("@author", Section.AUTHOR),
    ("@version", Section.VERSION),
)


def find_tag_keyword(line: str) -> tuple[str, Section, int] | None:
    """Find the highest priority tag keyword in a line.

    Args:
        line: A single line of comment text.

    Returns:
        Tuple of (keyword, section, index of the keyword), or None if the
        line carries no tag keyword.
    """
    for keyword, section in TAG_KEYWORDS:
        index = line.find(keyword)
        if index > -1:
            return keyword, section, index
    return None


# =============================================================================
# Exceptions
# =============================================================================


class XQDocError(Exception):
    """Base exception for all xqdoc errors."""

    pass


class CommentProcessingError(XQDocError):
    """Raised when the comment text cannot be read into lines."""

    pass


class CommentStateError(XQDocError):
    """Raised when a parser is reused without being cleared."""

    pass
