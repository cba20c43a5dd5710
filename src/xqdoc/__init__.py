"""xqdoc - xqDoc comment block extraction.

Converts xqDoc comment blocks (``(:~ ... :)``) into XML fragments with one
element per documented section.

Example:
    from xqdoc import CommentSectionParser, parse_comment

    parse_comment("(:~ A simple description. :)")
    # '<comment><description><![CDATA[A simple description.]]></description></comment>'
"""

from xqdoc.base import (
    BEGIN_COMMENT,
    END_COMMENT,
    SECTION_ORDER,
    TAG_KEYWORDS,
    CommentProcessingError,
    CommentStateError,
    Section,
    XQDocError,
)
from xqdoc.comment import CommentSectionParser, parse_comment
from xqdoc.config import (
    CommentConfig,
    ConfigError,
    ConfigSourceError,
    ConfigValidationError,
    load_config,
)
from xqdoc.markup import MarkupBuilder

__version__ = "1.0.0"

__all__ = [
    # Parser
    "CommentSectionParser",
    "parse_comment",
    # Sections
    "Section",
    "SECTION_ORDER",
    "TAG_KEYWORDS",
    "BEGIN_COMMENT",
    "END_COMMENT",
    # Markup
    "MarkupBuilder",
    # Configuration
    "CommentConfig",
    "load_config",
    # Errors
    "XQDocError",
    "CommentProcessingError",
    "CommentStateError",
    "ConfigError",
    "ConfigSourceError",
    "ConfigValidationError",
]
