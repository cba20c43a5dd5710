"""XML tag markup for serialized comments."""

from __future__ import annotations

import html

CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"

# A literal "]]>" would end the CDATA section early, so it is split
# across two sections.
_CDATA_SPLIT = "]]]]><![CDATA[>"


class MarkupBuilder:
    """Builds opening and closing tags for comment elements.

    Example:
        builder = MarkupBuilder(prefix="xqdoc")
        builder.begin_tag("custom", "since-2.0")
        # '<xqdoc:custom tag="since-2.0">'

    Attributes:
        prefix: Namespace prefix placed before every element name
        attribute_name: Name of the attribute carried by tagged elements
    """

    def __init__(self, prefix: str = "", attribute_name: str = "tag"):
        self.prefix = prefix
        self.attribute_name = attribute_name

    def qualified_name(self, name: str) -> str:
        """Element name with the namespace prefix applied."""
        if self.prefix:
            return f"{self.prefix}:{name}"
        return name

    def begin_tag(self, name: str, attribute: str | None = None) -> str:
        """Build an opening tag.

        Args:
            name: Element name
            attribute: Optional value for the tag attribute

        Returns:
            Opening tag markup
        """
        qname = self.qualified_name(name)
        if attribute is None:
            return f"<{qname}>"
        value = html.escape(attribute, quote=True)
        return f'<{qname} {self.attribute_name}="{value}">'

    def end_tag(self, name: str) -> str:
        """Build a closing tag."""
        return f"</{self.qualified_name(name)}>"

    @staticmethod
    def cdata_open() -> str:
        return CDATA_OPEN

    @staticmethod
    def cdata_close() -> str:
        return CDATA_CLOSE

    @staticmethod
    def escape_cdata(text: str) -> str:
        """Make text safe for inclusion inside a CDATA section."""
        return text.replace(CDATA_CLOSE, _CDATA_SPLIT)
