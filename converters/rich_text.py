"""Rich text renderer turning Wolai text runs into inline Markdown/HTML."""

import logging
from typing import List, Optional

from models import ConversionContext, RichText

from .colors import BACK_COLOR_HEX, FRONT_COLOR_HEX

BI_LINK_TEMPLATE = '<a href="#{block_id}" style="color:inherit;text-decoration:underline dashed;">{title}</a>'


class RichTextRenderer:
    """
    Renders an ordered sequence of rich text runs into a single inline string.

    Supported run types are ``text``, ``equation``, ``footnote`` and
    ``bi_link``. Anything else (e.g. ``mention_member``) renders as nothing.
    Footnote bodies are collected into the conversion context so the page
    assembler can emit their definitions at the end of the page.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('wolai_markdown_exporter.converters.rich_text')

    def render(self, runs: List[RichText], ctx: ConversionContext) -> str:
        """
        Render runs left to right.

        Args:
            runs: Rich text runs of a block (or of a footnote body)
            ctx: Conversion context receiving footnote bodies

        Returns:
            Inline markup string
        """
        parts = []
        for run in runs:
            if run.type == 'text':
                parts.append(self.render_text(run))
            elif run.type == 'equation':
                parts.append(f"${run.title}$")
            elif run.type == 'footnote':
                # Reserve the slot first so footnotes nested in this body
                # are numbered after it
                index = len(ctx.footnotes)
                ctx.footnotes.append('')
                parts.append(f"[^{index + 1}]")
                ctx.footnotes[index] = self.render(run.content, ctx)
            elif run.type == 'bi_link':
                parts.append(BI_LINK_TEMPLATE.format(block_id=run.block_id or '', title=run.title))
            else:
                self.logger.debug(f"Skipping unsupported rich text type '{run.type}'")
        return ''.join(parts)

    def render_text(self, run: RichText) -> str:
        """Apply styles, link and line breaks to a single text run."""
        text = run.title.strip()
        if not text:
            return ''

        text = self._apply_styles(text, run)

        if run.link:
            text = f"[{text}](<{run.link}>)"

        # Wolai line breaks are bare '\n'
        return text.replace('\n', '<br>')

    def _apply_styles(self, text: str, run: RichText) -> str:
        if run.bold:
            text = f"**{text}**"
        if run.italic:
            text = f"*{text}*"
        if run.underline:
            text = f'<span style="text-decoration:underline;">{text}</span>'
        if run.strikethrough:
            text = f"~~{text}~~"
        if run.inline_code:
            text = f"`{text}`"

        front_hex = self._lookup_color(run.front_color, FRONT_COLOR_HEX)
        if front_hex:
            text = f'<span style="color:{front_hex};">{text}</span>'

        back_hex = self._lookup_color(run.back_color, BACK_COLOR_HEX)
        if back_hex:
            text = f'<span style="background-color:{back_hex};">{text}</span>'

        return text

    def _lookup_color(self, name: Optional[str], table) -> Optional[str]:
        if not name:
            return None
        hex_value = table.get(name)
        if hex_value is None:
            self.logger.debug(f"Unknown color '{name}', leaving text uncolored")
        return hex_value


__all__ = ['RichTextRenderer']
