"""Block renderer dispatching Wolai blocks to Markdown/HTML output nodes."""

import logging
import re
from typing import Callable, Dict, List, Optional
from urllib.parse import quote

from models import Block, Container, ConversionContext, Leaf, OutputNode

from .rich_text import RichTextRenderer

CODE_CAPTION_TEMPLATE = '<div style="color:#838383;margin:-0.75rem 10px 0;">{caption}</div>'
EMBED_TEMPLATE = '<iframe src="{link}" width="100%" style="border:none;"></iframe>'

# Characters that cannot appear in a directory name on common filesystems
_UNSAFE_PATH_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


class MalformedBlockError(Exception):
    """A block lacks a field that its declared type requires."""
    pass


def page_directory_name(title: str) -> str:
    """Turn a page title into a safe directory name."""
    name = _UNSAFE_PATH_CHARS.sub('_', title).strip()
    # "." and ".." would escape the parent directory
    if not name.strip('.'):
        name = name.replace('.', '_') or '_'
    return name


class BlockRenderer:
    """
    Renders single Wolai blocks into output nodes.

    List blocks (``enum_list``, ``bull_list``, ``todo_list``) become
    ``Container`` nodes whose children are filled in later by the fetcher.
    Every other block becomes a ``Leaf`` wrapped in an anchor paragraph
    keyed by the block id, so bi-directional links can jump to it.
    """

    def __init__(
        self,
        rich_text_renderer: Optional[RichTextRenderer] = None,
        assets_directory: str = 'assets',
        logger: Optional[logging.Logger] = None
    ):
        self.logger = logger or logging.getLogger('wolai_markdown_exporter.converters.block_renderer')
        self.rich_text = rich_text_renderer or RichTextRenderer()
        # Sub-page directories share the page directory with its image folder
        self.assets_directory = assets_directory

        self._handlers: Dict[str, Callable[[Block, ConversionContext], List[str]]] = {
            'code': self._render_code,
            'heading': self._render_heading,
            'text': self._render_text,
            'quote': self._render_quote,
            'enum_list': self._render_enum_list,
            'bull_list': self._render_bull_list,
            'todo_list': self._render_todo_list,
            'divider': self._render_divider,
            'image': self._render_image,
            'callout': self._render_callout,
            'block_equation': self._render_block_equation,
            'embed': self._render_embed,
            'page': self._render_page,
        }

    def render(self, block: Block, ctx: ConversionContext) -> OutputNode:
        """
        Render a block into an output node.

        Args:
            block: Block fetched from the API
            ctx: Conversion context of the page being converted

        Returns:
            ``Container`` for list blocks, ``Leaf`` otherwise
        """
        handler = self._handlers.get(block.type)
        if handler is None:
            self.logger.debug(f"Unsupported block type '{block.type}' ({block.id}), emitting empty anchor")
            lines = []
        else:
            try:
                lines = handler(block, ctx)
            except MalformedBlockError as e:
                self.logger.warning(f"Malformed {block.type} block {block.id}: {e}")
                lines = [f"<!-- malformed {block.type} block {block.id}: {e} -->"]

        if block.is_container:
            return Container(lines=lines)

        return Leaf(lines=[f'<p id="{block.id}">', ''] + lines + ['', '</p>'])

    def _text(self, block: Block, ctx: ConversionContext) -> str:
        return self.rich_text.render(block.content, ctx)

    def _render_code(self, block: Block, ctx: ConversionContext) -> List[str]:
        language = block.language or 'plaintext'
        source = block.content[0].title if block.content else ''

        lines = ['```' + language, source, '```']
        if block.caption:
            lines.append(CODE_CAPTION_TEMPLATE.format(caption=block.caption))
        return lines

    def _render_heading(self, block: Block, ctx: ConversionContext) -> List[str]:
        if not block.level:
            raise MalformedBlockError("missing heading level")
        return ['#' * int(block.level) + ' ' + self._text(block, ctx)]

    def _render_text(self, block: Block, ctx: ConversionContext) -> List[str]:
        return [self._text(block, ctx)]

    def _render_quote(self, block: Block, ctx: ConversionContext) -> List[str]:
        return ['> ' + self._text(block, ctx)]

    def _render_enum_list(self, block: Block, ctx: ConversionContext) -> List[str]:
        return ['1. ' + self._text(block, ctx)]

    def _render_bull_list(self, block: Block, ctx: ConversionContext) -> List[str]:
        return ['- ' + self._text(block, ctx)]

    def _render_todo_list(self, block: Block, ctx: ConversionContext) -> List[str]:
        mark = 'x' if block.checked else ' '
        return [f"- [{mark}] " + self._text(block, ctx)]

    def _render_divider(self, block: Block, ctx: ConversionContext) -> List[str]:
        return ['---']

    def _render_image(self, block: Block, ctx: ConversionContext) -> List[str]:
        if block.media is None:
            raise MalformedBlockError("missing media")
        url = block.media.source_url
        if not url:
            raise MalformedBlockError(f"no url for {block.media.type or 'unknown'} media")

        name = ctx.register_image(url)

        attributes = f'src="[{name}]"'
        if block.dimensions is not None:
            if block.dimensions.width is not None:
                attributes += f' width="{_format_dimension(block.dimensions.width)}"'
            if block.dimensions.height is not None:
                attributes += f' height="{_format_dimension(block.dimensions.height)}"'

        return [f"<img {attributes}>"]

    def _render_callout(self, block: Block, ctx: ConversionContext) -> List[str]:
        opening = '::: tip'
        if block.icon is not None and block.icon.icon:
            opening += ' ' + block.icon.icon
        return [opening, self._text(block, ctx), ':::']

    def _render_block_equation(self, block: Block, ctx: ConversionContext) -> List[str]:
        source = block.content[0].title if block.content else ''
        return [f"$${source}$$"]

    def _render_embed(self, block: Block, ctx: ConversionContext) -> List[str]:
        if not block.embed_link:
            raise MalformedBlockError("missing embed link")
        return [EMBED_TEMPLATE.format(link=block.embed_link)]

    def _render_page(self, block: Block, ctx: ConversionContext) -> List[str]:
        title = self._text(block, ctx)
        if not title.strip():
            title = 'untitled-page-' + block.id

        directory = page_directory_name(title)
        if directory == self.assets_directory or directory in ctx.child_page_dirs.values():
            directory = f"{directory}-{block.id}"

        ctx.child_pages[block.id] = title
        ctx.child_page_dirs[block.id] = directory

        return [f"[{title}](./{quote(directory)}/index.md)"]


def _format_dimension(value: float) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:.2f}".rstrip('0').rstrip('.')


__all__ = ['BlockRenderer', 'MalformedBlockError', 'page_directory_name']
