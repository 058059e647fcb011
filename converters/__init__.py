"""Converters package for rendering Wolai blocks to Markdown."""

from .block_renderer import BlockRenderer, MalformedBlockError, page_directory_name
from .colors import BACK_COLOR_HEX, FRONT_COLOR_HEX
from .rich_text import RichTextRenderer
from .serializer import serialize_nodes

__all__ = [
    'serialize_nodes',
    'BlockRenderer',
    'MalformedBlockError',
    'RichTextRenderer',
    'page_directory_name',
    'FRONT_COLOR_HEX',
    'BACK_COLOR_HEX'
]
