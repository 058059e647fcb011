"""Data models for the Wolai to Markdown export pipeline."""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger('wolai_markdown_exporter')

# Block types that own nested blocks and are rendered as list containers
CONTAINER_BLOCK_TYPES = frozenset({'enum_list', 'bull_list', 'todo_list'})


class ExitCode(IntEnum):
    """Process exit codes reported by the CLI."""
    SUCCESS = 0
    PARAM_ERROR = 1
    TOKEN_ERROR = 2
    PERMISSION_ERROR = 3
    OUTPUT_ERROR = 4
    UNKNOWN_ERROR = 5


@dataclass
class RichText:
    """One styled run (or special inline element) of block content."""

    type: str
    title: str = ''
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    inline_code: bool = False
    front_color: Optional[str] = None
    back_color: Optional[str] = None
    link: Optional[str] = None
    block_id: Optional[str] = None  # bi_link target
    content: List['RichText'] = field(default_factory=list)  # footnote body

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RichText':
        """Build a run from its API representation."""
        return cls(
            type=data.get('type', 'text'),
            title=data.get('title') or '',
            bold=bool(data.get('bold', False)),
            italic=bool(data.get('italic', False)),
            underline=bool(data.get('underline', False)),
            strikethrough=bool(data.get('strikethrough', False)),
            inline_code=bool(data.get('inline_code', False)),
            front_color=data.get('front_color') or None,
            back_color=data.get('back_color') or None,
            link=data.get('link') or None,
            block_id=data.get('block_id'),
            content=[cls.from_dict(item) for item in data.get('content') or []]
        )


@dataclass
class Media:
    """Media reference of an image block."""

    type: str  # "internal" or "external"
    download_url: Optional[str] = None
    url: Optional[str] = None

    @property
    def source_url(self) -> Optional[str]:
        """URL the asset is fetched from."""
        if self.type == 'internal':
            return self.download_url
        if self.type == 'external':
            return self.url
        return None


@dataclass
class Dimensions:
    width: Optional[float] = None
    height: Optional[float] = None


@dataclass
class Icon:
    type: str = 'emoji'
    icon: str = ''


@dataclass
class Block:
    """
    A block of the remote document tree.

    Type-specific fields are only populated when the block's type uses them.
    """

    id: str
    type: str
    content: List[RichText] = field(default_factory=list)
    level: Optional[int] = None
    language: Optional[str] = None
    caption: Optional[str] = None
    checked: Optional[bool] = None
    media: Optional[Media] = None
    dimensions: Optional[Dimensions] = None
    icon: Optional[Icon] = None
    embed_link: Optional[str] = None

    @property
    def is_container(self) -> bool:
        """Whether the block owns nested blocks rendered under it."""
        return self.type in CONTAINER_BLOCK_TYPES

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Block':
        """Build a block from its API representation."""
        media_data = data.get('media')
        dimensions_data = data.get('dimensions')
        icon_data = data.get('icon')

        media = None
        if isinstance(media_data, dict):
            media = Media(
                type=media_data.get('type', ''),
                download_url=media_data.get('download_url'),
                url=media_data.get('url')
            )

        dimensions = None
        if isinstance(dimensions_data, dict):
            dimensions = Dimensions(
                width=dimensions_data.get('width'),
                height=dimensions_data.get('height')
            )

        icon = None
        if isinstance(icon_data, dict):
            icon = Icon(type=icon_data.get('type', 'emoji'), icon=icon_data.get('icon') or '')

        return cls(
            id=data['id'],
            type=data['type'],
            content=[RichText.from_dict(item) for item in data.get('content') or []],
            level=data.get('level'),
            language=data.get('language'),
            caption=data.get('caption'),
            checked=data.get('checked'),
            media=media,
            dimensions=dimensions,
            icon=icon,
            embed_link=data.get('embed_link')
        )


@dataclass
class Leaf:
    """Rendered output of a block that owns no nested blocks."""

    lines: List[str] = field(default_factory=list)


@dataclass
class Container:
    """Rendered output of a children-bearing block (lists and the page root)."""

    lines: List[str] = field(default_factory=list)
    children: List['OutputNode'] = field(default_factory=list)


OutputNode = Union[Leaf, Container]


@dataclass
class ConversionContext:
    """Mutable accumulator for a single page conversion."""

    footnotes: List[str] = field(default_factory=list)
    child_pages: Dict[str, str] = field(default_factory=dict)  # block id -> title
    child_page_dirs: Dict[str, str] = field(default_factory=dict)  # block id -> directory name
    # placeholder name -> source url, so a repeated url still gets its own entry
    images: Dict[str, str] = field(default_factory=dict)
    result: List[OutputNode] = field(default_factory=list)

    def register_image(self, url: str) -> str:
        """Assign the next placeholder name to an image URL."""
        name = f"image{len(self.images)}"
        self.images[name] = url
        return name


__all__ = [
    'CONTAINER_BLOCK_TYPES',
    'ExitCode',
    'RichText',
    'Media',
    'Dimensions',
    'Icon',
    'Block',
    'Leaf',
    'Container',
    'OutputNode',
    'ConversionContext'
]
