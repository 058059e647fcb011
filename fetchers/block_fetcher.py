"""Recursive block tree fetcher that converts a Wolai page into output nodes."""

import logging
import time
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from converters.block_renderer import BlockRenderer
from models import Block, Container, ConversionContext, Leaf, OutputNode
from wolai_client import WolaiApiError, WolaiClient

from .base_fetcher import (
    PermissionDeniedError,
    RateLimitExceededError,
    TokenInvalidError,
    UnknownFetchError
)

DEFAULT_RATE_LIMIT_DELAY = 5.0

T = TypeVar('T')


class BlockTreeFetcher:
    """
    Walks a page's block tree depth first and renders every block.

    Nested list blocks are fetched synchronously as they are encountered, so
    the resulting node tree is always in document order. Rate-limit errors
    are retried in a loop after a fixed delay; authentication, permission
    and unknown errors abort the whole conversion.
    """

    def __init__(
        self,
        client: WolaiClient,
        renderer: Optional[BlockRenderer] = None,
        rate_limit_delay: float = DEFAULT_RATE_LIMIT_DELAY,
        max_rate_limit_retries: Optional[int] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the fetcher.

        Args:
            client: Wolai API client
            renderer: Block renderer (a default one is created if omitted)
            rate_limit_delay: Seconds to wait after a rate-limit error
            max_rate_limit_retries: Retry bound for rate-limit errors
                (None retries forever)
            logger: Logger instance
        """
        self.client = client
        self.renderer = renderer or BlockRenderer()
        self.rate_limit_delay = rate_limit_delay
        self.max_rate_limit_retries = max_rate_limit_retries
        self.logger = logger or logging.getLogger('wolai_markdown_exporter.fetcher')

    def convert_page(self, page_id: str, title: str) -> ConversionContext:
        """
        Convert a page's direct children (and their nested lists).

        Args:
            page_id: Wolai page ID
            title: Page title used for the top-level heading

        Returns:
            Populated ConversionContext; ``result`` ends with footnote definitions
        """
        self.logger.info(f"Converting page '{title}' ({page_id})")

        ctx = ConversionContext()
        ctx.result.append(Leaf(lines=['# ' + title]))

        for block in self._fetch_children(page_id):
            node = self._render(block, ctx)
            node.lines.append('')
            ctx.result.append(node)

        for index, footnote in enumerate(ctx.footnotes, start=1):
            ctx.result.append(Leaf(lines=['', f"[^{index}]: {footnote}"]))

        self.logger.debug(
            f"Page {page_id}: {len(ctx.result)} nodes, {len(ctx.footnotes)} footnotes, "
            f"{len(ctx.images)} images, {len(ctx.child_pages)} child pages"
        )
        return ctx

    def fetch_subtree(self, block_id: str, ctx: ConversionContext) -> List[OutputNode]:
        """
        Fetch and render the children of a container block.

        Args:
            block_id: Container block ID
            ctx: Conversion context of the page being converted

        Returns:
            Rendered child nodes in document order
        """
        nodes: List[OutputNode] = []
        for block in self._fetch_children(block_id):
            node = self._render(block, ctx)
            # Nested containers carry their own spacing
            if isinstance(node, Leaf):
                node.lines.append('')
            nodes.append(node)
        return nodes

    def _render(self, block: Block, ctx: ConversionContext) -> OutputNode:
        node = self.renderer.render(block, ctx)
        if isinstance(node, Container):
            node.children = self.fetch_subtree(block.id, ctx)
        return node

    def fetch_page_title(self, page_id: str) -> str:
        """
        Resolve a page's title from its own block.

        Returns:
            Plain concatenation of the title runs, or ``untitled-page-<id>``
        """
        page = self._call_api(page_id, self.client.get_block)
        title = ''.join(run.title for run in page.content).strip()
        return title or 'untitled-page-' + page_id

    def _fetch_children(self, block_id: str) -> List[Block]:
        self.logger.info(f"Fetching children of block: {block_id}")
        return self._call_api(block_id, self.client.get_children)

    def _call_api(self, block_id: str, fetch: Callable[[str], T]) -> T:
        """
        Call the API for a block, retrying on rate limits and classifying failures.

        Raises:
            TokenInvalidError: Token rejected
            PermissionDeniedError: Block not readable with this token
            RateLimitExceededError: Configured retry bound exhausted
            UnknownFetchError: Any other API or transport failure
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                return fetch(block_id)

            except WolaiApiError as e:
                if e.is_token_invalid:
                    raise TokenInvalidError() from e
                if e.is_permission_denied:
                    raise PermissionDeniedError(block_id) from e
                if not e.is_rate_limited:
                    raise UnknownFetchError(block_id, e) from e

                if self.max_rate_limit_retries is not None and attempt > self.max_rate_limit_retries:
                    raise RateLimitExceededError(block_id, attempt) from e

                self.logger.warning(
                    f"Failed to fetch block: {block_id}, API rate limit exceeded, "
                    f"waiting for {self.rate_limit_delay:g} seconds (attempt {attempt})..."
                )
                time.sleep(self.rate_limit_delay)

            except requests.exceptions.RequestException as e:
                raise UnknownFetchError(block_id, e) from e

    @classmethod
    def from_config(cls, config: Dict[str, Any], client: WolaiClient) -> 'BlockTreeFetcher':
        """Create a fetcher using the advanced and export settings of a configuration."""
        advanced_config = config.get('advanced', {})
        export_config = config.get('export', {})
        return cls(
            client=client,
            renderer=BlockRenderer(assets_directory=export_config.get('assets_directory', 'assets')),
            rate_limit_delay=advanced_config.get('rate_limit_delay', DEFAULT_RATE_LIMIT_DELAY),
            max_rate_limit_retries=advanced_config.get('max_rate_limit_retries')
        )


__all__ = ['BlockTreeFetcher', 'DEFAULT_RATE_LIMIT_DELAY']
