"""Markdown exporter writing converted Wolai pages to a directory tree."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from converters.serializer import serialize_nodes
from fetchers.block_fetcher import BlockTreeFetcher

from .asset_manager import AssetManager


class ExportError(Exception):
    """Writing export output to the filesystem failed."""
    pass


class MarkdownExporter:
    """
    Exports a Wolai page and all of its sub-pages to local markdown files.

    Each page becomes ``<dir>/index.md`` with its images under
    ``<dir>/assets/``; sub-pages are exported depth first into
    sub-directories named after their titles.
    """

    def __init__(
        self,
        fetcher: BlockTreeFetcher,
        asset_manager: AssetManager,
        config: Optional[Dict[str, Any]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the markdown exporter.

        Args:
            fetcher: Block tree fetcher used to convert each page
            asset_manager: Asset manager downloading page images
            config: Configuration dictionary
            logger: Logger instance
        """
        self.fetcher = fetcher
        self.asset_manager = asset_manager
        self.config = config or {}
        self.logger = logger or logging.getLogger('wolai_markdown_exporter.exporters.markdown_exporter')

        self.stats = {
            'pages_exported': 0,
            'images_downloaded': 0,
            'images_failed': 0,
            'image_bytes': 0
        }

    def export_page(self, page_id: str, title: str, output_dir: Path) -> Dict[str, Any]:
        """
        Export a page and, recursively, every sub-page it links to.

        Args:
            page_id: Wolai page ID
            title: Page title
            output_dir: Existing directory receiving the page's index.md

        Returns:
            Statistics dictionary

        Raises:
            FetcherError: Fatal fetch failure (token, permission, unknown)
            ExportError: Output could not be written
        """
        self._export_page(page_id, title, Path(output_dir))

        asset_stats = self.asset_manager.get_stats()
        self.stats['images_downloaded'] = asset_stats['downloaded']
        self.stats['images_failed'] = asset_stats['failed']
        self.stats['image_bytes'] = asset_stats['total_size_bytes']

        self.logger.info(
            f"Exported {self.stats['pages_exported']} page(s), "
            f"{self.stats['images_downloaded']} image(s) downloaded "
            f"({self.stats['image_bytes'] / 1024:.1f} KiB), "
            f"{self.stats['images_failed']} failed"
        )
        return self.stats.copy()

    def _export_page(self, page_id: str, title: str, page_dir: Path) -> None:
        ctx = self.fetcher.convert_page(page_id, title)

        markdown = serialize_nodes(ctx.result)
        try:
            markdown = self.asset_manager.process_images(ctx.images, markdown, page_dir)
        except OSError as e:
            raise ExportError(f"failed to create assets directory in {page_dir}: {e}") from e

        index_path = page_dir / 'index.md'
        try:
            index_path.write_text(markdown, encoding='utf-8')
        except OSError as e:
            raise ExportError(f"failed to write {index_path}: {e}") from e

        self.stats['pages_exported'] += 1
        self.logger.info(f"Wrote '{title}' -> {index_path}")

        for child_id, child_title in ctx.child_pages.items():
            child_dir = page_dir / ctx.child_page_dirs[child_id]
            try:
                child_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ExportError(f"failed to create directory {child_dir}: {e}") from e

            self._export_page(child_id, child_title, child_dir)


__all__ = ['MarkdownExporter', 'ExportError']
