"""Asset manager for downloading page images and rewriting their placeholders."""

import logging
import mimetypes
import sys
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Optional
from urllib.parse import unquote, urlparse

import requests
from tqdm import tqdm

from logger import DownloadTracker
from wolai_client import WolaiClient


class AssetManager:
    """
    Downloads the images registered during a page conversion.

    For every ``placeholder -> url`` entry the manager:
    1. Downloads the bytes through the Wolai client
    2. Picks a file extension from the response content type
    3. Saves the file under the page's assets directory
    4. Replaces ``[placeholder]`` in the page text with the relative path
    """

    def __init__(
        self,
        client: WolaiClient,
        config: Optional[Dict[str, Any]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the asset manager.

        Args:
            client: WolaiClient used for downloads
            config: Configuration dictionary
            logger: Logger instance
        """
        config = config or {}
        export_config = config.get('export', {})

        self.client = client
        self.logger = logger or logging.getLogger('wolai_markdown_exporter.exporters.asset_manager')
        self.assets_directory = export_config.get('assets_directory', 'assets')
        self.download_images = export_config.get('download_images', True)
        self.show_progress = export_config.get('progress_bars', True)

        self.tracker = DownloadTracker()

    def process_images(self, images: Dict[str, str], markdown: str, page_dir: Path) -> str:
        """
        Download images for one page and substitute their placeholders.

        Args:
            images: Mapping of placeholder name to source URL
            markdown: Serialized page text containing ``[name]`` placeholders
            page_dir: Directory the page's index.md is written to

        Returns:
            Page text with every placeholder replaced

        Raises:
            OSError: The assets directory cannot be created
        """
        if not images:
            return markdown

        if not self.download_images:
            self.logger.debug(f"Image downloads disabled - linking {len(images)} image(s) remotely")
            self.tracker.record_skipped(len(images))
            for name, url in images.items():
                markdown = markdown.replace(f"[{name}]", url)
            return markdown

        assets_dir = page_dir / self.assets_directory
        assets_dir.mkdir(parents=True, exist_ok=True)

        items = images.items()
        if self._should_show_progress():
            items = tqdm(list(items), desc=f"Images: {page_dir.name[:30]}", leave=False)

        with self.tracker.page(page_dir.name, len(images)):
            for name, url in items:
                target = self._save_image(name, url, assets_dir)
                markdown = markdown.replace(f"[{name}]", target)

        return markdown

    def _save_image(self, name: str, url: str, assets_dir: Path) -> str:
        """Download one image and return the path the page should reference."""
        try:
            content, content_type = self.client.download_file(url)
        except requests.exceptions.RequestException as e:
            self.logger.warning(f"Failed to download image {name} from {url}: {e}")
            self.tracker.record_failure()
            return url

        filename = name + self._guess_extension(content_type, url)
        try:
            (assets_dir / filename).write_bytes(content)
        except OSError as e:
            self.logger.warning(f"Failed to save image {filename}: {e}")
            self.tracker.record_failure()
            return url

        self.tracker.record_download(len(content))
        self.logger.debug(f"Saved image {name} -> {assets_dir / filename}")

        return f"{self.assets_directory}/{filename}"

    @staticmethod
    def _guess_extension(content_type: Optional[str], url: str) -> str:
        """Pick a file extension from the content type, falling back to the URL."""
        if content_type:
            mime_type = content_type.split(';')[0].strip().lower()
            extension = mimetypes.guess_extension(mime_type)
            if extension:
                return extension

        suffix = PurePosixPath(unquote(urlparse(url).path)).suffix
        if suffix and len(suffix) <= 6:
            return suffix.lower()

        return ''

    def _should_show_progress(self) -> bool:
        """Check if progress bars should be displayed."""
        if not self.show_progress:
            return False
        return sys.stdout.isatty()

    def get_stats(self) -> Dict[str, int]:
        """Get image download totals for the whole export."""
        return self.tracker.as_dict()


__all__ = ['AssetManager']
