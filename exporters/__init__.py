"""Markdown export package for the Wolai to Markdown exporter.

Package Structure:
- markdown_exporter: Writes each converted page to ``index.md`` and recurses
  into sub-pages
- asset_manager: Downloads page images into ``assets/`` and rewrites their
  placeholders

Configuration Referenced:
- export.assets_directory: Directory name for downloaded images
- export.download_images: Disable to link images remotely
- export.progress_bars: Show tqdm progress while downloading
"""

from .asset_manager import AssetManager
from .markdown_exporter import ExportError, MarkdownExporter

__all__ = [
    'MarkdownExporter',
    'ExportError',
    'AssetManager'
]
