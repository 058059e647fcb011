"""Tests for writing page trees to disk."""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from exporters import AssetManager, ExportError, MarkdownExporter
from fetchers import BlockTreeFetcher, PermissionDeniedError
from models import Block, Media, RichText
from wolai_client import ERROR_PERMISSION_DENIED, WolaiApiError


def text_block(block_id, title, block_type='text'):
    return Block(id=block_id, type=block_type, content=[RichText(type='text', title=title)])


class TestMarkdownExporter(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.output_dir = Path(self.tmp.name)

        self.tree = {
            'root': [
                text_block('t1', 'Welcome'),
                text_block('sub', 'Child Page', 'page'),
                Block(id='img', type='image', media=Media(type='external', url='https://cdn/pic.png')),
            ],
            'sub': [text_block('t2', 'Nested')],
        }
        self.client = MagicMock()
        self.client.get_children.side_effect = lambda block_id: self.tree.get(block_id, [])
        self.client.download_file.return_value = (b'img', 'image/png')

    def tearDown(self):
        self.tmp.cleanup()

    def make_exporter(self):
        config = {'export': {'progress_bars': False}}
        fetcher = BlockTreeFetcher(self.client)
        return MarkdownExporter(fetcher, AssetManager(self.client, config), config)

    def test_writes_page_and_sub_pages(self):
        stats = self.make_exporter().export_page('root', 'Home', self.output_dir)

        index = (self.output_dir / 'index.md').read_text(encoding='utf-8')
        self.assertTrue(index.startswith('# Home\n'))
        self.assertIn('[Child Page](./Child%20Page/index.md)', index)
        self.assertIn('<img src="assets/image0.png">', index)
        self.assertTrue((self.output_dir / 'assets' / 'image0.png').exists())

        child = (self.output_dir / 'Child Page' / 'index.md').read_text(encoding='utf-8')
        self.assertEqual(child, '# Child Page\n<p id="t2">\n\nNested\n\n</p>\n\n')

        self.assertEqual(stats['pages_exported'], 2)
        self.assertEqual(stats['images_downloaded'], 1)
        self.assertEqual(stats['images_failed'], 0)
        self.assertEqual(stats['image_bytes'], len(b'img'))

    def test_sub_page_errors_propagate(self):
        def get_children(block_id):
            if block_id == 'sub':
                raise WolaiApiError(ERROR_PERMISSION_DENIED, 'forbidden')
            return self.tree[block_id]

        self.client.get_children.side_effect = get_children

        with self.assertRaises(PermissionDeniedError):
            self.make_exporter().export_page('root', 'Home', self.output_dir)

        # The parent page was already written
        self.assertTrue((self.output_dir / 'index.md').exists())

    def test_unwritable_output_raises_export_error(self):
        self.tree['root'] = [text_block('t1', 'Welcome')]
        missing = self.output_dir / 'does-not-exist'
        with self.assertRaises(ExportError):
            self.make_exporter().export_page('root', 'Home', missing)

    def test_assets_directory_blocked_by_file(self):
        """An image folder that cannot be created is an output error."""
        (self.output_dir / 'assets').write_text('in the way', encoding='utf-8')

        with self.assertRaises(ExportError) as raised:
            self.make_exporter().export_page('root', 'Home', self.output_dir)

        self.assertIsInstance(raised.exception.__cause__, OSError)
        self.assertFalse((self.output_dir / 'index.md').exists())

    def test_sub_page_named_like_assets_gets_own_directory(self):
        self.tree['root'].append(text_block('clash', 'assets', 'page'))
        self.tree['clash'] = [text_block('t3', 'Inside')]

        exporter = MarkdownExporter(
            BlockTreeFetcher.from_config({}, self.client),
            AssetManager(self.client, {'export': {'progress_bars': False}})
        )
        exporter.export_page('root', 'Home', self.output_dir)

        self.assertEqual(sorted(p.name for p in (self.output_dir / 'assets').iterdir()), ['image0.png'])
        self.assertTrue((self.output_dir / 'assets-clash' / 'index.md').exists())
        self.assertIn('[assets](./assets-clash/index.md)', (self.output_dir / 'index.md').read_text(encoding='utf-8'))

    def test_child_directory_blocked_by_file(self):
        (self.output_dir / 'Child Page').write_text('in the way', encoding='utf-8')
        with self.assertRaises(ExportError):
            self.make_exporter().export_page('root', 'Home', self.output_dir)


if __name__ == '__main__':
    unittest.main()
