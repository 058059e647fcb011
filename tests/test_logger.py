"""Tests for logging setup and image download tracking."""

import logging
import unittest

from logger import (
    LOGGER_NAME,
    DownloadTracker,
    format_elapsed,
    redact_secrets,
    resolve_level,
    setup_logging
)


class TestLevels(unittest.TestCase):
    def test_verbosity_levels(self):
        self.assertEqual(resolve_level(0), logging.WARNING)
        self.assertEqual(resolve_level(1), logging.INFO)
        self.assertEqual(resolve_level(3), logging.DEBUG)

    def test_explicit_level_wins(self):
        self.assertEqual(resolve_level(2, 'error'), logging.ERROR)

    def test_invalid_level(self):
        with self.assertRaises(ValueError):
            resolve_level(0, 'LOUD')


class TestSetupLogging(unittest.TestCase):
    def tearDown(self):
        logging.getLogger(LOGGER_NAME).handlers.clear()

    def test_reconfiguring_replaces_handlers(self):
        setup_logging(verbosity=1)
        logger = setup_logging(verbosity=2)

        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(len(logger.handlers), 1)
        self.assertFalse(logger.propagate)


class TestRedactSecrets(unittest.TestCase):
    def test_token_redacted(self):
        config = {'wolai': {'token': 'secret', 'base_url': 'https://openapi.wolai.com/v1'}}
        redacted = redact_secrets(config)

        self.assertEqual(redacted['wolai']['token'], '***REDACTED***')
        self.assertEqual(redacted['wolai']['base_url'], 'https://openapi.wolai.com/v1')
        self.assertEqual(config['wolai']['token'], 'secret')

    def test_empty_token_left_alone(self):
        self.assertIsNone(redact_secrets({'wolai': {'token': None}})['wolai']['token'])


class TestDownloadTracker(unittest.TestCase):
    def test_totals_accumulate_across_pages(self):
        tracker = DownloadTracker()

        with tracker.page('Home', 2):
            tracker.record_download(100)
            tracker.record_failure()
        with tracker.page('Child', 1):
            tracker.record_download(50)
        tracker.record_skipped(3)

        self.assertEqual(tracker.as_dict(), {
            'downloaded': 2,
            'failed': 1,
            'skipped': 3,
            'total_size_bytes': 150,
        })

    def test_page_summary_level_follows_failures(self):
        tracker = DownloadTracker()

        with self.assertLogs(f'{LOGGER_NAME}.downloads', level='INFO') as logs:
            with tracker.page('Mixed', 2):
                tracker.record_download(1)
                tracker.record_failure()
            with tracker.page('Broken', 1):
                tracker.record_failure()

        levels = [record.levelname for record in logs.records if "failed in" in record.getMessage()]
        self.assertEqual(levels, ['WARNING', 'ERROR'])

    def test_format_elapsed(self):
        self.assertEqual(format_elapsed(5), '5.0s')
        self.assertEqual(format_elapsed(125), '2m 5s')
        self.assertEqual(format_elapsed(3725), '1h 2m 5s')


if __name__ == '__main__':
    unittest.main()
