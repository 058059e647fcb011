"""Tests for configuration loading, validation, and CLI merging."""

import argparse
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from config_loader import DEFAULT_CONFIG, ConfigLoader, get_nested


class TestLoad(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def write_config(self, text):
        path = self.dir / 'config.yaml'
        path.write_text(text, encoding='utf-8')
        return str(path)

    def test_no_file_returns_defaults(self):
        config = ConfigLoader.load(None)
        self.assertEqual(config, DEFAULT_CONFIG)
        self.assertIsNot(config['advanced'], DEFAULT_CONFIG['advanced'])

    def test_file_values_merge_over_defaults(self):
        path = self.write_config(
            "advanced:\n"
            "  rate_limit_delay: 1\n"
            "  max_rate_limit_retries: 10\n"
        )
        config = ConfigLoader.load(path)

        self.assertEqual(config['advanced']['rate_limit_delay'], 1)
        self.assertEqual(config['advanced']['max_rate_limit_retries'], 10)
        self.assertEqual(config['advanced']['max_retries'], 3)
        self.assertEqual(config['export']['assets_directory'], 'assets')

    def test_environment_variables_substituted(self):
        path = self.write_config("wolai:\n  token: ${WOLAI_TEST_TOKEN}\n")
        with patch.dict(os.environ, {'WOLAI_TEST_TOKEN': 'from-env'}):
            config = ConfigLoader.load(path)
        self.assertEqual(config['wolai']['token'], 'from-env')

    def test_unset_variable_is_kept_and_rejected(self):
        path = self.write_config("wolai:\n  token: ${WOLAI_TEST_UNSET_TOKEN}\n")
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop('WOLAI_TEST_UNSET_TOKEN', None)
            config = ConfigLoader.load(path)

        self.assertEqual(config['wolai']['token'], '${WOLAI_TEST_UNSET_TOKEN}')
        with self.assertRaises(ValueError) as raised:
            ConfigLoader.validate(config)
        self.assertIn('WOLAI_TEST_UNSET_TOKEN', str(raised.exception))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            ConfigLoader.load(str(self.dir / 'nope.yaml'))

    def test_non_mapping_file(self):
        with self.assertRaises(ValueError):
            ConfigLoader.load(self.write_config("- just\n- a list\n"))


class TestValidate(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.config = ConfigLoader.load(None)
        self.config['wolai']['token'] = 'token'
        self.config['export']['output_directory'] = self.tmp.name

    def tearDown(self):
        self.tmp.cleanup()

    def assert_invalid(self, message_part):
        with self.assertRaises(ValueError) as raised:
            ConfigLoader.validate(self.config)
        self.assertIn(message_part, str(raised.exception))

    def test_valid_config(self):
        ConfigLoader.validate(self.config)

    def test_token_required(self):
        self.config['wolai']['token'] = ''
        self.assert_invalid('wolai.token')

    def test_output_directory_must_exist(self):
        self.config['export']['output_directory'] = os.path.join(self.tmp.name, 'missing')
        self.assert_invalid('does not exist')

    def test_output_directory_must_be_directory(self):
        file_path = os.path.join(self.tmp.name, 'file.txt')
        Path(file_path).write_text('x', encoding='utf-8')
        self.config['export']['output_directory'] = file_path
        self.assert_invalid('is not a directory')

    def test_bad_base_url(self):
        self.config['wolai']['base_url'] = 'ftp://openapi.wolai.com'
        self.assert_invalid('wolai.base_url')

    def test_rate_limit_retries(self):
        self.config['advanced']['max_rate_limit_retries'] = 0
        ConfigLoader.validate(self.config)

        self.config['advanced']['max_rate_limit_retries'] = -1
        self.assert_invalid('max_rate_limit_retries')

    def test_boolean_fields(self):
        self.config['export']['download_images'] = 'yes'
        self.assert_invalid('export.download_images')

    def test_absolute_assets_directory(self):
        self.config['export']['assets_directory'] = os.path.abspath(self.tmp.name)
        self.assert_invalid('assets_directory')


class TestMergeWithArgs(unittest.TestCase):
    def test_cli_values_take_precedence(self):
        config = ConfigLoader.load(None)
        config['wolai']['token'] = 'from-file'
        args = argparse.Namespace(token='from-cli', output_dir='/out', no_images=True, log_file='run.log')

        merged = ConfigLoader.merge_with_args(config, args)

        self.assertEqual(merged['wolai']['token'], 'from-cli')
        self.assertEqual(merged['export']['output_directory'], '/out')
        self.assertFalse(merged['export']['download_images'])
        self.assertEqual(merged['logging']['file'], 'run.log')
        # The input is left untouched
        self.assertEqual(config['wolai']['token'], 'from-file')

    def test_unset_args_keep_config(self):
        config = ConfigLoader.load(None)
        merged = ConfigLoader.merge_with_args(config, argparse.Namespace(no_images=False))
        self.assertTrue(merged['export']['download_images'])


class TestGetNested(unittest.TestCase):
    def test_lookup(self):
        config = {'a': {'b': {'c': 1}}}
        self.assertEqual(get_nested(config, 'a.b.c'), 1)
        self.assertIsNone(get_nested(config, 'a.x.c'))
        self.assertEqual(get_nested(config, 'a.b.c.d', 'default'), 'default')


if __name__ == '__main__':
    unittest.main()
