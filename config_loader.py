"""Configuration loader with YAML support and environment variable substitution."""

import copy
import os
import re
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import yaml

from wolai_client import DEFAULT_BASE_URL

DEFAULT_CONFIG: Dict[str, Any] = {
    'wolai': {
        'base_url': DEFAULT_BASE_URL,
        'token': None,
        'verify_ssl': True,
        'use_system_ca': False,
    },
    'advanced': {
        'request_timeout': 30,
        'max_retries': 3,
        'retry_backoff_factor': 2.0,
        'page_size': 200,
        'rate_limit_delay': 5,
        'max_rate_limit_retries': None,
    },
    'export': {
        'output_directory': None,
        'assets_directory': 'assets',
        'download_images': True,
        'progress_bars': True,
    },
    'logging': {
        'level': None,
        'file': None,
    },
}


class ConfigLoader:
    """Handles loading and validation of configuration files."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load configuration from YAML file with environment variable substitution.

        Values missing from the file fall back to ``DEFAULT_CONFIG``.

        Args:
            config_path: Path to YAML configuration file, or None for defaults

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if config_path is None:
            return copy.deepcopy(DEFAULT_CONFIG)

        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a dictionary")

        config_data = cls._substitute_env_vars_recursive(config_data)

        return cls._deep_merge(DEFAULT_CONFIG, config_data)

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration for required fields and correct values.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValueError: If validation fails
        """
        cls._validate_required_field(config, 'wolai.token')

        base_url = get_nested(config, 'wolai.base_url', DEFAULT_BASE_URL)
        cls._validate_url(base_url, 'wolai.base_url')

        for field in ('wolai.verify_ssl', 'wolai.use_system_ca',
                      'export.download_images', 'export.progress_bars'):
            if not isinstance(get_nested(config, field), bool):
                raise ValueError(f"{field} must be a boolean")

        timeout = get_nested(config, 'advanced.request_timeout', 30)
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValueError("advanced.request_timeout must be a positive number")

        max_retries = get_nested(config, 'advanced.max_retries', 3)
        if not isinstance(max_retries, int) or max_retries < 0:
            raise ValueError("advanced.max_retries must be a non-negative integer")

        backoff = get_nested(config, 'advanced.retry_backoff_factor', 2.0)
        if not isinstance(backoff, (int, float)) or backoff < 0:
            raise ValueError("advanced.retry_backoff_factor must be a non-negative number")

        page_size = get_nested(config, 'advanced.page_size', 200)
        if not isinstance(page_size, int) or page_size < 1:
            raise ValueError("advanced.page_size must be a positive integer")

        delay = get_nested(config, 'advanced.rate_limit_delay', 5)
        if not isinstance(delay, (int, float)) or delay < 0:
            raise ValueError("advanced.rate_limit_delay must be a non-negative number")

        rate_limit_retries = get_nested(config, 'advanced.max_rate_limit_retries')
        if rate_limit_retries is not None and (not isinstance(rate_limit_retries, int) or rate_limit_retries < 0):
            raise ValueError("advanced.max_rate_limit_retries must be null or a non-negative integer")

        assets_directory = get_nested(config, 'export.assets_directory', 'assets')
        if not assets_directory or not isinstance(assets_directory, str) or os.path.isabs(assets_directory):
            raise ValueError("export.assets_directory must be a relative directory name")

        output_dir = get_nested(config, 'export.output_directory')
        if output_dir is not None:
            if not os.path.exists(output_dir):
                raise ValueError(f"output directory '{output_dir}' does not exist")
            if not os.path.isdir(output_dir):
                raise ValueError(f"output directory '{output_dir}' is not a directory")

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration file with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments with attributes matching config keys

        Returns:
            Merged configuration dictionary
        """
        merged = copy.deepcopy(config)

        for section in ('wolai', 'export', 'logging'):
            merged.setdefault(section, {})

        if getattr(args, 'token', None):
            merged['wolai']['token'] = args.token

        if getattr(args, 'output_dir', None):
            merged['export']['output_directory'] = args.output_dir

        if getattr(args, 'no_images', False):
            merged['export']['download_images'] = False

        if getattr(args, 'log_file', None):
            merged['logging']['file'] = args.log_file

        return merged

    @classmethod
    def _deep_merge(cls, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of base with override applied recursively."""
        merged = copy.deepcopy(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = cls._deep_merge(merged[key], value)
            else:
                merged[key] = copy.deepcopy(value)
        return merged

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            env_value = os.getenv(match.group(1))
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)

    @staticmethod
    def _validate_required_field(config_section: dict, field: str) -> None:
        """Validate that a required field exists and has a value."""
        value = get_nested(config_section, field)
        if value is None or value == '':
            raise ValueError(f"Missing required configuration: {field}")

        if isinstance(value, str) and '${' in value:
            match = ConfigLoader.ENV_VAR_PATTERN.search(value)
            var_name = match.group(1) if match else value
            raise ValueError(
                f"Configuration field '{field}' contains unsubstituted environment variable: {value}. "
                f"Please set the {var_name} environment variable or provide a value in config file."
            )

    @staticmethod
    def _validate_url(url: str, field_name: str) -> None:
        """Validate URL format."""
        parsed = urlparse(url or '')
        if parsed.scheme not in ('http', 'https'):
            raise ValueError(f"{field_name} must use http or https scheme: {url}")
        if not parsed.netloc:
            raise ValueError(f"{field_name} missing hostname: {url}")


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "wolai.base_url")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    value = config

    for key in path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


__all__ = ['ConfigLoader', 'DEFAULT_CONFIG', 'get_nested']
