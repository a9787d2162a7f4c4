"""
Configuration loading utilities for Realments.

Loads config.yaml, deep-merges it over the built-in defaults and exposes a
cached accessor. Any problem with the file falls back to defaults so that
form rendering never fails because of configuration.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List
import logging
from copy import deepcopy

from .exceptions import ConfigurationLoadError, log_error_with_context

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.yaml")

SUPPORTED_CSS_FRAMEWORKS = ('bootstrap', 'tailwind', 'bulma')
SUPPORTED_THEME_MODES = ('light', 'dark')

# Global configuration cache
_config_cache: Optional[Dict[str, Any]] = None


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with update_dict taking precedence.

    Args:
        base_dict: Base dictionary (defaults)
        update_dict: Dictionary to merge in (user config)

    Returns:
        Merged dictionary
    """
    result = deepcopy(base_dict)

    for key, value in update_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def get_default_config() -> Dict[str, Any]:
    """
    Get the built-in default configuration.

    Returns:
        Dictionary with default configuration
    """
    return {
        'app': {
            'name': 'Realments',
            'version': '0.1.0',
            'debug': False
        },
        'forms': {
            'default_css_framework': 'bootstrap',
            'default_theme_mode': 'light',
            'default_method': 'POST',
            'default_submit_text': 'Submit',
            'container_id': 'realments-form'
        },
        'wysiwyg_editors': {
            'tinymce': {
                'version': '6',
                'cdn': 'https://cdn.tiny.cloud/1/no-api-key/tinymce/6/tinymce.min.js',
                'default_options': {
                    'plugins': 'autolink lists link image table code wordcount',
                    'toolbar': 'undo redo | bold italic underline | alignleft aligncenter alignright | bullist numlist | link image',
                    'menubar': 'file edit view insert format tools table help'
                }
            },
            'ckeditor': {
                'version': '5',
                'cdn': 'https://cdn.ckeditor.com/ckeditor5/36.0.1/classic/ckeditor.js',
                'default_options': {
                    'toolbar': ['heading', '|', 'bold', 'italic', 'link', 'bulletedList',
                                'numberedList', '|', 'outdent', 'indent', '|',
                                'blockQuote', 'insertTable', 'undo', 'redo']
                }
            },
            'quill': {
                'version': '1.3.6',
                'cdn': {
                    'js': 'https://cdn.quilljs.com/1.3.6/quill.min.js',
                    'css': 'https://cdn.quilljs.com/1.3.6/quill.snow.css'
                },
                'default_options': {
                    'theme': 'snow'
                }
            }
        },
        'i18n': {
            'default_locale': 'en',
            'fallback_locale': 'en',
            'available_locales': ['en', 'id'],
            'lang_path': None
        },
        'validation': {
            'client_side': True,
            'server_side': True,
            'live_validation': True
        },
        'captcha': {
            'image_url': 'https://dummyimage.com/150x50/000/fff&text=CAPTCHA{token}',
            'width': 150,
            'height': 50
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        },
        'ui': {
            'page_title': 'Realments Playground',
            'sidebar_title': 'Form Settings'
        }
    }


def read_config_file(config_path: Path) -> Optional[Dict[str, Any]]:
    """
    Read a YAML configuration file.

    Args:
        config_path: Path to the YAML file

    Returns:
        Parsed mapping, or None if the file is empty

    Raises:
        ConfigurationLoadError: If the file cannot be read or parsed, or is not a mapping
    """
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)
    except (yaml.YAMLError, IOError, OSError) as e:
        raise ConfigurationLoadError(config_path, e)

    if user_config is None:
        return None

    if not isinstance(user_config, dict):
        raise ConfigurationLoadError(
            config_path,
            TypeError(f"top level is {type(user_config).__name__}, expected a mapping")
        )

    return user_config


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration merged over the defaults.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)

    Returns:
        Complete configuration dictionary
    """
    if config_path is None:
        config_path = CONFIG_FILE

    default_config = get_default_config()

    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}")
        logger.info("Using default configuration")
        return default_config

    try:
        user_config = read_config_file(config_path)
    except ConfigurationLoadError as e:
        log_error_with_context(e, "configuration load")
        logger.info("Using default configuration")
        return default_config

    if user_config is None:
        logger.warning(f"Configuration file is empty: {config_path}")
        return default_config

    config = deep_merge(default_config, user_config)
    logger.info(f"Successfully loaded configuration from {config_path}")
    return config


def get_config() -> Dict[str, Any]:
    """Return the cached configuration, loading it on first use."""
    global _config_cache

    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache


def reload_config() -> Dict[str, Any]:
    """
    Force reload of configuration from file.
    Useful for testing or when configuration changes.
    """
    global _config_cache
    _config_cache = None
    return get_config()


def get_config_value(section: str, key: str, default: Any = None) -> Any:
    """
    Get a specific configuration value.

    Args:
        section: Configuration section (e.g., 'forms', 'i18n')
        key: Configuration key within section
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    section_values = get_config().get(section, {})
    if not isinstance(section_values, dict):
        return default
    return section_values.get(key, default)


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    return not get_config_problems(config)


def get_config_problems(config: Dict[str, Any]) -> List[str]:
    """
    Collect human-readable configuration problems.

    Args:
        config: Configuration dictionary to check

    Returns:
        List of problems (empty when the configuration is valid)
    """
    problems: List[str] = []

    for section in ('app', 'forms', 'i18n', 'logging'):
        if not isinstance(config.get(section), dict):
            problems.append(f"Missing required configuration section: {section}")

    forms = config.get('forms') or {}
    if isinstance(forms, dict):
        framework = forms.get('default_css_framework')
        if framework not in SUPPORTED_CSS_FRAMEWORKS:
            problems.append(f"Unsupported default_css_framework: {framework}")

        theme = forms.get('default_theme_mode')
        if theme not in SUPPORTED_THEME_MODES:
            problems.append(f"Unsupported default_theme_mode: {theme}")

    i18n = config.get('i18n') or {}
    if isinstance(i18n, dict):
        locales = i18n.get('available_locales', [])
        if not isinstance(locales, list):
            problems.append("i18n.available_locales must be a list")
        elif i18n.get('default_locale') not in locales:
            problems.append(f"default_locale {i18n.get('default_locale')} is not in available_locales")

    editors = config.get('wysiwyg_editors', {})
    if not isinstance(editors, dict):
        problems.append("wysiwyg_editors must be a mapping")

    for problem in problems:
        logger.warning(problem)

    return problems


def get_logging_level(level_str: str) -> int:
    """Map string logging level to logging constant."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    return level_map.get(str(level_str).upper(), logging.INFO)


def configure_logging(config: Optional[Dict[str, Any]] = None) -> int:
    """
    Configure root logging from the 'logging' config section.

    Args:
        config: Configuration dictionary (defaults to the cached config)

    Returns:
        The logging level that was applied
    """
    if config is None:
        config = get_config()

    logging_config = config.get('logging') or {}
    level = get_logging_level(logging_config.get('level', 'INFO'))
    log_format = logging_config.get('format', '%(levelname)s - %(message)s')

    logging.basicConfig(level=level, format=log_format)
    logger.info(f"Logging configured to level: {logging.getLevelName(level)}")
    return level
