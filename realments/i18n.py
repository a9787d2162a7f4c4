"""
Translation lookup for Realments.

Language files are YAML mappings under ``realments/lang/<locale>.yaml`` (or
the directory named by ``i18n.lang_path``). Keys are dotted paths into the
mapping. A key missing from both the active and the fallback locale resolves
to the supplied default, or to the key itself, so untranslated text is shown
rather than raising.
"""

import re
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from .config_loader import get_config_value
from .exceptions import TranslationLoadError, log_error_with_context

logger = logging.getLogger(__name__)

LANG_DIR = Path(__file__).parent / 'lang'

_COLON_PLACEHOLDER = re.compile(r':([A-Za-z_]+)')
_BRACE_PLACEHOLDER = re.compile(r'\{([A-Za-z_]+)\}')


def load_language_file(locale: str, lang_dir: Path) -> Dict[str, Any]:
    """
    Read one language file.

    Returns:
        The translations mapping, or {} when the file does not exist

    Raises:
        TranslationLoadError: If the file exists but is not a valid YAML mapping
    """
    path = Path(lang_dir) / f"{locale}.yaml"
    if not path.exists():
        logger.debug(f"No language file for '{locale}' at {path}")
        return {}

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, IOError, OSError) as e:
        raise TranslationLoadError(locale, path, e)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TranslationLoadError(locale, path, TypeError("top level is not a mapping"))
    return data


def lookup(translations: Dict[str, Any], key: str) -> Optional[str]:
    """Resolve a dotted key, falling back to the key as a literal top-level entry."""
    node: Any = translations
    for part in key.split('.'):
        if isinstance(node, dict) and part in node:
            node = node[part]
        else:
            node = None
            break

    if isinstance(node, str):
        return node

    literal = translations.get(key)
    return literal if isinstance(literal, str) else None


def substitute(text: str, params: Dict[str, Any]) -> str:
    """Fill ``:name`` and ``{name}`` placeholders; unknown placeholders are left alone."""
    if not params:
        return text

    def replace(match):
        name = match.group(1)
        return str(params[name]) if name in params else match.group(0)

    text = _BRACE_PLACEHOLDER.sub(replace, text)
    return _COLON_PLACEHOLDER.sub(replace, text)


class Translator:
    """
    Key-based translator with a fallback locale.

    Args:
        locale: Active locale (defaults to ``i18n.default_locale``)
        fallback_locale: Locale consulted for missing keys (defaults to ``i18n.fallback_locale``)
        lang_dir: Directory holding ``<locale>.yaml`` files
    """

    def __init__(self, locale: Optional[str] = None, fallback_locale: Optional[str] = None,
                 lang_dir: Optional[Path] = None):
        self.locale = locale or get_config_value('i18n', 'default_locale', 'en')
        self.fallback_locale = fallback_locale or get_config_value('i18n', 'fallback_locale', 'en')

        if lang_dir is None:
            configured = get_config_value('i18n', 'lang_path')
            lang_dir = Path(configured) if configured else LANG_DIR
        self.lang_dir = Path(lang_dir)

        self._catalogs: Dict[str, Dict[str, Any]] = {}

    def _catalog(self, locale: str) -> Dict[str, Any]:
        if locale not in self._catalogs:
            try:
                self._catalogs[locale] = load_language_file(locale, self.lang_dir)
            except TranslationLoadError as e:
                log_error_with_context(e, "translation load")
                self._catalogs[locale] = {}
        return self._catalogs[locale]

    def has(self, key: str) -> bool:
        return lookup(self._catalog(self.locale), key) is not None

    def t(self, key: str, default: Optional[str] = None, **params: Any) -> str:
        """
        Translate a key.

        Args:
            key: Dotted translation key, e.g. 'validation.required'
            default: Text used when no locale defines the key
            **params: Placeholder values

        Returns:
            Translated text with placeholders filled
        """
        text = lookup(self._catalog(self.locale), key)
        if text is None and self.fallback_locale != self.locale:
            text = lookup(self._catalog(self.fallback_locale), key)
        if text is None:
            logger.debug(f"Missing translation for '{key}' in '{self.locale}'")
            text = default if default is not None else key
        return substitute(text, params)

    __call__ = t

    def with_locale(self, locale: str) -> 'Translator':
        return Translator(locale, self.fallback_locale, self.lang_dir)
