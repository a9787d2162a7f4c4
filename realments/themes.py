"""
CSS framework class tables for Realments.

Each framework defines, per semantic slot, the class string for light mode,
the class string for dark mode and whether the slot takes the framework's
error token. Dark mode is looked up, never patched from the light string.
"""

from dataclasses import dataclass, fields
from typing import Dict, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

DEFAULT_FRAMEWORK = 'bootstrap'
DEFAULT_THEME = 'light'

# Slots that are form controls and show the invalid marker
CONTROL_SLOTS = ('input', 'select', 'textarea', 'file', 'checkbox', 'radio', 'switch')

_TW_INPUT = ('shadow appearance-none border rounded w-full py-2 px-3 leading-tight '
             'focus:outline-none focus:shadow-outline')
_TW_SELECT = ('block appearance-none w-full border px-4 py-2 pr-8 rounded shadow leading-tight '
              'focus:outline-none focus:shadow-outline')
_TW_BUTTON = 'text-white font-bold py-2 px-4 rounded focus:outline-none focus:shadow-outline'

# slot -> (light, dark)
FRAMEWORK_CLASSES: Dict[str, Dict[str, Tuple[str, str]]] = {
    'bootstrap': {
        'container': ('container', 'container'),
        'form': ('needs-validation', 'needs-validation bg-dark text-light'),
        'form_group': ('mb-3', 'mb-3'),
        'label': ('form-label', 'form-label text-light'),
        'input': ('form-control', 'form-control bg-dark text-light'),
        'textarea': ('form-control', 'form-control bg-dark text-light'),
        'select': ('form-select', 'form-select bg-dark text-light'),
        'file': ('form-control', 'form-control bg-dark text-light'),
        'check_wrapper': ('form-check', 'form-check'),
        'switch_wrapper': ('form-check form-switch', 'form-check form-switch'),
        'checkbox': ('form-check-input', 'form-check-input'),
        'checkbox_label': ('form-check-label', 'form-check-label text-light'),
        'radio': ('form-check-input', 'form-check-input'),
        'radio_label': ('form-check-label', 'form-check-label text-light'),
        'switch': ('form-check-input', 'form-check-input'),
        'switch_label': ('form-check-label', 'form-check-label text-light'),
        'range': ('form-range', 'form-range'),
        'color': ('form-control form-control-color', 'form-control form-control-color bg-dark'),
        'input_group': ('input-group', 'input-group'),
        'button': ('btn btn-primary', 'btn btn-primary'),
        'secondary_button': ('btn btn-outline-secondary', 'btn btn-outline-light'),
        'danger_button': ('btn btn-outline-danger', 'btn btn-outline-danger'),
        'tag': ('badge bg-primary me-1', 'badge bg-info text-dark me-1'),
        'suggestions': ('list-group', 'list-group'),
        'suggestion': ('list-group-item list-group-item-action',
                       'list-group-item list-group-item-action bg-dark text-light'),
        'suggestion_active': ('list-group-item list-group-item-action active',
                              'list-group-item list-group-item-action active'),
        'help': ('form-text', 'form-text text-light'),
        'error': ('invalid-feedback d-block', 'invalid-feedback d-block'),
    },
    'tailwind': {
        'container': ('container mx-auto px-4', 'container mx-auto px-4'),
        'form': ('', 'bg-gray-800 text-white'),
        'form_group': ('mb-4', 'mb-4'),
        'label': ('block text-gray-700 text-sm font-bold mb-2',
                  'block text-gray-300 text-sm font-bold mb-2'),
        'input': (f'{_TW_INPUT} text-gray-700', f'{_TW_INPUT} bg-gray-700 text-white border-gray-600'),
        'textarea': (f'{_TW_INPUT} text-gray-700', f'{_TW_INPUT} bg-gray-700 text-white border-gray-600'),
        'select': (f'{_TW_SELECT} bg-white border-gray-400 hover:border-gray-500',
                   f'{_TW_SELECT} bg-gray-700 text-white border-gray-600'),
        'file': (f'{_TW_INPUT} text-gray-700', f'{_TW_INPUT} bg-gray-700 text-white border-gray-600'),
        'check_wrapper': ('mb-2', 'mb-2'),
        'switch_wrapper': ('mb-2', 'mb-2'),
        'checkbox': ('mr-2 leading-tight', 'mr-2 leading-tight'),
        'checkbox_label': ('inline-flex items-center', 'inline-flex items-center text-gray-300'),
        'radio': ('mr-2 leading-tight', 'mr-2 leading-tight'),
        'radio_label': ('inline-flex items-center', 'inline-flex items-center text-gray-300'),
        'switch': ('mr-2 leading-tight', 'mr-2 leading-tight'),
        'switch_label': ('inline-flex items-center', 'inline-flex items-center text-gray-300'),
        'range': ('w-full', 'w-full'),
        'color': ('h-10 w-14 border rounded', 'h-10 w-14 border border-gray-600 rounded bg-gray-700'),
        'input_group': ('flex', 'flex'),
        'button': (f'bg-blue-500 hover:bg-blue-700 {_TW_BUTTON}', f'bg-blue-500 hover:bg-blue-700 {_TW_BUTTON}'),
        'secondary_button': (f'bg-gray-500 hover:bg-gray-700 {_TW_BUTTON}',
                             f'bg-gray-600 hover:bg-gray-500 {_TW_BUTTON}'),
        'danger_button': (f'bg-red-500 hover:bg-red-700 {_TW_BUTTON}', f'bg-red-500 hover:bg-red-700 {_TW_BUTTON}'),
        'tag': ('inline-block bg-blue-100 text-blue-800 rounded px-2 py-1 mr-1',
                'inline-block bg-blue-900 text-blue-100 rounded px-2 py-1 mr-1'),
        'suggestions': ('border rounded bg-white', 'border border-gray-600 rounded bg-gray-700'),
        'suggestion': ('block px-3 py-1 hover:bg-gray-100', 'block px-3 py-1 text-white hover:bg-gray-600'),
        'suggestion_active': ('block px-3 py-1 bg-blue-500 text-white', 'block px-3 py-1 bg-blue-600 text-white'),
        'help': ('text-gray-600 text-xs', 'text-gray-400 text-xs'),
        'error': ('text-red-500 text-xs italic', 'text-red-400 text-xs italic'),
    },
    'bulma': {
        'container': ('container', 'container'),
        'form': ('', 'has-background-dark has-text-light'),
        'form_group': ('field', 'field'),
        'label': ('label', 'label has-text-light'),
        'input': ('input', 'input has-background-dark has-text-light'),
        'textarea': ('textarea', 'textarea has-background-dark has-text-light'),
        'select': ('select', 'select has-background-dark has-text-light'),
        'file': ('file-input', 'file-input has-background-dark has-text-light'),
        'check_wrapper': ('control', 'control'),
        'switch_wrapper': ('control', 'control'),
        'checkbox': ('checkbox', 'checkbox'),
        'checkbox_label': ('checkbox', 'checkbox has-text-light'),
        'radio': ('radio', 'radio'),
        'radio_label': ('radio', 'radio has-text-light'),
        'switch': ('switch', 'switch'),
        'switch_label': ('checkbox', 'checkbox has-text-light'),
        'range': ('slider is-fullwidth', 'slider is-fullwidth'),
        'color': ('input', 'input has-background-dark'),
        'input_group': ('field has-addons', 'field has-addons'),
        'button': ('button is-primary', 'button is-primary'),
        'secondary_button': ('button', 'button is-dark'),
        'danger_button': ('button is-danger is-light', 'button is-danger'),
        'tag': ('tag is-info mr-1', 'tag is-info is-light mr-1'),
        'suggestions': ('menu', 'menu has-background-dark'),
        'suggestion': ('dropdown-item', 'dropdown-item has-text-light'),
        'suggestion_active': ('dropdown-item is-active', 'dropdown-item is-active'),
        'help': ('help', 'help has-text-grey-light'),
        'error': ('help is-danger', 'help is-danger'),
    },
}

ERROR_TOKENS = {
    'bootstrap': 'is-invalid',
    'tailwind': 'border-red-500',
    'bulma': 'is-danger',
}

BUTTON_VARIANTS = {
    'bootstrap': {
        'primary': 'btn btn-primary',
        'secondary': 'btn btn-secondary',
        'danger': 'btn btn-danger',
        'success': 'btn btn-success',
    },
    'tailwind': {
        'primary': f'bg-blue-500 hover:bg-blue-700 {_TW_BUTTON}',
        'secondary': f'bg-gray-500 hover:bg-gray-700 {_TW_BUTTON}',
        'danger': f'bg-red-500 hover:bg-red-700 {_TW_BUTTON}',
        'success': f'bg-green-500 hover:bg-green-700 {_TW_BUTTON}',
    },
    'bulma': {
        'primary': 'button is-primary',
        'secondary': 'button',
        'danger': 'button is-danger',
        'success': 'button is-success',
    },
}

BUTTON_SIZES = {
    'bootstrap': {'sm': 'btn-sm', 'lg': 'btn-lg'},
    'tailwind': {'sm': 'py-1 px-2 text-sm', 'lg': 'py-3 px-6 text-lg'},
    'bulma': {'sm': 'is-small', 'lg': 'is-large'},
}


@dataclass(frozen=True)
class ClassBundle:
    """Resolved class strings for one (framework, theme, has_error) combination."""
    container: str = ''
    form: str = ''
    form_group: str = ''
    label: str = ''
    input: str = ''
    textarea: str = ''
    select: str = ''
    file: str = ''
    check_wrapper: str = ''
    switch_wrapper: str = ''
    checkbox: str = ''
    checkbox_label: str = ''
    radio: str = ''
    radio_label: str = ''
    switch: str = ''
    switch_label: str = ''
    range: str = ''
    color: str = ''
    input_group: str = ''
    button: str = ''
    secondary_button: str = ''
    danger_button: str = ''
    tag: str = ''
    suggestions: str = ''
    suggestion: str = ''
    suggestion_active: str = ''
    help: str = ''
    error: str = ''

    def get(self, slot: str) -> str:
        return getattr(self, slot, '')


def normalize_framework(css_framework: Optional[str]) -> str:
    if css_framework in FRAMEWORK_CLASSES:
        return css_framework
    if css_framework:
        logger.debug(f"Unknown CSS framework '{css_framework}', using {DEFAULT_FRAMEWORK}")
    return DEFAULT_FRAMEWORK


def normalize_theme(theme_mode: Optional[str]) -> str:
    return theme_mode if theme_mode in ('light', 'dark') else DEFAULT_THEME


def join_classes(*parts: Optional[str]) -> str:
    """Join class strings, skipping blanks and repeated tokens."""
    seen = []
    for part in parts:
        for token in (part or '').split():
            if token not in seen:
                seen.append(token)
    return ' '.join(seen)


def derive_classes(css_framework: Optional[str], theme_mode: Optional[str],
                   has_error: bool = False) -> ClassBundle:
    """
    Derive the class bundle for a field.

    Args:
        css_framework: 'bootstrap', 'tailwind' or 'bulma' (anything else uses bootstrap)
        theme_mode: 'light' or 'dark' (anything else uses light)
        has_error: Whether the field has a validation error

    Returns:
        ClassBundle with one class string per slot
    """
    framework = normalize_framework(css_framework)
    theme = normalize_theme(theme_mode)
    column = 1 if theme == 'dark' else 0
    error_token = ERROR_TOKENS[framework]

    values: Dict[str, str] = {}
    for slot in fields(ClassBundle):
        light_dark = FRAMEWORK_CLASSES[framework].get(slot.name, ('', ''))
        class_string = light_dark[column]
        if has_error and slot.name in CONTROL_SLOTS:
            class_string = join_classes(class_string, error_token)
        values[slot.name] = class_string

    return ClassBundle(**values)


def button_class(css_framework: Optional[str], variant: str = 'primary',
                 size: Optional[str] = None) -> str:
    """Class string for a button of the given variant and size."""
    framework = normalize_framework(css_framework)
    variants = BUTTON_VARIANTS[framework]
    base = variants.get(variant, variants['primary'])
    size_class = BUTTON_SIZES[framework].get(size, '') if size else ''
    return join_classes(base, size_class)
