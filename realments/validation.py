"""
Advisory validation for Realments fields.

Rules are carried on descriptors as opaque metadata for the server-side
validator. This module mirrors the common ones (required, email, min, max,
numeric, integer, url, date, confirmed) for early feedback and HTML5
attributes. It never gates a submission.
"""

import re
import logging
from datetime import date, datetime
from typing import Dict, Any, List, Optional, Union, Iterable
from urllib.parse import urlparse

from .descriptors import FieldDescriptor, parse_descriptor
from .i18n import Translator

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

SUPPORTED_RULES = ('required', 'email', 'min', 'max', 'numeric', 'integer', 'url', 'date', 'confirmed')

DEFAULT_MESSAGES = {
    'required': 'This field is required',
    'email': 'Please enter a valid email address',
    'min.string': 'This field must be at least {min} characters',
    'min.numeric': 'This field must be at least {min}',
    'max.string': 'This field must not exceed {max} characters',
    'max.numeric': 'This field must not be greater than {max}',
    'numeric': 'This field must be a number',
    'integer': 'This field must be an integer',
    'url': 'Please enter a valid URL',
    'date': 'Please enter a valid date',
    'confirmed': 'The confirmation does not match',
}


def parse_rules(rules: Union[str, List[Any], None]) -> Dict[str, Any]:
    """
    Parse pipe-separated or list rules into a dict.

    ``'required|min:3'`` becomes ``{'required': True, 'min': '3'}``. Non-string
    list entries (rule objects meant for the server) are skipped.
    """
    if not rules:
        return {}

    items: Iterable[Any] = rules.split('|') if isinstance(rules, str) else rules
    parsed: Dict[str, Any] = {}

    for rule in items:
        if not isinstance(rule, str):
            continue
        rule = rule.strip()
        if not rule:
            continue
        if ':' in rule:
            name, argument = rule.split(':', 1)
            parsed[name.strip()] = argument.strip()
        else:
            parsed[rule] = True

    return parsed


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ''
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _is_date(value: Any) -> bool:
    if isinstance(value, (date, datetime)):
        return True
    text = str(value).strip()
    for parser in (date.fromisoformat, datetime.fromisoformat):
        try:
            parser(text)
            return True
        except ValueError:
            continue
    return False


def _is_url(value: Any) -> bool:
    parsed = urlparse(str(value))
    return bool(parsed.scheme) and bool(parsed.netloc or parsed.path)


def _size(value: Any, numeric: bool) -> Optional[float]:
    if isinstance(value, (list, tuple)):
        return float(len(value))
    if numeric:
        return _to_number(value)
    return float(len(str(value)))


class _Messages:
    def __init__(self, translator: Optional[Translator], custom: Optional[Dict[str, str]]):
        self.translator = translator
        self.custom = custom or {}

    def get(self, key: str, **params: Any) -> str:
        rule = key.split('.')[0]
        if key in self.custom or rule in self.custom:
            text = self.custom.get(key, self.custom.get(rule))
            return text.replace('{min}', str(params.get('min', ''))).replace('{max}', str(params.get('max', '')))
        if self.translator is not None:
            return self.translator.t(f"validation.{key}", DEFAULT_MESSAGES[key], **params)
        text = DEFAULT_MESSAGES[key]
        for name, value in params.items():
            text = text.replace('{' + name + '}', str(value))
        return text


def validate_value(value: Any, rules: Union[str, List[Any], Dict[str, Any], None],
                   translator: Optional[Translator] = None,
                   data: Optional[Dict[str, Any]] = None,
                   field_name: Optional[str] = None,
                   messages: Optional[Dict[str, str]] = None) -> Optional[str]:
    """
    Check one value against the mirrored rules.

    Args:
        value: Value to check
        rules: Rule string, list, or an already parsed dict
        translator: Translator for messages (English defaults when None)
        data: All submitted values, used by 'confirmed'
        field_name: Name of the field being checked, used by 'confirmed'
        messages: Custom messages keyed by rule name

    Returns:
        The first failing rule's message, or None when the value passes
    """
    parsed = rules if isinstance(rules, dict) else parse_rules(rules)
    if not parsed:
        return None

    msg = _Messages(translator, messages)
    numeric = 'numeric' in parsed or 'integer' in parsed

    if parsed.get('required') and _is_empty(value):
        return msg.get('required')

    if _is_empty(value):
        return None

    if parsed.get('email') and not EMAIL_PATTERN.match(str(value)):
        return msg.get('email')

    if 'min' in parsed:
        limit = _to_number(parsed['min'])
        size = _size(value, numeric)
        if limit is not None and size is not None and size < limit:
            return msg.get('min.numeric' if numeric else 'min.string', min=parsed['min'])

    if 'max' in parsed:
        limit = _to_number(parsed['max'])
        size = _size(value, numeric)
        if limit is not None and size is not None and size > limit:
            return msg.get('max.numeric' if numeric else 'max.string', max=parsed['max'])

    if parsed.get('numeric') and _to_number(value) is None:
        return msg.get('numeric')

    if parsed.get('integer'):
        number = _to_number(value)
        if number is None or not number.is_integer():
            return msg.get('integer')

    if parsed.get('url') and not _is_url(value):
        return msg.get('url')

    if parsed.get('date') and not _is_date(value):
        return msg.get('date')

    if parsed.get('confirmed') and data is not None:
        target = parsed['confirmed']
        if isinstance(target, str):
            candidates = [target]
        else:
            candidates = [f"{field_name}_confirmation", f"{field_name}-confirmation"]
        for candidate in candidates:
            if candidate in data:
                if data[candidate] != value:
                    return msg.get('confirmed')
                break

    return None


def validate_payload(payload: Union[Dict[str, Any], List[Any]], data: Dict[str, Any],
                     translator: Optional[Translator] = None) -> Dict[str, List[str]]:
    """
    Run the advisory mirror over every field that carries rules.

    Args:
        payload: Wire payload dict, or a list of descriptors
        data: Submitted values keyed by field name
        translator: Translator for messages

    Returns:
        Errors keyed by field name, in the same shape as the session error bag
    """
    elements = payload.get('elements', []) if isinstance(payload, dict) else payload
    errors: Dict[str, List[str]] = {}

    for raw in elements:
        descriptor = parse_descriptor(raw)
        if not isinstance(descriptor, FieldDescriptor) or descriptor.validation is None:
            continue

        message = validate_value(
            data.get(descriptor.name),
            descriptor.validation.rules,
            translator=translator,
            data=data,
            field_name=descriptor.name,
            messages=descriptor.validation.messages
        )
        if message:
            errors.setdefault(descriptor.name, []).append(message)

    if errors:
        logger.info(f"Advisory validation flagged {len(errors)} field(s)")
    return errors


def html5_attributes(rules: Union[str, List[Any], Dict[str, Any], None], field_type: str) -> Dict[str, Any]:
    """
    HTML5 constraint attributes implied by the rules.

    ``min``/``max`` become ``min``/``max`` on number, range and date-like inputs and
    ``minlength``/``maxlength`` on text-like ones.
    """
    parsed = rules if isinstance(rules, dict) else parse_rules(rules)
    attrs: Dict[str, Any] = {}

    if parsed.get('required'):
        attrs['required'] = True

    bounded = field_type in ('number', 'range', 'date', 'daterange', 'time', 'datetime')
    if 'min' in parsed:
        attrs['min' if bounded else 'minlength'] = parsed['min']
    if 'max' in parsed:
        attrs['max' if bounded else 'maxlength'] = parsed['max']

    if parsed.get('integer') and field_type == 'number':
        attrs['step'] = 1
    if parsed.get('numeric') and field_type != 'number':
        attrs['inputmode'] = 'decimal'

    return attrs
