"""
Submitted form data collection for Realments.

Rebuilds values from the flat (name, value) pairs a browser submits,
following the bracket conventions the renderer emits: ``tags[]`` for
list fields, ``period[0]``/``period[1]`` for date ranges and
``country[1][]`` for added multi-select groups.
"""

import re
import logging
from typing import Dict, Any, Iterable, List, Tuple, Union
from urllib.parse import parse_qsl

logger = logging.getLogger(__name__)

RESERVED_FIELDS = ('_token', '_method')

_SEGMENT = re.compile(r'\[([^\[\]]*)\]')


def split_field_name(name: str) -> Tuple[str, List[str]]:
    """
    Split a submitted name into its base and bracket segments.

    ``'period[0]'`` -> ``('period', ['0'])``; ``'tags[]'`` -> ``('tags', [''])``.
    """
    bracket = name.find('[')
    if bracket <= 0 or not name.endswith(']'):
        return name, []
    return name[:bracket], _SEGMENT.findall(name[bracket:])


def _assign(container: Dict[str, Any], segments: List[str], value: Any) -> None:
    key = segments[0]
    if key == '':
        key = str(len(container))

    if len(segments) == 1:
        container[key] = value
        return

    child = container.get(key)
    if not isinstance(child, dict):
        child = {}
        container[key] = child
    _assign(child, segments[1:], value)


def _listify(node: Any) -> Any:
    if not isinstance(node, dict):
        return node

    converted = {k: _listify(v) for k, v in node.items()}
    if converted and all(k.isdigit() for k in converted):
        return [converted[k] for k in sorted(converted, key=int)]
    return converted


def collect_form_data(pairs: Iterable[Tuple[str, Any]],
                      drop: Iterable[str] = RESERVED_FIELDS) -> Dict[str, Any]:
    """
    Collect submitted pairs into field values.

    Args:
        pairs: (name, value) pairs in submission order
        drop: Names to leave out (CSRF token and method spoofing by default)

    Returns:
        Values keyed by field name; bracketed names become lists or dicts
    """
    dropped = set(drop)
    tree: Dict[str, Any] = {}

    for name, value in pairs:
        if name in dropped:
            continue

        base, segments = split_field_name(name)
        if not segments:
            tree[base] = value
            continue

        node = tree.get(base)
        if not isinstance(node, dict):
            node = {}
            tree[base] = node
        _assign(node, segments, value)

    form_data = {k: _listify(v) for k, v in tree.items()}
    logger.debug(f"Collected {len(form_data)} field(s) from submission")
    return form_data


def parse_query_string(query: Union[str, bytes]) -> Dict[str, Any]:
    """Collect an urlencoded body or query string."""
    if isinstance(query, bytes):
        query = query.decode('utf-8')
    return collect_form_data(parse_qsl(query, keep_blank_values=True))


def submitted_method(pairs: Iterable[Tuple[str, Any]], default: str = 'POST') -> str:
    """The effective HTTP method, honoring a ``_method`` override."""
    for name, value in pairs:
        if name == '_method' and value:
            return str(value).upper()
    return default.upper()
