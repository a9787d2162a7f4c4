"""
Minimal element tree for rendered forms.

Renderers build ``Element`` trees; ``render()`` serializes them to
``markupsafe.Markup`` with every text node and attribute value escaped.
The tree stays inspectable, which is what the query helpers are for.
"""

import json
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from markupsafe import Markup, escape

VOID_ELEMENTS = frozenset({
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'link', 'meta', 'source', 'track', 'wbr',
})

Child = Union['Element', Markup, str, int, float, None]


def _attr_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


class Element:
    """One HTML element with attributes and children."""

    def __init__(self, tag: str, attrs: Optional[Dict[str, Any]] = None, children: Optional[List[Child]] = None):
        self.tag = tag
        self.attrs: Dict[str, Any] = dict(attrs or {})
        self.children: List[Child] = [c for c in (children or []) if c is not None]

    def append(self, *children: Child) -> 'Element':
        self.children.extend(c for c in children if c is not None)
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return self.attrs.get(name, default)

    @property
    def classes(self) -> List[str]:
        return str(self.attrs.get('class') or '').split()

    def has_class(self, token: str) -> bool:
        return token in self.classes

    def render(self) -> Markup:
        parts = [f'<{self.tag}']
        for name, value in self.attrs.items():
            if value is None or value is False:
                continue
            if value is True:
                parts.append(f' {escape(name)}')
            else:
                parts.append(f' {escape(name)}="{escape(_attr_value(value))}"')
        parts.append('>')

        if self.tag in VOID_ELEMENTS:
            return Markup(''.join(parts))

        for child in self.children:
            if isinstance(child, Element):
                parts.append(child.render())
            else:
                parts.append(escape(child))

        parts.append(f'</{self.tag}>')
        return Markup(''.join(str(p) for p in parts))

    def __html__(self) -> str:
        return self.render()

    def __str__(self) -> str:
        return str(self.render())

    def __repr__(self) -> str:
        return f"Element({self.tag!r}, {self.attrs!r}, {len(self.children)} children)"

    # Tree queries

    def iter(self) -> Iterator['Element']:
        """Depth-first iteration over this element and its descendants."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter()

    def find_all(self, tag: Optional[str] = None, predicate: Optional[Callable[['Element'], bool]] = None,
                 **attrs: Any) -> List['Element']:
        """
        Find descendants (including self) by tag, attributes and/or predicate.

        Attribute names with underscores match dashed attributes
        (``data_editor`` matches ``data-editor``); ``class_`` checks for a
        class token rather than the whole string.
        """
        matches = []
        for element in self.iter():
            if tag is not None and element.tag != tag:
                continue
            if not _attrs_match(element, attrs):
                continue
            if predicate is not None and not predicate(element):
                continue
            matches.append(element)
        return matches

    def find(self, tag: Optional[str] = None, predicate: Optional[Callable[['Element'], bool]] = None,
             **attrs: Any) -> Optional['Element']:
        found = self.find_all(tag, predicate, **attrs)
        return found[0] if found else None

    def text_content(self) -> str:
        """Concatenated text of all descendant text nodes."""
        texts = []
        for child in self.children:
            if isinstance(child, Element):
                texts.append(child.text_content())
            elif child is not None:
                texts.append(str(child))
        return ''.join(texts)


def _attrs_match(element: Element, attrs: Dict[str, Any]) -> bool:
    for key, expected in attrs.items():
        if key == 'class_':
            if not element.has_class(expected):
                return False
            continue
        name = key.replace('_', '-') if key not in element.attrs else key
        if element.attrs.get(name) != expected:
            return False
    return True


def h(tag: str, attrs: Optional[Dict[str, Any]] = None, *children: Child) -> Element:
    """Shorthand constructor: ``h('label', {'for': 'x'}, 'Name')``."""
    return Element(tag, attrs, list(children))


def raw(html: str) -> Markup:
    """Mark a trusted string as safe HTML."""
    return Markup(html)
