"""
Per-field UI state for rendered forms.

Each stateful field kind owns a small state object with event methods
(``commit()``, ``key_down()``, ``toggle()`` ...). Renderers read the state to
produce markup and never write back into the descriptor. The FieldStateStore
keeps state objects in a mutable mapping (a Streamlit session bucket in the
playground) so it survives reruns, and reseeds a state when the value it was
created from changes, e.g. after old input is restored.
"""

import base64
import logging
import mimetypes
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, MutableMapping, Optional, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_COLOR = '#000000'

S = TypeVar('S')


def _as_list(value: Any) -> List[Any]:
    if value is None or value == '':
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


@dataclass
class InputState:
    """Values of a text-like input; more than one row in add-more mode."""
    values: List[str] = field(default_factory=lambda: [''])
    max: int = 1

    @classmethod
    def from_value(cls, value: Any, max_rows: int = 1) -> 'InputState':
        values = [('' if v is None else str(v)) for v in _as_list(value)] or ['']
        return cls(values=values[:max(max_rows, 1)], max=max(max_rows, 1))

    @property
    def value(self) -> str:
        return self.values[0] if self.values else ''

    @property
    def can_add(self) -> bool:
        return len(self.values) < self.max

    def set(self, index: int, value: str) -> None:
        if 0 <= index < len(self.values):
            self.values[index] = value

    def add(self) -> bool:
        if not self.can_add:
            logger.debug(f"Add-more limit of {self.max} reached")
            return False
        self.values.append('')
        return True

    def remove(self, index: int) -> bool:
        if len(self.values) <= 1 or not 0 <= index < len(self.values):
            return False
        del self.values[index]
        return True


@dataclass
class PasswordState:
    visible: bool = False

    @property
    def input_type(self) -> str:
        return 'text' if self.visible else 'password'

    def toggle(self) -> None:
        self.visible = not self.visible


@dataclass
class SelectState:
    """Main select value plus the independently added select groups."""
    value: Any = None
    added_items: List[Any] = field(default_factory=list)
    max: int = 5

    @property
    def can_add(self) -> bool:
        return len(self.added_items) < self.max

    def select(self, value: Any) -> None:
        self.value = value

    def add_group(self) -> bool:
        if not self.can_add:
            logger.debug(f"Select group limit of {self.max} reached")
            return False
        self.added_items.append('')
        return True

    def set_group(self, index: int, value: Any) -> None:
        if 0 <= index < len(self.added_items):
            self.added_items[index] = value

    def remove_group(self, index: int) -> bool:
        if not 0 <= index < len(self.added_items):
            return False
        del self.added_items[index]
        return True


@dataclass
class TagsState:
    tags: List[str] = field(default_factory=list)
    input_text: str = ''
    max_tags: Optional[int] = None
    allow_duplicates: bool = False

    def type_text(self, text: str) -> None:
        """Update the pending text; a trailing comma commits it."""
        if text.endswith(','):
            self.input_text = text[:-1]
            self.commit()
        else:
            self.input_text = text

    def key_down(self, key: str) -> bool:
        if key in ('Enter', ','):
            return self.commit()
        return False

    def blur(self) -> bool:
        return self.commit()

    def commit(self) -> bool:
        """
        Turn the pending text into a tag.

        Returns:
            True if a tag was added. Empty text, duplicates (unless allowed)
            and going past max_tags leave the list and the input untouched.
        """
        candidate = self.input_text.strip()
        if not candidate:
            return False
        if not self.allow_duplicates and candidate in self.tags:
            return False
        if self.max_tags is not None and len(self.tags) >= self.max_tags:
            logger.debug(f"Tag limit of {self.max_tags} reached")
            return False

        self.tags.append(candidate)
        self.input_text = ''
        return True

    def remove(self, tag: str) -> None:
        self.tags = [t for t in self.tags if t != tag]


@dataclass
class DateRangeState:
    """Two linked dates; each bounds the other."""
    start: Optional[str] = None
    end: Optional[str] = None
    attr_min: Optional[str] = None
    attr_max: Optional[str] = None

    @property
    def start_max(self) -> Optional[str]:
        return self.end or self.attr_max

    @property
    def end_min(self) -> Optional[str]:
        return self.start or self.attr_min

    def set_start(self, value: Optional[str]) -> None:
        self.start = value or None

    def set_end(self, value: Optional[str]) -> None:
        self.end = value or None


@dataclass
class RangeState:
    value: Any = 0

    def set(self, value: Any) -> None:
        self.value = value


@dataclass
class ColorState:
    value: str = DEFAULT_COLOR

    def set(self, value: str) -> None:
        self.value = value or DEFAULT_COLOR


@dataclass
class FileState:
    file_name: str = ''
    preview_url: Optional[str] = None
    thumbnail_enabled: bool = False

    @classmethod
    def from_value(cls, value: Any, thumbnail_enabled: bool = False) -> 'FileState':
        """An existing file path or URL shows its base name and, optionally, a preview."""
        if isinstance(value, str) and value:
            return cls(
                file_name=value.rstrip('/').split('/')[-1],
                preview_url=value if thumbnail_enabled else None,
                thumbnail_enabled=thumbnail_enabled
            )
        return cls(thumbnail_enabled=thumbnail_enabled)

    def choose(self, file_name: str, content: bytes, content_type: Optional[str] = None) -> None:
        """Record an upload; images get an inline data URL preview when thumbnails are on."""
        self.file_name = file_name
        if content_type is None:
            content_type = mimetypes.guess_type(file_name)[0] or 'application/octet-stream'

        if self.thumbnail_enabled and content_type.startswith('image/'):
            encoded = base64.b64encode(content).decode('ascii')
            self.preview_url = f"data:{content_type};base64,{encoded}"
        else:
            self.preview_url = None

    def clear(self) -> None:
        self.file_name = ''
        self.preview_url = None


@dataclass
class AutocompleteState:
    options: List[str] = field(default_factory=list)
    query: str = ''
    suggestions: List[str] = field(default_factory=list)
    open: bool = False
    highlighted: int = -1

    def type_text(self, text: str) -> None:
        self.query = text
        self.highlighted = -1
        if text:
            needle = text.lower()
            self.suggestions = [o for o in self.options if needle in o.lower()]
            self.open = True
        else:
            self.suggestions = []
            self.open = False

    def key_down(self, key: str) -> None:
        if key == 'ArrowDown' and self.suggestions:
            self.highlighted = min(self.highlighted + 1, len(self.suggestions) - 1)
        elif key == 'ArrowUp' and self.suggestions:
            self.highlighted = max(self.highlighted - 1, 0)
        elif key == 'Enter' and self.highlighted >= 0:
            self.select(self.suggestions[self.highlighted])
        elif key == 'Escape':
            self.open = False

    def select(self, suggestion: str) -> None:
        self.query = suggestion
        self.open = False
        self.highlighted = -1

    def blur(self) -> None:
        self.open = False


@dataclass
class CaptchaState:
    text: str = ''
    refresh_count: int = 0

    def type_text(self, text: str) -> None:
        self.text = text

    def refresh(self) -> None:
        self.refresh_count += 1
        self.text = ''

    def image_url(self, template: str) -> str:
        return template.replace('{token}', str(self.refresh_count))


@dataclass
class RichTextState:
    content: str = ''

    def update(self, content: str) -> None:
        self.content = content or ''


@dataclass
class CheckState:
    checked: bool = False

    def toggle(self) -> None:
        self.checked = not self.checked


@dataclass
class CheckGroupState:
    selected: List[str] = field(default_factory=list)

    def toggle(self, value: Any) -> None:
        value = str(value)
        if value in self.selected:
            self.selected.remove(value)
        else:
            self.selected.append(value)

    def is_checked(self, value: Any) -> bool:
        return str(value) in self.selected


@dataclass
class RadioState:
    value: Optional[str] = None

    def select(self, value: Any) -> None:
        self.value = None if value is None else str(value)


class FieldStateStore:
    """
    Holds UI state objects keyed by field.

    Args:
        backing: Mapping to keep state in (a SessionStore bucket, or a dict)
    """

    def __init__(self, backing: Optional[MutableMapping[str, Any]] = None):
        self._backing: MutableMapping[str, Any] = backing if backing is not None else {}

    @staticmethod
    def key(field_type: str, name: str) -> str:
        return f"{field_type}:{name}"

    def get(self, key: str, seed: Any, factory: Callable[[], S]) -> S:
        """
        Return the state for ``key``, creating it when missing or when ``seed`` changed.

        Args:
            key: State key, usually from ``FieldStateStore.key``
            seed: The value the state is derived from
            factory: Builds a fresh state object from the seed

        Returns:
            The state object
        """
        entry = self._backing.get(key)
        if entry is not None and entry.get('seed') == seed:
            return entry['state']

        state = factory()
        self._backing[key] = {'seed': seed, 'state': state}
        if entry is not None:
            logger.debug(f"Reseeded field state {key}")
        return state

    def peek(self, key: str) -> Optional[Any]:
        entry = self._backing.get(key)
        return entry['state'] if entry else None

    def reset(self, key: Optional[str] = None) -> None:
        if key is None:
            self._backing.clear()
        else:
            self._backing.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._backing

    def __len__(self) -> int:
        return len(self._backing)
