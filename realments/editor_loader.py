"""
Async loader for rich-text editor resources.

One in-flight load per editor is shared by every field that uses it. Loads
can be cancelled as a group with ``aclose()`` when the form goes away before
they finish. The fetch step is injectable; the default one resolves script
and stylesheet URLs from the ``wysiwyg_editors`` config section.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Tuple

from .config_loader import get_config
from .exceptions import EditorLoadError

logger = logging.getLogger(__name__)

STATUS_IDLE = 'idle'
STATUS_LOADING = 'loading'
STATUS_LOADED = 'loaded'
STATUS_FAILED = 'failed'


@dataclass(frozen=True)
class EditorAsset:
    """Everything a page needs to boot one editor."""
    name: str
    scripts: Tuple[str, ...] = ()
    styles: Tuple[str, ...] = ()
    options: Dict[str, Any] = field(default_factory=dict)


Fetch = Callable[[str, Optional[Dict[str, Any]]], Awaitable[EditorAsset]]


async def resolve_editor_asset(editor: str, editor_config: Optional[Dict[str, Any]]) -> EditorAsset:
    """
    Resolve an editor's resources from its config entry.

    Raises:
        EditorLoadError: If the editor is not configured or has no script URL
    """
    if not isinstance(editor_config, dict):
        raise EditorLoadError(editor, 'editor is not configured')

    cdn = editor_config.get('cdn')
    if isinstance(cdn, str):
        scripts, styles = (cdn,), ()
    elif isinstance(cdn, dict):
        scripts = (cdn['js'],) if cdn.get('js') else ()
        styles = (cdn['css'],) if cdn.get('css') else ()
    else:
        scripts, styles = (), ()

    if not scripts:
        raise EditorLoadError(editor, 'no script URL configured')

    return EditorAsset(
        name=editor,
        scripts=scripts,
        styles=styles,
        options=dict(editor_config.get('default_options') or {})
    )


class EditorLoader:
    """
    Memoizing editor resource loader.

    Args:
        editors: Editor config mapping (defaults to the ``wysiwyg_editors`` config section)
        fetch: Coroutine function ``(editor, editor_config) -> EditorAsset``
    """

    def __init__(self, editors: Optional[Dict[str, Any]] = None, fetch: Optional[Fetch] = None):
        if editors is None:
            editors = get_config().get('wysiwyg_editors', {}) or {}
        self._editors = editors
        self._fetch = fetch or resolve_editor_asset
        self._tasks: Dict[str, asyncio.Task] = {}
        self._loaded: Dict[str, EditorAsset] = {}
        self._failed: Dict[str, str] = {}

    def status(self, editor: str) -> str:
        if editor in self._loaded:
            return STATUS_LOADED
        if editor in self._tasks:
            return STATUS_LOADING
        if editor in self._failed:
            return STATUS_FAILED
        return STATUS_IDLE

    def asset(self, editor: str) -> Optional[EditorAsset]:
        return self._loaded.get(editor)

    def failure(self, editor: str) -> Optional[str]:
        return self._failed.get(editor)

    async def load(self, editor: str) -> EditorAsset:
        """
        Load an editor, joining the in-flight load if there is one.

        Raises:
            EditorLoadError: If the resources cannot be resolved
            asyncio.CancelledError: If the load was cancelled by aclose()
        """
        if editor in self._loaded:
            return self._loaded[editor]

        task = self._tasks.get(editor)
        if task is None:
            logger.debug(f"Starting load for {editor} editor")
            task = asyncio.ensure_future(self._run(editor))
            self._tasks[editor] = task

        return await asyncio.shield(task)

    async def _run(self, editor: str) -> EditorAsset:
        try:
            asset = await self._fetch(editor, self._editors.get(editor))
        except asyncio.CancelledError:
            logger.info(f"Load of {editor} editor cancelled")
            raise
        except EditorLoadError as e:
            self._failed[editor] = e.reason
            logger.warning(f"{e}")
            raise
        except Exception as e:
            self._failed[editor] = str(e)
            logger.warning(f"Failed to load {editor} editor: {e}")
            raise EditorLoadError(editor, str(e)) from e
        else:
            self._loaded[editor] = asset
            self._failed.pop(editor, None)
            logger.info(f"Loaded {editor} editor")
            return asset
        finally:
            self._tasks.pop(editor, None)

    async def preload(self, editors: Iterable[str]) -> Dict[str, Optional[EditorAsset]]:
        """
        Load several editors concurrently.

        Failures are recorded and reported as None rather than raised.
        """
        names = list(dict.fromkeys(editors))
        results = await asyncio.gather(*(self.load(name) for name in names), return_exceptions=True)

        loaded: Dict[str, Optional[EditorAsset]] = {}
        for name, result in zip(names, results):
            if isinstance(result, EditorAsset):
                loaded[name] = result
            elif isinstance(result, (Exception, asyncio.CancelledError)):
                loaded[name] = None
            else:
                raise result
        return loaded

    async def aclose(self) -> None:
        """Cancel every pending load."""
        pending = list(self._tasks.values())
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.info(f"Cancelled {len(pending)} pending editor load(s)")
        self._tasks.clear()
