"""Sync on save: watch the vault and upload Markdown files as they change.

Filesystem events arrive on the watchdog observer thread and are only
queued there. Uploads run on the calling thread once a path has been quiet
for the debounce interval, so the sync engine stays single-threaded.
"""

import logging
import os
import threading
import time
from typing import Callable, Dict, List, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 1.0
POLL_INTERVAL_SECONDS = 0.2


class VaultEventHandler(FileSystemEventHandler):
    """Queues vault-relative Markdown paths from filesystem events."""

    def __init__(
        self,
        vault_root: str,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize event handler.

        Args:
            vault_root: Absolute vault root
            debounce: Quiet period before a path is reported
            clock: Monotonic time source
        """
        self.vault_root = os.path.abspath(vault_root)
        self.debounce = debounce
        self._clock = clock
        self._pending: Dict[str, float] = {}
        self._lock = threading.Lock()

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.queue(event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.queue(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.queue(event.dest_path)

    def to_vault_path(self, src_path) -> Optional[str]:
        """Vault-relative '/' path of a Markdown file, or None to ignore it."""
        if isinstance(src_path, bytes):
            src_path = os.fsdecode(src_path)
        full_path = os.path.abspath(src_path)
        relative = os.path.relpath(full_path, self.vault_root)
        if relative.startswith('..'):
            return None
        relative = relative.replace(os.sep, '/')
        if not relative.endswith('.md'):
            return None
        if any(part.startswith('.') for part in relative.split('/')):
            return None
        return relative

    def queue(self, src_path) -> None:
        path = self.to_vault_path(src_path)
        if path is None:
            return
        with self._lock:
            self._pending[path] = self._clock()
        logger.debug(f"Queued change: {path}")

    def pop_ready(self) -> List[str]:
        """Remove and return paths quiet for at least the debounce interval."""
        now = self._clock()
        with self._lock:
            ready = sorted(
                path for path, seen in self._pending.items()
                if now - seen >= self.debounce
            )
            for path in ready:
                del self._pending[path]
        return ready


class VaultWatcher:
    """Runs a watchdog observer over the vault and dispatches ready paths.

    Example:
        >>> watcher = VaultWatcher(".", orchestrator.sync_file)
        >>> watcher.run()  # blocks until Ctrl+C
    """

    def __init__(
        self,
        vault_root: str,
        on_file_saved: Callable[[str], bool],
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
    ):
        self.handler = VaultEventHandler(vault_root, debounce)
        self._on_file_saved = on_file_saved
        self._observer: Optional[Observer] = None
        self._running = False

    def dispatch_ready(self) -> int:
        """Sync every ready path. Returns the number of paths dispatched."""
        ready = self.handler.pop_ready()
        for path in ready:
            if self._on_file_saved(path):
                logger.info(f"Synced {path}")
            else:
                logger.warning(f"Failed to sync {path}")
        return len(ready)

    def start(self) -> None:
        self._observer = Observer()
        self._observer.schedule(self.handler, self.handler.vault_root, recursive=True)
        self._observer.start()
        self._running = True
        logger.info(f"Watching {self.handler.vault_root} for changes")

    def stop(self) -> None:
        self._running = False
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        logger.info("Stopped watching")

    def run(self) -> None:
        """Watch until interrupted."""
        self.start()
        try:
            while self._running:
                time.sleep(POLL_INTERVAL_SECONDS)
                self.dispatch_ready()
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()
