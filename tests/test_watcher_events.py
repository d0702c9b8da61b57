import os
import threading
import time
from pathlib import Path

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from linkpager.cli import reload_from_watch
from linkpager.logger import WatchError
from linkpager.store import EntryStore
from linkpager.watch_core.handler import ReloadHandler
from linkpager.watch_core.queue import ChangeQueue
from linkpager.watch_core.watcher import FileWatcher


class FakeQueue:
    def __init__(self):
        self.notified = 0

    def notify(self):
        self.notified += 1


def _wait_for(predicate, timeout: float = 10.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.05)
    return predicate()


@pytest.mark.unit
def test_handler_ignores_other_files_and_directories(tmp_path):
    q = FakeQueue()
    handler = ReloadHandler(tmp_path / "links.txt", q)

    handler.on_modified(FileModifiedEvent(str(tmp_path / "other.txt")))
    handler.on_created(FileCreatedEvent(str(tmp_path / "links.txt.swp")))
    handler.on_modified(DirModifiedEvent(str(tmp_path)))

    assert q.notified == 0


@pytest.mark.unit
def test_handler_notifies_once_per_event_on_target(tmp_path):
    q = FakeQueue()
    target = tmp_path / "links.txt"
    handler = ReloadHandler(target, q)

    handler.on_modified(FileModifiedEvent(str(target)))
    handler.on_created(FileCreatedEvent(str(target)))
    handler.on_deleted(FileDeletedEvent(str(target)))

    assert q.notified == 3


@pytest.mark.unit
def test_handler_follows_atomic_rename_onto_target(tmp_path):
    q = FakeQueue()
    target = tmp_path / "links.txt"
    handler = ReloadHandler(target, q)

    handler.on_moved(FileMovedEvent(str(tmp_path / ".links.txt.tmp"), str(target)))
    handler.on_moved(FileMovedEvent(str(target), str(tmp_path / "links.old")))
    handler.on_moved(FileMovedEvent(str(tmp_path / "a"), str(tmp_path / "b")))

    assert q.notified == 2


@pytest.mark.unit
def test_handler_matches_relative_target(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    q = FakeQueue()
    handler = ReloadHandler(Path("links.txt"), q)

    handler.on_modified(FileModifiedEvent(os.path.join(os.getcwd(), "links.txt")))
    assert q.notified == 1


@pytest.mark.unit
def test_queue_without_delay_runs_every_notification():
    calls = []
    q = ChangeQueue(lambda: calls.append(1), delay_secs=0)
    for _ in range(3):
        q.notify()
    assert len(calls) == 3


@pytest.mark.unit
def test_queue_debounces_bursts():
    fired = threading.Event()
    calls = []

    def cb():
        calls.append(1)
        fired.set()

    q = ChangeQueue(cb, delay_secs=0.1)
    for _ in range(5):
        q.notify()
    assert fired.wait(5)
    time.sleep(0.3)
    assert len(calls) == 1


@pytest.mark.unit
def test_queue_survives_callback_errors():
    calls = []

    def cb():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")

    q = ChangeQueue(cb)
    q.notify()
    q.notify()
    assert len(calls) == 2


@pytest.mark.unit
def test_watch_missing_path_fails_fast(tmp_path):
    watcher = FileWatcher(tmp_path / "nope.txt", lambda: None)
    with pytest.raises(WatchError):
        watcher.start()
    assert not watcher.running


@pytest.mark.unit
def test_watch_directory_fails_fast(tmp_path):
    with pytest.raises(WatchError):
        FileWatcher(tmp_path, lambda: None).start()


@pytest.mark.unit
def test_observer_os_errors_become_watch_errors(links_file):
    class ExhaustedObserver:
        def schedule(self, *args, **kwargs):
            pass

        def start(self):
            raise OSError(28, "inotify watch limit reached")

    path = links_file("http://a 1\n")
    watcher = FileWatcher(path, lambda: None, use_polling=False, observer_cls=ExhaustedObserver)
    with pytest.raises(WatchError) as exc_info:
        watcher.start()
    assert "inotify watch limit reached" in str(exc_info.value)


@pytest.mark.unit
def test_settings_from_environment(monkeypatch, links_file):
    monkeypatch.setenv("LINKPAGER_WATCH_USE_POLLING", "yes")
    monkeypatch.setenv("LINKPAGER_WATCH_DEBOUNCE_SECS", "0.5")
    watcher = FileWatcher(links_file(""), lambda: None)
    assert watcher.use_polling is True
    assert watcher.debounce_secs == 0.5


@pytest.mark.integration
def test_watcher_reloads_store_and_survives_deletion(links_file):
    path = links_file("http://a 1\n")
    store = EntryStore(path, page_size=10)

    with FileWatcher(path, lambda: reload_from_watch(store), use_polling=True, debounce_secs=0) as watcher:
        path.write_text("http://a 1\nhttp://b 2\nhttp://c 3\n", encoding="utf-8")
        assert _wait_for(lambda: store.count == 3)

        path.unlink()
        time.sleep(2.5)
        assert watcher.running
        assert store.count == 3

        path.write_text("http://d 4\n", encoding="utf-8")
        assert _wait_for(lambda: store.count == 1)
        assert store.page(0)[0].url == "http://d"

    assert not watcher.running


@pytest.mark.unit
def test_watch_blocks_until_interrupted(links_file, monkeypatch):
    import types

    import linkpager.watch_core.watcher as watcher_mod

    def interrupt(_secs):
        raise KeyboardInterrupt

    monkeypatch.setattr(watcher_mod, "time", types.SimpleNamespace(sleep=interrupt))
    started = []

    class RecordingObserver:
        def schedule(self, handler, path, recursive=False):
            started.append((path, recursive))

        def start(self):
            pass

        def stop(self):
            started.append("stopped")

        def join(self):
            pass

    path = links_file("http://a 1\n")
    watcher_mod.watch(path, lambda: None, use_polling=False, observer_cls=RecordingObserver)

    assert started == [(str(path.parent), False), "stopped"]
