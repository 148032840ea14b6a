"""idun tool: fuzzy file finder backed by cached file lists

Two lists are kept in the cache directory, `files` and `dirs`, one absolute
path per line as printed by the indexer (fd). A list older than TTL is
regenerated before it is searched with the fuzzy filter (fzf).
"""

import dataclasses as _dataclasses
import enum as _enum
import math as _math
import os as _os
import subprocess as _subprocess
import tempfile as _tempfile
import time as _time

import iduntool.utils as _utils
from iduntool.proxy import IdunError


class CacheError(IdunError):
    """Indexer or fuzzy filter failed"""


class CacheKind(_enum.Enum):
    FILE = 'files'
    DIRECTORY = 'dirs'

    @property
    def type_flag(self):
        return 'f' if self is CacheKind.FILE else 'd'


@_dataclasses.dataclass(frozen=True)
class CacheEntry:
    path: str
    kind: CacheKind


@_dataclasses.dataclass(frozen=True)
class CacheSnapshot:
    entries: tuple
    last_refreshed: float

    def age(self, now):
        return now - self.last_refreshed


class Session():
    """State kept between commands of one terminal session"""

    COMPLETE_COMMANDS = ('run', 'show', 'zload')

    def __init__(self, last_match=None):
        self._last_match = last_match

    @property
    def last_match(self):
        return self._last_match

    def record(self, path):
        self._last_match = path

    def completions(self, command):
        """Candidates for first argument of command"""
        if command in self.COMPLETE_COMMANDS and self._last_match:
            return [self._last_match]
        return []


class FileCache():
    """Cached fuzzy lookup of files and directories under root"""

    EXCLUDE = '.git'

    def __init__(
            self, root, cache_dir, ttl, session=None, indexer='fd',
            fuzzy_filter='fzf', log=None, clock=_time.time):
        self._root = root
        self._cache_dir = cache_dir
        self._ttl = ttl
        self._session = session if session is not None else Session()
        self._indexer = indexer
        self._fuzzy_filter = fuzzy_filter
        self._log = log
        self._clock = clock

    def snapshot_path(self, kind):
        return _os.path.join(self._cache_dir, kind.value)

    def _last_refreshed(self, kind):
        try:
            return _os.stat(self.snapshot_path(kind)).st_mtime
        except OSError:
            return None

    def snapshot(self, kind):
        """Load snapshot, None if it does not exist or is not readable"""
        last_refreshed = self._last_refreshed(kind)
        if last_refreshed is None:
            return None
        try:
            with open(
                    self.snapshot_path(kind), encoding='utf-8',
                    errors='surrogateescape') as snap_file:
                entries = tuple(
                    CacheEntry(line.rstrip('\n'), kind)
                    for line in snap_file if line.strip())
        except OSError:
            return None
        return CacheSnapshot(entries, last_refreshed)

    def is_fresh(self, kind):
        last_refreshed = self._last_refreshed(kind)
        if last_refreshed is None:
            return False
        return self._clock() - last_refreshed < self._ttl

    def regenerate(self, kind):
        """Run indexer and replace snapshot of kind

        Raises:
            CacheError when indexer fails, old snapshot is kept
        """
        argv = [
            self._indexer, '--type', kind.type_flag, '--hidden',
            '--absolute-path', '--exclude', self.EXCLUDE, '.', self._root]
        if self._log:
            self._log.info('$ %s', ' '.join(argv))
        try:
            _os.makedirs(self._cache_dir, exist_ok=True)
            tmp_fd, tmp_path = _tempfile.mkstemp(
                prefix=f'.{kind.value}.', dir=self._cache_dir)
        except OSError as err:
            raise CacheError(
                f"Can not write cache dir {self._cache_dir}: {err}") from err
        try:
            with _os.fdopen(tmp_fd, 'w') as tmp_file:
                try:
                    result = _subprocess.run(
                        argv, stdout=tmp_file, stderr=_subprocess.PIPE,
                        text=True)
                except OSError as err:
                    raise CacheError(f'{self._indexer}: {err}') from err
            if result.returncode != 0:
                raise CacheError(
                    f'{self._indexer} failed: {(result.stderr or "").strip()}')
            try:
                _os.replace(tmp_path, self.snapshot_path(kind))
            except OSError as err:
                raise CacheError(
                    f"Can not replace {self.snapshot_path(kind)}: {err}"
                ) from err
        finally:
            if _os.path.exists(tmp_path):
                _os.unlink(tmp_path)

    def ensure_fresh(self, kind):
        if not self.is_fresh(kind):
            if self._log:
                self._log.verbose(f'Indexing {kind.value} in {self._root}')
            self.regenerate(kind)

    def refresh_all(self):
        for kind in CacheKind:
            self.regenerate(kind)

    def query(self, pattern, kind=CacheKind.FILE):
        """Return best match for pattern or None

        File matches under current directory are returned relative to it
        and remembered in session.
        """
        self.ensure_fresh(kind)
        argv = [self._fuzzy_filter, '--filter', pattern, '-i']
        if self._log:
            self._log.info(
                '$ %s < %s', ' '.join(argv), self.snapshot_path(kind))
        try:
            with open(self.snapshot_path(kind), 'rb') as snap_file:
                result = _subprocess.run(
                    argv, stdin=snap_file, stdout=_subprocess.PIPE,
                    stderr=_subprocess.PIPE)
        except OSError as err:
            raise CacheError(f'{self._fuzzy_filter}: {err}') from err
        # 1 is "no match"
        if result.returncode == 1:
            return None
        if result.returncode != 0:
            raise CacheError(
                f'{self._fuzzy_filter} failed: '
                f'{result.stderr.decode("utf-8", "replace").strip()}')
        lines = result.stdout.decode('utf-8', 'surrogateescape').splitlines()
        if not lines:
            return None
        match = lines[0]
        if kind is CacheKind.FILE:
            match = _utils.relative_to_cwd(match)
            self._session.record(match)
        return match

    def info(self):
        """Number of entries and age in seconds of each snapshot

        Returns:
            dict {CacheKind: (count, age)}, age is inf for missing snapshot
        """
        now = self._clock()
        result = {}
        for kind in CacheKind:
            snap = self.snapshot(kind)
            if snap is None:
                result[kind] = (0, _math.inf)
            else:
                result[kind] = (len(snap.entries), snap.age(now))
        return result
