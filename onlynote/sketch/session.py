"""
Sketch session.

Ties a drawing surface to the local cache and to the access resolver for
the signed-in principal. Every local mutation is mirrored to the cache with
a monotonic revision; cached and cloud content meet in `reconcile`, so the
surface is loaded once from whichever snapshot is newer.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from onlynote.core.config import Settings, settings as default_settings
from onlynote.core.errors import ParseError, PermissionDenied
from onlynote.models.note import Note
from onlynote.models.profile import Profile
from onlynote.services.access import AccessResolver, AccessRole, Resolution
from onlynote.sketch.cache import LocalCache
from onlynote.sketch.canvas import DrawingSurface
from onlynote.sketch.paths import StrokePath, dump_paths, parse_paths

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "onlynote_drawing"


class CachedDrawing(BaseModel):
    paths: List[StrokePath]
    updated_at: Optional[datetime] = None
    revision: int = 0


# Older caches hold a bare list of paths
_cached_adapter = TypeAdapter(Union[CachedDrawing, List[StrokePath]])
_timestamp_adapter = TypeAdapter(datetime)


@dataclass(frozen=True)
class Snapshot:
    paths: List[StrokePath]
    updated_at: Optional[str]
    revision: int
    origin: str  # "local" or "remote"

    @property
    def timestamp(self) -> datetime:
        if not self.updated_at:
            return datetime.min.replace(tzinfo=timezone.utc)
        try:
            ts = _timestamp_adapter.validate_python(self.updated_at)
        except ValidationError:
            logger.warning("Unreadable %s timestamp %r, treating it as oldest", self.origin, self.updated_at)
            return datetime.min.replace(tzinfo=timezone.utc)
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return ts


def reconcile(local: Optional[Snapshot], remote: Optional[Snapshot]) -> Optional[Snapshot]:
    """
    Pick the snapshot the surface should show.

    The later timestamp wins; equal timestamps fall back to the higher
    revision, and a full tie goes to the remote copy.
    """
    if local is None:
        return remote
    if remote is None:
        return local
    if local.timestamp != remote.timestamp:
        return local if local.timestamp > remote.timestamp else remote
    if local.revision > remote.revision:
        return local
    return remote


def _iso(ts: Optional[datetime]) -> Optional[str]:
    if ts is None:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.isoformat()


def decode_snapshot(raw: str) -> Snapshot:
    try:
        cached = _cached_adapter.validate_json(raw)
    except ValidationError as exc:
        raise ParseError("Cached drawing is not valid JSON stroke paths") from exc
    if isinstance(cached, CachedDrawing):
        return Snapshot(cached.paths, _iso(cached.updated_at), cached.revision, "local")
    return Snapshot(cached, None, 0, "local")


def encode_snapshot(snapshot: Snapshot) -> str:
    return CachedDrawing(
        paths=snapshot.paths,
        updated_at=snapshot.updated_at,
        revision=snapshot.revision,
    ).model_dump_json()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SketchSession:
    def __init__(
        self,
        surface: DrawingSurface,
        cache: LocalCache,
        resolver: Optional[AccessResolver] = None,
        cache_key: str = DEFAULT_CACHE_KEY,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.surface = surface
        self.cache = cache
        self.resolver = resolver
        self.cache_key = cache_key
        self.clock = clock

        self.principal: Optional[Profile] = None
        self.role = AccessRole.NONE
        self.note_id: Optional[int] = None

        self._local: Optional[Snapshot] = None
        self._revision = 0

    @classmethod
    def open(
        cls,
        surface: DrawingSurface,
        resolver: Optional[AccessResolver] = None,
        settings: Optional[Settings] = None,
    ) -> "SketchSession":
        """Build a session on the configured cache directory and key."""
        settings = settings or default_settings
        cache = LocalCache(Path(settings.LOCAL_CACHE_DIR))
        return cls(surface, cache, resolver, cache_key=settings.LOCAL_CACHE_KEY)

    @property
    def local_snapshot(self) -> Optional[Snapshot]:
        return self._local

    # --- local cache ----------------------------------------------------

    def mount(self) -> bool:
        """Load the cached drawing into the surface, if there is one."""
        try:
            raw = self.cache.get(self.cache_key)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read drawing cache: %s", exc)
            return False
        if raw is None:
            return False

        try:
            snapshot = decode_snapshot(raw)
        except ParseError as exc:
            logger.warning("Ignoring cached drawing: %s", exc)
            return False

        self._local = snapshot
        self._revision = max(self._revision, snapshot.revision)
        self.surface.load_paths(snapshot.paths)
        return True

    def _write_cache(self, snapshot: Snapshot) -> None:
        try:
            self.cache.set(self.cache_key, encode_snapshot(snapshot))
        except OSError as exc:
            # best effort; the surface stays authoritative
            logger.warning("Could not write drawing cache: %s", exc)

    def _mirror(self, updated_at: Optional[str] = None) -> Snapshot:
        self._revision += 1
        snapshot = Snapshot(
            paths=self.surface.export_paths(),
            updated_at=updated_at or self.clock().isoformat(),
            revision=self._revision,
            origin="local",
        )
        self._local = snapshot
        self._write_cache(snapshot)
        return snapshot

    # --- local mutations ------------------------------------------------

    def add_stroke(self, path: StrokePath) -> None:
        self.surface.add_stroke(path)
        self._mirror()

    def undo(self) -> None:
        self.surface.undo()
        self._mirror()

    def clear(self) -> None:
        self.surface.clear_canvas()
        self._mirror()

    # --- cloud ----------------------------------------------------------

    def identity_changed(self, principal: Optional[Profile]) -> Resolution:
        """
        React to sign-in, sign-out or a switch of principal.

        Resolves the principal's note and loads it only if it is newer than
        the cached drawing.
        """
        self.principal = principal
        self.role = AccessRole.NONE
        self.note_id = None
        if principal is None or self.resolver is None:
            return Resolution(role=AccessRole.NONE)

        resolution = self.resolver.resolve(principal)
        self.role = resolution.role
        self.note_id = resolution.note_id

        remote = None
        if resolution.paths is not None:
            remote = Snapshot(resolution.paths, resolution.updated_at, resolution.revision or 0, "remote")

        winner = reconcile(self._local, remote)
        if winner is not None and winner is remote:
            self.surface.load_paths(remote.paths)
            self._local = Snapshot(remote.paths, remote.updated_at, self._revision, "local")
            self._write_cache(self._local)
        return resolution

    def save(self) -> Note:
        """
        Push the surface to the cloud.

        A principal with no note and no grant creates their own note; any
        other principal needs the writer role.
        """
        if self.principal is None or self.resolver is None:
            raise PermissionDenied("Not signed in")

        paths = self.surface.export_paths()
        if self.role == AccessRole.NONE:
            note = self.resolver.create(self.principal, paths)
        else:
            note = self.resolver.save(self.principal, paths)

        self.role = AccessRole.WRITER
        self.note_id = note.id
        self._mirror(updated_at=note.updated_at)
        return note

    # --- file export / import -------------------------------------------

    def export_json(self) -> str:
        return dump_paths(self.surface.export_paths())

    def import_json(self, text: str) -> bool:
        try:
            paths = parse_paths(text)
        except ParseError as exc:
            logger.warning("Import skipped: %s", exc)
            return False
        self.surface.load_paths(paths)
        self._mirror()
        return True
