"""
Drawing surface.

The session talks to the canvas only through `DrawingSurface`. `PathCanvas`
is an in-memory implementation holding the ordered stroke list, used by the
session tooling and the tests.
"""
import copy
from typing import List, Protocol

from onlynote.sketch.paths import StrokePath


class DrawingSurface(Protocol):
    def add_stroke(self, path: StrokePath) -> None: ...

    def export_paths(self) -> List[StrokePath]: ...

    def load_paths(self, paths: List[StrokePath]) -> None: ...

    def undo(self) -> None: ...

    def clear_canvas(self) -> None: ...


class PathCanvas:
    def __init__(self) -> None:
        self._paths: List[StrokePath] = []

    def add_stroke(self, path: StrokePath) -> None:
        self._paths.append(copy.deepcopy(path))

    def export_paths(self) -> List[StrokePath]:
        return copy.deepcopy(self._paths)

    def load_paths(self, paths: List[StrokePath]) -> None:
        # Loading replaces whatever is on the surface
        self._paths = copy.deepcopy(list(paths))

    def undo(self) -> None:
        if self._paths:
            self._paths.pop()

    def clear_canvas(self) -> None:
        self._paths = []
