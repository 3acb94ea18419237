import logging
import math
import time
from typing import FrozenSet, Iterator, List, Optional, Tuple

from fourfours.methods.pruning import PRUNED_PAIRS, is_pruned
from fourfours.methods.registry import MAX_TARGET, Registry
from fourfours.tasks.actions import FLOAT_CATALOG, Catalog
from fourfours.tasks.state import Frame, StackState, apply

logger = logging.getLogger(__name__)

MAX_DEPTH = 11
INITIAL_STATE = StackState()


class DepthBoundError(AssertionError):
    """The search went deeper than its bound: path accounting is broken."""


def _finite(value) -> bool:
    return not isinstance(value, float) or math.isfinite(value)


class Explorer:
    """
    Depth-first backtracking over every action sequence up to `max_depth`.

    The path is a single list owned by the active frame: each move is
    appended before descending and popped in a `finally` on the way back,
    so the path always has its entry length again when a loop iteration ends.
    """

    def __init__(self, registry: Registry, catalog: Catalog = FLOAT_CATALOG,
                 max_depth: int = MAX_DEPTH,
                 pruned_pairs: FrozenSet[Tuple[str, str]] = PRUNED_PAIRS):
        self.registry = registry
        self.catalog = catalog
        self.max_depth = max_depth
        self.pruned_pairs = pruned_pairs
        self.nodes = 0
        self.completions = 0

    def moves(self, path: List[Frame]) -> Iterator[Frame]:
        """Yield every legal next step after `path`, in catalog order."""
        state = path[-1].state if path else INITIAL_STATE
        previous = path[-1].action if path else None

        for action in self.catalog:
            if is_pruned(previous, action, self.pruned_pairs):
                continue
            applied = apply(state, action)
            if applied is None:
                continue
            popped, _, result = applied
            if not _finite(result):
                continue
            new_state = popped.push(result)
            if new_state == state:
                logger.debug('no-op %s on %r skipped', action.name, state)
                continue
            yield Frame(state, action, result, new_state)

    def _can_descend(self, path: List[Frame]) -> bool:
        if len(path) >= self.max_depth:
            return False
        limit = self.catalog.magnitude_limit
        return limit is None or abs(path[-1].result) < limit

    def _complete(self, path: List[Frame]):
        self.completions += 1
        self.registry.submit(path[-1].result, [f.action for f in path])

    def explore(self, path: Optional[List[Frame]] = None):
        path = [] if path is None else path
        if len(path) > self.max_depth:
            raise DepthBoundError(f'path length {len(path)} exceeds {self.max_depth}')

        for frame in self.moves(path):
            path.append(frame)
            try:
                self.nodes += 1
                if frame.state.complete:
                    self._complete(path)
                elif self._can_descend(path):
                    self.explore(path)
            finally:
                path.pop()

    def prefixes(self, depth: int, path: Optional[List[Frame]] = None) -> List[List[Frame]]:
        """
        Every open search path of exactly `depth` steps.

        Derivations that complete before reaching `depth` are registered
        on the way, so exploring each returned prefix covers the rest.
        """
        path = [] if path is None else path
        out = []
        for frame in self.moves(path):
            path.append(frame)
            try:
                self.nodes += 1
                if frame.state.complete:
                    self._complete(path)
                elif not self._can_descend(path):
                    continue
                elif len(path) >= depth:
                    out.append(list(path))
                else:
                    out.extend(self.prefixes(depth, path))
            finally:
                path.pop()
        return out


def solve(max_target: int = MAX_TARGET, max_depth: int = MAX_DEPTH,
          catalog: Catalog = FLOAT_CATALOG) -> Registry:
    """Run one full search and return the filled registry."""
    registry = Registry(max_target)
    explorer = Explorer(registry, catalog, max_depth)

    start_time = time.time()
    logger.info('searching [0, %d] with the %s catalog, depth <= %d',
                max_target, catalog.name, max_depth)
    explorer.explore()
    logger.info('visited %d nodes, %d complete derivations, %d updates in %.2fs',
                explorer.nodes, explorer.completions, registry.updates,
                time.time() - start_time)
    return registry
