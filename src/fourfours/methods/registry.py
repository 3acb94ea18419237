import json
import logging
import math
import os
import threading
from typing import Dict, List, Optional, Sequence

import pandas as pd

from fourfours.tasks.actions import EPSILON, Action
from fourfours.tasks.expression import Node, build_tree, render

logger = logging.getLogger(__name__)

MAX_TARGET = 100
VERIFY_TOLERANCE = 1e-6


class Slot:
    def __init__(self, path_length: int, expression: str, actions: List[str],
                 value, tree: Node):
        self.path_length = path_length
        self.expression = expression
        self.actions = actions
        self.value = value
        self.tree = tree

    @property
    def rendered_length(self) -> int:
        return len(self.expression)

    def __repr__(self):
        return f'Slot({self.expression!r}, path_length={self.path_length})'


class Registry:
    """
    Best derivation found so far for every target in [min_target, max_target].

    A slot is replaced only by a strictly better candidate: a shorter path,
    or an equally long path whose rendering has fewer characters.  The whole
    read-compare-write happens under one lock.
    """

    def __init__(self, max_target: int = MAX_TARGET, min_target: int = 0):
        self.min_target = min_target
        self.max_target = max_target
        self.slots: List[Optional[Slot]] = [None] * (max_target - min_target + 1)
        self.lock = threading.Lock()
        self.found = 0
        self.updates = 0

    def __len__(self):
        return len(self.slots)

    def __getitem__(self, target: int) -> Optional[Slot]:
        return self.slots[target - self.min_target]

    def targets(self) -> range:
        return range(self.min_target, self.max_target + 1)

    def index_for(self, value) -> Optional[int]:
        """Target a completed value lands on, or None if it misses every slot."""
        if not math.isfinite(value):
            return None
        closest = round(value)
        if abs(value - closest) > EPSILON:
            return None
        if not self.min_target <= closest <= self.max_target:
            return None
        return closest

    def submit(self, value, actions: Sequence[Action]) -> bool:
        target = self.index_for(value)
        if target is None:
            return False
        i = target - self.min_target
        n = len(actions)

        with self.lock:
            existing = self.slots[i]
            if existing is not None and n > existing.path_length:
                return False
            tree = build_tree(actions)
            expression = render(tree)
            if existing is not None and not (
                    n < existing.path_length
                    or len(expression) < existing.rendered_length):
                return False

            self.slots[i] = Slot(n, expression, [a.name for a in actions], value, tree)
            self.updates += 1
            if existing is None:
                self.found += 1
            found = self.found

        logger.info('[registry] %s = %s = %g (%d/%d)',
                    [a.name for a in actions], expression, value, found, len(self))
        return True

    def solved(self) -> List[int]:
        return [t for t in self.targets() if self[t] is not None]

    # ---------- export -----------------------------------------------------
    def to_records(self) -> List[Dict]:
        records = []
        for target in self.targets():
            slot = self[target]
            records.append({
                'target': target,
                'expression': slot.expression if slot else None,
                'path_length': slot.path_length if slot else None,
                'rendered_length': slot.rendered_length if slot else None,
                'actions': slot.actions if slot else None,
                'value': float(slot.value) if slot else None,
            })
        return records

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame.from_records(
            self.to_records(),
            columns=['target', 'expression', 'path_length',
                     'rendered_length', 'actions', 'value'])

    def dump(self, file: str):
        os.makedirs(os.path.dirname(file) or '.', exist_ok=True)
        with open(file, 'w') as f:
            json.dump(self.to_records(), f, indent=4)


def verify_slot(slot: Slot, target: int, tol: float = VERIFY_TOLERANCE) -> bool:
    """Evaluate the slot's tree symbolically and compare it with `target`."""
    try:
        value = complex(slot.tree.to_sympy().evalf())
    except (TypeError, ValueError):
        return False
    return abs(value.imag) <= tol and abs(value.real - target) <= tol
