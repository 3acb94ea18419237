from typing import FrozenSet, Optional, Tuple

from fourfours.tasks.actions import Action

# (previous action, next action) pairs that never lead anywhere new,
# whatever the operands are.
PRUNED_PAIRS: FrozenSet[Tuple[str, str]] = frozenset({
    ('abs', 'abs'),
    ('sqrt', 'abs'),            # roots are already non-negative
    ('root4', 'abs'),
    ('factorial', 'abs'),
    ('floor', 'floor'),
    ('floor', 'ceil'),
    ('ceil', 'floor'),
    ('ceil', 'ceil'),
    ('abs', 'neg'),
    ('neg', 'abs'),
    ('neg', 'neg'),
})


def is_pruned(previous: Optional[Action], action: Action,
              pairs: FrozenSet[Tuple[str, str]] = PRUNED_PAIRS) -> bool:
    if previous is None:
        return False
    return (previous.name, action.name) in pairs
