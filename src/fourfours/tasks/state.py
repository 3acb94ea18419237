from typing import Optional, Tuple

from fourfours.tasks.actions import FOURS, Action


class StackState:
    """
    Operand stack plus the count of fours pushed so far.

    States are immutable: `apply` hands back a fresh state and leaves the
    receiver untouched, so a rejected action can never leak a partial pop.
    """
    __slots__ = ('fours_used', 'stack')

    def __init__(self, fours_used: int = 0, stack: Tuple = ()):
        self.fours_used = fours_used
        self.stack = tuple(stack)

    @property
    def complete(self) -> bool:
        return self.fours_used == FOURS and len(self.stack) == 1

    @property
    def top(self):
        return self.stack[-1]

    def push(self, value) -> 'StackState':
        return StackState(self.fours_used, self.stack + (value,))

    def __eq__(self, other):
        if not isinstance(other, StackState):
            return NotImplemented
        return self.fours_used == other.fours_used and self.stack == other.stack

    def __hash__(self):
        return hash((self.fours_used, self.stack))

    def __repr__(self):
        return f'StackState(fours_used={self.fours_used}, stack={list(self.stack)})'


def apply(state: StackState, action: Action) -> Optional[Tuple[StackState, Action, object]]:
    """
    Try `action` on `state`.

    Returns (popped_state, action, result) where popped_state has the
    operands removed but the result not yet pushed, or None when the
    action's guard rejects.
    """
    if action.arity == 0:
        if state.fours_used >= FOURS:
            return None
        return StackState(state.fours_used + 1, state.stack), action, action.transform()

    n = action.arity
    if len(state.stack) < n:
        return None
    result = action.transform(*state.stack[-n:])
    if result is None:
        return None
    return StackState(state.fours_used, state.stack[:-n]), action, result


class Frame:
    """One step of a search path: the state before, the action, its result."""
    __slots__ = ('prior', 'action', 'result', 'state')

    def __init__(self, prior: StackState, action: Action, result, state: StackState):
        self.prior = prior
        self.action = action
        self.result = result
        self.state = state

    def __repr__(self):
        return f'Frame({self.action.name}, {self.result!r})'
