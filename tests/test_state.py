from fourfours.tasks.actions import FLOAT_CATALOG
from fourfours.tasks.state import Frame, StackState, apply

PUSH4 = FLOAT_CATALOG['push4']


def test_push_counts_fours():
    state = StackState()
    for expected in range(1, 5):
        popped, action, result = apply(state, PUSH4)
        state = popped.push(result)
        assert state.fours_used == expected
    assert state.stack == (4.0, 4.0, 4.0, 4.0)
    assert apply(state, PUSH4) is None


def test_binary_needs_two_operands():
    state = StackState(1, (4.0,))
    assert apply(state, FLOAT_CATALOG['add']) is None
    assert apply(StackState(), FLOAT_CATALOG['sqrt']) is None


def test_failed_guard_leaves_state_unchanged():
    state = StackState(2, (4.0, 0.0))
    before = StackState(state.fours_used, state.stack)
    assert apply(state, FLOAT_CATALOG['div']) is None
    assert state == before

    state = StackState(1, (2.5,))
    assert apply(state, FLOAT_CATALOG['factorial']) is None
    assert state.stack == (2.5,)


def test_apply_does_not_push_result():
    state = StackState(2, (4.0, 4.0))
    popped, action, result = apply(state, FLOAT_CATALOG['add'])
    assert popped.stack == ()
    assert action is FLOAT_CATALOG['add']
    assert result == 8.0
    assert state.stack == (4.0, 4.0)


def test_complete():
    assert StackState(4, (16.0,)).complete
    assert not StackState(3, (12.0,)).complete
    assert not StackState(4, (4.0, 4.0)).complete


def test_equality_and_frame():
    a = StackState(2, (4.0, 8.0))
    assert a == StackState(2, [4.0, 8.0])
    assert a != StackState(2, (8.0, 4.0))
    assert hash(a) == hash(StackState(2, (4.0, 8.0)))

    frame = Frame(StackState(), PUSH4, 4.0, StackState(1, (4.0,)))
    assert frame.state.top == 4.0
    assert 'push4' in repr(frame)
