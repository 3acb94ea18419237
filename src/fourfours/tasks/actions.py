import math
from typing import Callable, List, Optional

# -----------------------------------------------
# Operator catalog for the four-fours search
# -----------------------------------------------
#
# Every action declares an arity and a guarded transform.  Operands are
# handed to the transform in stack order (left operand first, top of stack
# last), so the top of the stack is always the right-hand operand of
# subtract, divide, modulo and power.  A transform returns None when its
# guard rejects the operands; it never touches the stack itself.

FOURS = 4
EPSILON = 1e-7
FACTORIAL_DOMAIN = (2, 10)           # exclusive bounds
INT_MIN, INT_MAX = -2 ** 63, 2 ** 63 - 1


class Action:
    def __init__(self, name: str, symbol: str, arity: int, fn: Callable,
                 commutative: bool = False):
        self.name = name
        self.symbol = symbol
        self.arity = arity
        self.fn = fn
        self.commutative = commutative

    def transform(self, *operands):
        return self.fn(*operands)

    def __repr__(self):
        return self.name


# ---------- float (general) transforms ------------------------------------
def _near_integer(x: float) -> bool:
    return abs(x - round(x)) <= EPSILON

def _fdiv(a, b):
    return a / b if b != 0 else None

def _fmod(a, b):
    return a % b if b != 0 else None

def _fpow(base, power):
    try:
        return math.pow(base, power)
    except (ValueError, OverflowError):   # complex result or overflow
        return None

def _froot4(index, radicand):
    """⁴√radicand, only with an index operand of exactly 4."""
    if index != FOURS or radicand <= 0:
        return None
    return math.sqrt(math.sqrt(radicand))

def _fsqrt(x):
    return math.sqrt(x) if x > 0 else None

def _ffloor(x):
    return None if _near_integer(x) else float(math.floor(x))

def _fceil(x):
    return None if _near_integer(x) else float(math.ceil(x))

def _fabs(x):
    return -x if x < 0 else None

def _ffactorial(x):
    lo, hi = FACTORIAL_DOMAIN
    if not x.is_integer() or not lo < x < hi:
        return None
    product = 1.0
    for i in range(2, int(x) + 1):
        product *= i
        if not math.isfinite(product):
            return None
    return product


FLOAT_ACTIONS: List[Action] = [
    Action('push4',     '4',  0, lambda: float(FOURS)),
    Action('add',       '+',  2, lambda a, b: a + b, commutative=True),
    Action('sub',       '-',  2, lambda a, b: a - b),
    Action('mul',       '*',  2, lambda a, b: a * b, commutative=True),
    Action('div',       '/',  2, _fdiv),
    Action('mod',       '%',  2, _fmod),
    Action('pow',       '^',  2, _fpow),
    Action('root4',     '⁴√', 2, _froot4),
    Action('sqrt',      '√',  1, _fsqrt),
    Action('floor',     '⌊⌋', 1, _ffloor),
    Action('ceil',      '⌈⌉', 1, _fceil),
    Action('abs',       '||', 1, _fabs),
    Action('neg',       '-',  1, lambda x: -x),
    Action('factorial', '!',  1, _ffactorial),
]


# ---------- integer (exact) transforms ------------------------------------
def _idiv(a, b):
    if b == 0 or a % b != 0:
        return None
    return a // b

def _ipow(base, power):
    if power < 0:
        return None
    if abs(base) > 1 and power >= 64:   # |base| >= 2 overflows long before
        return None
    p = base ** power
    return p if INT_MIN <= p <= INT_MAX else None

def _isqrt(n):
    if n <= 1:
        return None
    r = math.isqrt(n)
    return r if r * r == n else None

def _iroot4(n):
    if n <= 1:
        return None
    r = math.isqrt(math.isqrt(n))
    return r if r ** 4 == n else None

def _ifactorial(n):
    lo, hi = FACTORIAL_DOMAIN
    return math.factorial(n) if lo < n < hi else None


INTEGER_ACTIONS: List[Action] = [
    Action('push4',     '4',  0, lambda: FOURS),
    Action('add',       '+',  2, lambda a, b: a + b, commutative=True),
    Action('sub',       '-',  2, lambda a, b: a - b),
    Action('mul',       '*',  2, lambda a, b: a * b, commutative=True),
    Action('div',       '/',  2, _idiv),
    Action('pow',       '^',  2, _ipow),
    Action('sqrt',      '√',  1, _isqrt),
    Action('root4',     '⁴√', 1, _iroot4),
    Action('factorial', '!',  1, _ifactorial),
]

# recursion stops past a non-terminal result at or above this magnitude
INTEGER_MAGNITUDE_LIMIT = 1_000_000


class Catalog:
    """A closed, ordered set of actions plus the limits that go with it."""

    def __init__(self, name: str, actions: List[Action],
                 magnitude_limit: Optional[float] = None):
        self.name = name
        self.actions = list(actions)
        self.magnitude_limit = magnitude_limit
        self.by_name = {a.name: a for a in self.actions}

    def __iter__(self):
        return iter(self.actions)

    def __len__(self):
        return len(self.actions)

    def __getitem__(self, name: str) -> Action:
        return self.by_name[name]


FLOAT_CATALOG = Catalog('float', FLOAT_ACTIONS)
INTEGER_CATALOG = Catalog('integer', INTEGER_ACTIONS, INTEGER_MAGNITUDE_LIMIT)
