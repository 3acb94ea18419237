from typing import Iterable, List

import sympy

from fourfours.tasks.actions import FOURS, Action

# ------------------------------------------------------------------
# Expression trees rebuilt from a search path, and their rendering
# ------------------------------------------------------------------

PRECEDENCE = {
    'add': 1, 'sub': 1,
    'mul': 2, 'div': 2, 'mod': 2,
    'neg': 3,
    'pow': 4,
    'sqrt': 5, 'root4': 5, 'factorial': 5,
}
BRACKETS = {                      # self-delimiting constructs
    'floor': ('⌊', '⌋'),
    'ceil':  ('⌈', '⌉'),
    'abs':   ('|', '|'),
}
RADICALS = {'sqrt': '√', 'root4': '⁴√'}


class ExpressionError(ValueError):
    pass


class Node:
    def __init__(self, action: Action, children=()):
        self.action = action
        self.children = tuple(children)

    @property
    def op(self) -> str:
        return self.action.name

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def key(self):
        """Hashable structural key; equal trees give equal keys."""
        if self.is_leaf:
            return (self.op,)
        return (self.op, tuple(child.key() for child in self.children))

    def to_sympy(self):
        return _to_sympy(self)

    def __eq__(self, other):
        return isinstance(other, Node) and self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def __str__(self):
        return render(self)

    def __repr__(self):
        return f'Node({self.key()!r})'


def build_tree(actions: Iterable[Action]) -> Node:
    """
    Replay a linear action history on a stack of partial nodes.

    Binary actions pop the right operand first, matching the stack machine.
    """
    stack: List[Node] = []
    for action in actions:
        n = action.arity
        if len(stack) < n:
            raise ExpressionError(f'{action.name} needs {n} operand(s), '
                                  f'only {len(stack)} on the stack')
        children = stack[len(stack) - n:]
        del stack[len(stack) - n:]
        stack.append(Node(action, children))
    if len(stack) != 1:
        raise ExpressionError(f'unbalanced history leaves {len(stack)} nodes')
    return stack[0]


# ---------- rendering ------------------------------------------------------
def _atomic(node: Node) -> bool:
    return node.is_leaf or node.op in BRACKETS

def _needs_parens(parent: Node, child: Node, side: str) -> bool:
    if _atomic(child):
        return False

    if len(parent.children) == 1:
        if parent.op == 'neg':
            return PRECEDENCE[child.op] <= PRECEDENCE['neg']
        return True                 # factorial and radicals bracket everything else

    if parent.op == 'root4':        # radicand of the binary fourth root
        return True
    if child.op == 'neg':
        return side == 'right' or parent.op == 'pow'
    if parent.op == 'pow' and side == 'left' and child.op in RADICALS:
        return True

    cp, pp = PRECEDENCE[child.op], PRECEDENCE[parent.op]
    if cp != pp:
        return cp < pp
    if side == 'left':
        return parent.op == 'pow'
    return not (parent.action.commutative and child.op == parent.op)

def _wrap(parent: Node, child: Node, side: str) -> str:
    text = render(child)
    return f'({text})' if _needs_parens(parent, child, side) else text

def render(node: Node) -> str:
    """Render with the fewest parentheses the precedence rules allow."""
    op = node.op
    if node.is_leaf:
        return str(FOURS)

    if op in BRACKETS:
        left, right = BRACKETS[op]
        return f'{left}{render(node.children[0])}{right}'

    if op == 'root4' and len(node.children) == 2:
        index, radicand = node.children
        prefix = '⁴√' if index.is_leaf else f'({render(index)})√'
        return prefix + _wrap(node, radicand, 'right')

    if op in RADICALS:
        return RADICALS[op] + _wrap(node, node.children[0], 'right')
    if op == 'neg':
        return '-' + _wrap(node, node.children[0], 'right')
    if op == 'factorial':
        return _wrap(node, node.children[0], 'left') + '!'

    left, right = node.children
    return _wrap(node, left, 'left') + node.action.symbol + _wrap(node, right, 'right')


# ---------- symbolic form --------------------------------------------------
SYMPY_UNARY = {
    'sqrt': sympy.sqrt,
    'root4': lambda x: sympy.root(x, FOURS),
    'floor': sympy.floor,
    'ceil': sympy.ceiling,
    'abs': sympy.Abs,
    'neg': lambda x: -x,
    'factorial': sympy.factorial,
}
SYMPY_BINARY = {
    'add': lambda a, b: a + b,
    'sub': lambda a, b: a - b,
    'mul': lambda a, b: a * b,
    'div': lambda a, b: a / b,
    'mod': sympy.Mod,
    'pow': lambda a, b: a ** b,
    'root4': lambda index, radicand: sympy.root(radicand, index),
}

def _to_sympy(node: Node):
    if node.is_leaf:
        return sympy.Integer(FOURS)
    args = [_to_sympy(child) for child in node.children]
    table = SYMPY_UNARY if len(args) == 1 else SYMPY_BINARY
    return table[node.op](*args)
