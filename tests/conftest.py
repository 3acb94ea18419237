import pytest

from fourfours.methods.backtrack import solve
from fourfours.tasks.actions import FLOAT_CATALOG, INTEGER_CATALOG


@pytest.fixture(scope='session')
def float_registry():
    return solve(max_target=100, max_depth=8, catalog=FLOAT_CATALOG)


@pytest.fixture(scope='session')
def integer_registry():
    return solve(max_target=100, max_depth=8, catalog=INTEGER_CATALOG)
