from fourfours.methods.backtrack import solve
from fourfours.methods.parallel import solve_parallel
from fourfours.methods.registry import Registry
from fourfours.tasks import get_catalog

__all__ = ['solve', 'solve_parallel', 'Registry', 'get_catalog']
