import asyncio
import logging
import time

from fourfours.methods.backtrack import MAX_DEPTH, Explorer
from fourfours.methods.registry import MAX_TARGET, Registry
from fourfours.tasks.actions import FLOAT_CATALOG, Catalog

logger = logging.getLogger(__name__)

SPLIT_DEPTH = 3


# ---------- async driver ---------- #
async def explore_async(registry: Registry, catalog: Catalog = FLOAT_CATALOG,
                        max_depth: int = MAX_DEPTH, split_depth: int = SPLIT_DEPTH,
                        concurrency: int = 4) -> int:
    """
    Split the search at `split_depth` and explore each prefix in a thread.

    All workers share `registry`; each one owns its copy of the path.
    Returns the number of nodes visited.
    """
    split_depth = max(1, min(split_depth, max_depth - 1))
    splitter = Explorer(registry, catalog, max_depth)
    prefixes = splitter.prefixes(split_depth)
    logger.info('split into %d prefixes of %d steps, up to %d workers',
                len(prefixes), split_depth, concurrency)

    semaphore = asyncio.Semaphore(concurrency)

    async def run_one(prefix):
        """Explores ONE prefix subtree in a worker thread."""
        async with semaphore:
            worker = Explorer(registry, catalog, max_depth)
            await asyncio.to_thread(worker.explore, list(prefix))
            return worker.nodes

    counts = await asyncio.gather(*(run_one(p) for p in prefixes))
    return splitter.nodes + sum(counts)


def solve_parallel(max_target: int = MAX_TARGET, max_depth: int = MAX_DEPTH,
                   catalog: Catalog = FLOAT_CATALOG, split_depth: int = SPLIT_DEPTH,
                   concurrency: int = 4) -> Registry:
    registry = Registry(max_target)
    start_time = time.time()
    nodes = asyncio.run(explore_async(registry, catalog, max_depth,
                                      split_depth, concurrency))
    logger.info('visited %d nodes, %d updates in %.2fs',
                nodes, registry.updates, time.time() - start_time)
    return registry
