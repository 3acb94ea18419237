#!/usr/bin/env python3
"""
Four-fours solver: for every target in [0, N] find the shortest expression
built from exactly four 4s.

Usage examples
--------------
$ python run_fourfours.py                        # full search, 0..100
$ python run_fourfours.py --exact --max-depth 9  # integer-only catalog
$ python run_fourfours.py --concurrency 4 --verify
"""
import argparse
import logging
import time

from fourfours.methods.backtrack import MAX_DEPTH, solve
from fourfours.methods.parallel import SPLIT_DEPTH, solve_parallel
from fourfours.methods.registry import MAX_TARGET, Registry, verify_slot
from fourfours.tasks import get_catalog


def report(registry: Registry):
    for target in registry.targets():
        slot = registry[target]
        print(f"{target} = {slot.expression if slot else 'not found'}")
    solved = len(registry.solved())
    print(f"Found {solved} of [{registry.min_target},{registry.max_target}]")


def run(args):
    catalog = get_catalog('integer' if args.exact else 'float')

    if args.concurrency > 1:
        registry = solve_parallel(args.max_target, args.max_depth, catalog,
                                  split_depth=args.split_depth,
                                  concurrency=args.concurrency)
    else:
        registry = solve(args.max_target, args.max_depth, catalog)

    report(registry)

    if args.verify:
        bad = [t for t in registry.solved() if not verify_slot(registry[t], t)]
        print(f"Verified {len(registry.solved()) - len(bad)} expressions symbolically"
              + (f", mismatches at {bad}" if bad else ""))

    file = args.log_file or \
        f'./logs/fourfours/{catalog.name}_depth{args.max_depth}_max{args.max_target}.json'
    registry.dump(file)
    return registry


def parse_args(argv=None):
    args = argparse.ArgumentParser(description="Four-fours exhaustive solver.")
    args.add_argument('--max-target', type=int, default=MAX_TARGET)
    args.add_argument('--max-depth', type=int, default=MAX_DEPTH)
    args.add_argument('--exact', action='store_true',
                      help='integer-only catalog (exact division, perfect roots)')
    args.add_argument('--concurrency', type=int, default=1,
                      help='how many prefix subtrees to explore simultaneously')
    args.add_argument('--split-depth', type=int, default=SPLIT_DEPTH)
    args.add_argument('--log-file', type=str, default=None)
    args.add_argument('--verify', action='store_true',
                      help='re-check every expression with sympy')
    args.add_argument('--quiet', action='store_true')
    return args.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()
    logging.basicConfig(level=logging.WARNING if args.quiet else logging.INFO,
                        format='%(asctime)s %(name)s %(levelname)s %(message)s')
    start_time = time.time()
    run(args)
    print(f'spent {time.time() - start_time:.2f}s')
