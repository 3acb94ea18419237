import math
import threading

import pandas as pd
import pytest

from fourfours.methods.registry import Registry, Slot, verify_slot
from fourfours.tasks.actions import FLOAT_CATALOG
from fourfours.tasks.expression import build_tree

import parse_results


def acts(*names):
    return [FLOAT_CATALOG[name] for name in names]


FOUR_SUM = acts('push4', 'push4', 'push4', 'push4', 'add', 'add', 'add')         # 4+4+4+4
SQUARE_PLUS = acts('push4', 'push4', 'mul', 'push4', 'add', 'push4', 'sub')      # 4*4+4-4
SQUARE_PAREN = acts('push4', 'push4', 'mul', 'push4', 'push4', 'sub', 'add')     # 4*4+(4-4)
LONG_SIXTEEN = acts('push4', 'push4', 'add', 'push4', 'push4', 'sqrt', 'div', 'mul')


@pytest.mark.parametrize('value,expected', [
    (3.0, 3),
    (3, 3),
    (3.00000001, 3),
    (2.99999999, 3),
    (0.0, 0),
    (-0.0, 0),
    (3.1, None),
    (3.000001, None),
    (-1.0, None),
    (101.0, None),
    (100.0, 100),
    (math.inf, None),
    (math.nan, None),
])
def test_index_for(value, expected):
    assert Registry(100).index_for(value) == expected


def test_first_candidate_fills_slot():
    registry = Registry(100)
    assert registry.submit(16.0, FOUR_SUM)
    slot = registry[16]
    assert slot.expression == '4+4+4+4'
    assert slot.path_length == 7
    assert slot.rendered_length == 7
    assert slot.actions == ['push4'] * 4 + ['add'] * 3
    assert registry.found == 1
    assert registry.solved() == [16]


def test_rejects_values_off_the_table():
    registry = Registry(10)
    assert not registry.submit(2.5, FOUR_SUM)
    assert not registry.submit(16.0, FOUR_SUM)
    assert registry.solved() == []


def test_shorter_path_wins():
    registry = Registry(100)
    assert registry.submit(16.0, LONG_SIXTEEN)
    assert registry.submit(16.0, FOUR_SUM)
    assert registry[16].expression == '4+4+4+4'
    assert not registry.submit(16.0, LONG_SIXTEEN)
    assert registry[16].path_length == 7
    assert registry.found == 1
    assert registry.updates == 2


def test_shorter_rendering_breaks_equal_paths():
    registry = Registry(100)
    assert registry.submit(16.0, SQUARE_PAREN)
    assert registry[16].expression == '4*4+(4-4)'
    assert registry.submit(16.0, FOUR_SUM)
    assert registry[16].expression == '4+4+4+4'
    assert not registry.submit(16.0, SQUARE_PAREN)


def test_first_found_wins_exact_ties():
    registry = Registry(100)
    assert registry.submit(16.0, FOUR_SUM)
    assert not registry.submit(16.0, SQUARE_PLUS)
    assert registry[16].expression == '4+4+4+4'

    registry = Registry(100)
    assert registry.submit(16.0, SQUARE_PLUS)
    assert not registry.submit(16.0, FOUR_SUM)
    assert registry[16].expression == '4*4+4-4'


def test_concurrent_submissions_keep_the_best():
    registry = Registry(100)
    candidates = [LONG_SIXTEEN, SQUARE_PAREN, FOUR_SUM] * 20

    def worker(chunk):
        for actions in chunk:
            registry.submit(16.0, actions)

    threads = [threading.Thread(target=worker, args=(candidates[i::4],)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert registry[16].expression == '4+4+4+4'
    assert registry.found == 1


def test_progress_is_logged(caplog):
    registry = Registry(100)
    with caplog.at_level('INFO', logger='fourfours.methods.registry'):
        registry.submit(16.0, FOUR_SUM)
    assert '4+4+4+4' in caplog.text
    assert '(1/101)' in caplog.text


def test_records_and_frame():
    registry = Registry(3)
    registry.submit(0.0, acts('push4', 'push4', 'sub', 'push4', 'add', 'push4', 'sub'))
    records = registry.to_records()
    assert [r['target'] for r in records] == [0, 1, 2, 3]
    assert records[0]['expression'] == '4-4+4-4'
    assert records[1]['expression'] is None

    frame = registry.to_frame()
    assert isinstance(frame, pd.DataFrame)
    assert list(frame.columns) == ['target', 'expression', 'path_length',
                                   'rendered_length', 'actions', 'value']
    assert frame['expression'].notna().sum() == 1


def test_dump_and_parse(tmp_path):
    registry = Registry(20)
    registry.submit(16.0, FOUR_SUM)
    registry.submit(0.0, acts('push4', 'push4', 'sub', 'push4', 'add', 'push4', 'sub'))
    file = tmp_path / 'logs' / 'run.json'
    registry.dump(str(file))
    assert file.exists()

    summary = parse_results.summarize(parse_results.load_results(str(file)))
    assert summary['total'] == 21
    assert summary['solved'] == 2
    assert summary['mean_path_length'] == pytest.approx(7.0)
    assert 16 not in summary['unresolved']
    assert 5 in summary['unresolved']


def test_parse_missing_file(tmp_path, capsys):
    assert parse_results.parse_results(str(tmp_path / 'nope.json')) is None
    assert 'does not exist' in capsys.readouterr().out


def test_verify_slot():
    registry = Registry(100)
    registry.submit(16.0, LONG_SIXTEEN)
    assert verify_slot(registry[16], 16)
    assert not verify_slot(registry[16], 15)

    tree = build_tree(FOUR_SUM)
    assert not verify_slot(Slot(7, '4+4+4+4', [], 9.0, tree), 9)
