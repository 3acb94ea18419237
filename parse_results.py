import os
import sys

import numpy as np
import pandas as pd


def load_results(log_file) -> pd.DataFrame:
    return pd.read_json(log_file, orient='records')


def summarize(results: pd.DataFrame) -> dict:
    solved = results[results['expression'].notna()]
    lengths = solved['path_length'].to_numpy(dtype=float)
    return {
        'total': len(results),
        'solved': len(solved),
        'ratio': len(solved) / len(results) if len(results) else 0.0,
        'mean_path_length': float(np.mean(lengths)) if len(lengths) else None,
        'p90_path_length': float(np.percentile(lengths, 90)) if len(lengths) else None,
        'unresolved': results.loc[results['expression'].isna(), 'target'].tolist(),
    }


def parse_results(log_file):
    if not os.path.exists(log_file):
        print(f"Log file {log_file} does not exist.")
        return None

    summary = summarize(load_results(log_file))

    print(f"Total targets: {summary['total']}")
    print(f"Solved: {summary['solved']} ({summary['ratio']:.2%})")
    if summary['mean_path_length'] is not None:
        print(f"Mean path length: {summary['mean_path_length']:.2f}")
        print(f"90th percentile path length: {summary['p90_path_length']:.1f}")
    print(f"Unresolved: {summary['unresolved']}")
    return summary


if __name__ == "__main__":
    log_file = sys.argv[1] if len(sys.argv) > 1 else 'logs/fourfours/float_depth11_max100.json'
    parse_results(log_file)
