from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'nodes': 0,
        'leaves': 0,
        'rooms': 0,
        'rooms_skipped': 0,
        'paths': 0,
        'splits_performed': 0,
        'splits_rejected': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
