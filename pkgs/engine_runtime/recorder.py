"""
Trace recording for engine sessions.

TraceRecorder keeps one row per engine event (instruction run/undo, gate
evaluation) and exports them as CSV or JSONL.
"""
import csv
import json
import os
import logging
from typing import Dict, List, Any
from datetime import datetime, timezone
import numpy as np

logger = logging.getLogger(__name__)


class TraceRecorder:
    """Event trace recorder with CSV and JSONL output."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.rows: List[Dict] = []
        self._metadata = {
            'created_at': datetime.now(timezone.utc).isoformat(),
        }

    def set_metadata(self, **kwargs):
        """Set metadata written as the first JSONL line."""
        self._metadata.update(kwargs)

    def log(self, row: Dict):
        """Log a row; mappings are stored as sorted JSON text."""
        if not self.enabled:
            return

        clean_row = {'timestamp': datetime.now(timezone.utc).isoformat()}
        for k, v in row.items():
            if v is None or isinstance(v, (bool, str)):
                clean_row[k] = v
            elif isinstance(v, (int, float, np.number)):
                clean_row[k] = v.item() if isinstance(v, np.number) else v
            elif isinstance(v, dict):
                clean_row[k] = json.dumps(v, sort_keys=True)
            elif isinstance(v, (list, tuple)):
                clean_row[k] = [str(x) for x in v]
            else:
                clean_row[k] = str(v)

        self.rows.append(clean_row)

    def get_recent(self, n: int = 10) -> List[Dict]:
        return self.rows[-n:] if n > 0 else []

    def dump_csv(self, path: str):
        if not self.enabled or not self.rows:
            return

        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        keys = sorted({k for row in self.rows for k in row})
        with open(path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=keys)
            writer.writeheader()
            for row in self.rows:
                writer.writerow({k: (" ".join(v) if isinstance(v, list) else v)
                                 for k, v in row.items()})
        logger.info(f"Saved {len(self.rows)} rows to CSV: {path}")

    def dump_jsonl(self, path: str):
        if not self.enabled or not self.rows:
            return

        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        with open(path, 'w') as f:
            f.write(json.dumps({'_metadata': self._metadata}) + '\n')
            for row in self.rows:
                f.write(json.dumps(row) + '\n')

        logger.info(f"Saved {len(self.rows)} rows to JSONL: {path}")

    def clear(self):
        self.rows.clear()

    def get_summary(self) -> Dict[str, Any]:
        """Row count, event histogram and stats for numeric columns."""
        if not self.rows:
            return {'row_count': 0}

        events: Dict[str, int] = {}
        numeric_cols: Dict[str, List[float]] = {}
        for row in self.rows:
            event = row.get('event')
            if event is not None:
                events[event] = events.get(event, 0) + 1
            for k, v in row.items():
                if isinstance(v, (int, float)) and not isinstance(v, bool):
                    numeric_cols.setdefault(k, []).append(v)

        summary = {
            'row_count': len(self.rows),
            'first_timestamp': self.rows[0].get('timestamp'),
            'last_timestamp': self.rows[-1].get('timestamp'),
            'events': events,
            'numeric_stats': {},
        }
        for col, values in numeric_cols.items():
            arr = np.asarray(values, dtype=float)
            summary['numeric_stats'][col] = {
                'count': int(arr.size),
                'mean': float(np.mean(arr)),
                'std': float(np.std(arr)),
                'min': float(np.min(arr)),
                'max': float(np.max(arr))
            }

        return summary
