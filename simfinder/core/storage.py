"""
Run input loading and directory-backed result storage.

RunStorage keeps two kinds of records side by side in one folder:
- a dataset: one JSON object per line in dataset.jsonl (per-pair matches)
- a key-value store: one <key>.json file per key (group and stats summaries)
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger

from .config import Configuration, ContentItem, parse_content_items
from .errors import InputError


DATASET_FILENAME = 'dataset.jsonl'


def load_run_input(path: Union[str, Path]) -> Tuple[Configuration, List[ContentItem]]:
    """
    Read a run input document.

    The document is a JSON object with a 'content' list of {id, text}
    records plus optional configuration keys (similarityThreshold,
    algorithms, caseSensitive, ignoreWhitespace, minLength,
    groupByDuplicate).

    Raises:
        InputError: if the file is missing or not a JSON object
        ConfigurationError: if the content list is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise InputError(f"Input file does not exist: {path}")

    try:
        with path.open('r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InputError(f"Input file is not valid JSON: {path} ({e})") from e

    if not isinstance(data, dict):
        raise InputError(f"Input file must contain a JSON object: {path}")

    config = Configuration.from_dict(data)
    items = parse_content_items(data.get('content'))
    logger.debug("Loaded {} items from {}", len(items), path)
    return config, items


class RunStorage:
    """
    Folder that stores the results of one run.

    Example usage:
        with RunStorage('./storage') as storage:
            storage.push_data({'item1': '1', 'item2': '2'})
            storage.set_value('similarity_stats', {'totalMatches': 1})
    """

    def __init__(self, storage_dir: Union[str, Path], clear: bool = True):
        """
        Initialize the storage folder.

        Args:
            storage_dir: Folder to write into (created if missing)
            clear: If True, truncate any dataset left by a previous run
        """
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self.dataset_path = self.storage_dir / DATASET_FILENAME
        self._dataset = None
        self._open_dataset('w' if clear else 'a')

    def _open_dataset(self, mode: str):
        self._dataset = self.dataset_path.open(mode, encoding='utf-8')

    def close(self):
        """Close the dataset file."""
        if self._dataset:
            self._dataset.close()
            self._dataset = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # ----------------------------------------------------------------
    # Dataset
    # ----------------------------------------------------------------

    def push_data(self, record: Dict[str, Any]) -> None:
        """Append one record to the dataset."""
        if self._dataset is None:
            self._open_dataset('a')
        self._dataset.write(json.dumps(record, ensure_ascii=False) + '\n')
        self._dataset.flush()

    def read_dataset(self) -> List[Dict[str, Any]]:
        """Return every record pushed to the dataset so far."""
        if not self.dataset_path.exists():
            return []
        with self.dataset_path.open('r', encoding='utf-8') as f:
            return [json.loads(line) for line in f if line.strip()]

    # ----------------------------------------------------------------
    # Key-value store
    # ----------------------------------------------------------------

    def _value_path(self, key: str) -> Path:
        return self.storage_dir / f"{key}.json"

    def set_value(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key, replacing any previous one."""
        with self._value_path(key).open('w', encoding='utf-8') as f:
            json.dump(value, f, indent=2, ensure_ascii=False)
            f.write('\n')

    def get_value(self, key: str, default: Optional[Any] = None) -> Any:
        """Return the value stored under key, or default."""
        path = self._value_path(key)
        if not path.exists():
            return default
        with path.open('r', encoding='utf-8') as f:
            return json.load(f)
