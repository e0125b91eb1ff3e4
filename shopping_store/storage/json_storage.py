import json
import logging
import os
import re
import tempfile
from typing import Any, Optional

from shopping_store.errors import PersistenceError
from shopping_store.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStorage(KeyValueStorage):
    """Storage adapter keeping one `<key>.json` file per key inside data_dir.

    Writes are atomic: the JSON text goes to a temporary file in the same
    directory, is flushed and fsynced, then replaces the target with
    os.replace. A missing file loads as None. Parse and OS errors are logged
    and re-raised as PersistenceError.
    """

    def __init__(self, data_dir: str, indent: Optional[int] = None, temp_suffix: str = ".tmp") -> None:
        # No I/O here; the directory is created on first write.
        self.data_dir = data_dir
        self.indent = indent
        self.temp_suffix = temp_suffix

    def path_for(self, key: str) -> str:
        if not isinstance(key, str) or not _KEY_RE.match(key):
            raise PersistenceError(f"Invalid storage key: {key!r}", key=key if isinstance(key, str) else None)
        return os.path.join(self.data_dir, f"{key}.json")

    def load(self, key: str) -> Optional[Any]:
        file_path = self.path_for(key)
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            # Missing file is the normal first-run state
            logger.debug("json_storage.load: %s not found, returning None", file_path)
            return None
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError
            logger.error("json_storage.load: undecodable data in %s: %s", file_path, exc)
            raise PersistenceError(f"Invalid JSON in {file_path}: {exc}", key=key) from exc
        except OSError as exc:
            logger.error("json_storage.load: cannot read %s: %s", file_path, exc)
            raise PersistenceError(f"Cannot read {file_path}: {exc}", key=key) from exc

    def save(self, key: str, value: Any) -> None:
        file_path = self.path_for(key)

        try:
            json_text = json.dumps(value, ensure_ascii=False, indent=self.indent)
        except (TypeError, ValueError) as exc:
            logger.error("json_storage.save: value for %s is not serializable: %s", key, exc)
            raise PersistenceError(f"Cannot serialize value for key '{key}': {exc}", key=key) from exc

        tmp_file_path = None
        try:
            os.makedirs(self.data_dir, exist_ok=True)

            with tempfile.NamedTemporaryFile(
                mode="wb",
                delete=False,
                dir=self.data_dir,
                prefix=f"{key}-",
                suffix=self.temp_suffix,
            ) as tmpf:
                tmp_file_path = tmpf.name
                tmpf.write(json_text.encode("utf-8"))
                tmpf.flush()
                try:
                    os.fsync(tmpf.fileno())
                except OSError:
                    logger.debug("json_storage.save: fsync not supported for %s", tmp_file_path)

            os.replace(tmp_file_path, file_path)
            tmp_file_path = None  # ownership transferred to file_path
            logger.debug("json_storage.save: wrote %s", file_path)

        except OSError as exc:
            if tmp_file_path and os.path.exists(tmp_file_path):
                try:
                    os.remove(tmp_file_path)
                except OSError:
                    logger.exception("json_storage.save: failed to remove temporary file %s", tmp_file_path)
            logger.error("json_storage.save: error writing %s: %s", file_path, exc)
            raise PersistenceError(f"Cannot write {file_path}: {exc}", key=key) from exc
