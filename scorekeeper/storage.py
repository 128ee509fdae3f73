import json
import logging
from pathlib import Path

from scorekeeper.config import MATCHES_DIR, SCHEMA_VERSION
from scorekeeper.exceptions import MatchRecordError
from scorekeeper.models import MatchRecord

logger = logging.getLogger(__name__)


def match_path(match_id: str, directory: Path = MATCHES_DIR) -> Path:
    return directory / f"{match_id}.json"


def load_match(path: Path) -> MatchRecord:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise MatchRecordError(f"Match file must hold an object: {path}")

    version = data.get("schema_version", SCHEMA_VERSION)
    if not isinstance(version, int) or version > SCHEMA_VERSION:
        raise MatchRecordError(f"Unsupported schema_version {version} in {path}")

    record = MatchRecord.from_dict(data)
    logger.debug("Loaded match %s from %s", record.id, path)
    return record


def save_match(path: Path, record: MatchRecord):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(record.to_dict(), f, indent=4, ensure_ascii=False)

    logger.debug("Saved match %s to %s", record.id, path)
