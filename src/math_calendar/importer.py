"""Custom content packs from JSON or YAML files."""
import json
import logging
import sqlite3
from pathlib import Path

import yaml

from math_calendar.content import ContentStore, store_from_payload
from math_calendar.errors import ValidationError
from math_calendar.progress import get_setting, set_setting

logger = logging.getLogger(__name__)

CONTENT_PACK_KEY = "contentPack"
SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml")


def read_content_file(file_path: str) -> dict:
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
    elif suffix in (".yaml", ".yml"):
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    else:
        raise ValidationError(f"unsupported content file type: {suffix or path.name}")
    if not isinstance(data, dict):
        raise ValidationError(f"{path.name} must hold a mapping with months and/or data")
    return data


def import_content(file_path: str, base: ContentStore) -> ContentStore:
    """Merge a content pack over ``base``. Days of months the pack lists replace the base days."""
    try:
        data = read_content_file(file_path)
    except ValidationError:
        raise
    except (ValueError, yaml.YAMLError) as e:
        raise ValidationError(f"could not parse {Path(file_path).name}: {e}") from e
    return store_from_payload(data, base)


def import_file(db_path: str, file_path: str, base: ContentStore) -> dict:
    """Import a pack and remember it so the next start loads it again."""
    store = import_content(file_path, base)
    resolved = str(Path(file_path).resolve())
    set_setting(db_path, CONTENT_PACK_KEY, resolved)
    logger.info("Imported content pack %s", resolved)
    return {
        "filename": Path(file_path).name,
        "months": len(store.months),
        "questions": store.total_count(),
        "store": store,
    }


def load_saved_pack(db_path: str, base: ContentStore) -> ContentStore:
    """Re-apply the last imported pack; a missing or broken pack leaves ``base`` in place."""
    try:
        file_path = get_setting(db_path, CONTENT_PACK_KEY)
    except sqlite3.Error as e:
        logger.warning("Could not read saved content pack: %s", e)
        return base
    if not file_path:
        return base
    if not Path(file_path).exists():
        logger.warning("Saved content pack %s is gone", file_path)
        return base
    try:
        return import_content(file_path, base)
    except ValidationError as e:
        logger.warning("Saved content pack %s is invalid: %s", file_path, e)
        return base
