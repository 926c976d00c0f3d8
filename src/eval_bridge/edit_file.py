from __future__ import annotations

from pathlib import Path
from typing import Any

from .logging_config import get_logger

logger = get_logger(__name__)

NO_MATCH_WARNING = "No matches found for the string to replace"


def edit_file(path: str, old_str: str, new_str: str, replace_all: bool = False) -> dict[str, Any]:
    """Replace literal text in a file, creating the file when it is absent.

    Only the first occurrence is replaced unless `replace_all` is set. With no
    match the file is left untouched and a warning is returned.

    Example:
        ```python
        edit_file("notes.txt", "draft", "final", replace_all=True)
        # {"success": True, "matches": 2, "replaced": 2}
        ```
    """
    if not old_str:
        return {"error": "'old_str' must not be empty"}
    if old_str == new_str:
        return {"error": "'old_str' and 'new_str' must be different"}

    logger.info("edit_file.start", path=path)
    target = Path(path).expanduser().absolute()
    try:
        if target.exists():
            content = target.read_text(encoding="utf-8")
        else:
            logger.debug("edit_file.create", path=str(target))
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("", encoding="utf-8")
            content = ""

        matches = content.count(old_str)
        logger.debug("edit_file.matches", matches=matches)
        if matches == 0:
            logger.warning("edit_file.no_match", path=str(target))
            return {"success": False, "warning": NO_MATCH_WARNING}

        if replace_all:
            updated = content.replace(old_str, new_str)
            replaced = matches
        else:
            if matches > 1:
                logger.warning("edit_file.multiple_matches", matches=matches)
            updated = content.replace(old_str, new_str, 1)
            replaced = 1

        target.write_text(updated, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("edit_file.failed", path=path, error=str(exc))
        return {"error": str(exc)}

    logger.info("edit_file.done", path=str(target), replaced=replaced)
    return {"success": True, "matches": matches, "replaced": replaced}
