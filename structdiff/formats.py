"""
structdiff.formats — Load documents to compare.

Supported inputs:
    • JSON text / ``.json`` files               (json)
    • TOML ``.toml`` files                      (tomllib)
    • Python literals, any other suffix         (ast.literal_eval)

Everything comes back as plain Python objects (dict, list, str, int,
float, bool, None, tuple, set…) ready for ``structdiff.diff``.
"""

import ast
import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Union

from .errors import LoadError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  TEXT → PYTHON OBJECTS
# ═══════════════════════════════════════════════════════════════════

def from_json(text: str) -> Any:
    """Parse a JSON string."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise LoadError(f"invalid JSON: {exc}") from exc


def from_toml(text: str) -> dict[str, Any]:
    """Parse a TOML document."""
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise LoadError(f"invalid TOML: {exc}") from exc


def from_literal(text: str) -> Any:
    """
    Parse a Python literal: numbers, strings, bytes, tuples, lists,
    dicts, sets, booleans and None.  Nothing is executed.
    """
    try:
        return ast.literal_eval(text.strip())
    except (ValueError, SyntaxError, MemoryError, RecursionError) as exc:
        raise LoadError(f"invalid Python literal: {exc}") from exc


_PARSERS = {
    ".json": from_json,
    ".toml": from_toml,
}


# ═══════════════════════════════════════════════════════════════════
#  FILES
# ═══════════════════════════════════════════════════════════════════

def load_document(path: Union[str, Path]) -> Any:
    """
    Read and parse the file at ``path``, choosing the parser by suffix.

    Unreadable files and parse failures both raise LoadError naming the
    path.
    """
    path = Path(path)
    parser = _PARSERS.get(path.suffix.lower(), from_literal)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LoadError(f"{path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise LoadError(f"{path}: not UTF-8 text") from exc

    logger.debug("loading %s with %s", path, parser.__name__)
    try:
        return parser(text)
    except LoadError as exc:
        raise LoadError(f"{path}: {exc}") from exc
