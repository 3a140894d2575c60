"""
Common utilities for TomTom Places client.
"""

import dataclasses
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def jsonDumps(data: Any, compact: Optional[bool] = None, **kwargs) -> str:
    """Dump data to JSON, dataclasses are converted to dicts, dood!

    Args:
        data: Data to dump
        compact: Use compact separators (default: compact unless indent is passed)
        **kwargs: Passed to json.dumps

    Returns:
        JSON string
    """
    dumpKwargs: Dict[str, Any] = {
        "ensure_ascii": False,
        "default": toJsonable,
        "sort_keys": True,
    }

    if compact is None:
        # If indent is passed, then user want pretty-printed JSON,
        #  no need to use compact separators
        compact = "indent" not in kwargs

    if compact:
        dumpKwargs["separators"] = (",", ":")
    dumpKwargs.update(kwargs)
    return json.dumps(data, **dumpKwargs)


def toJsonable(obj: Any) -> Any:
    """json.dumps default hook: dataclass instances become dicts, anything else its str()"""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    return str(obj)


def load_dotenv(path: str = ".env", populateEnv: bool = True) -> Dict[str, str]:
    """
    Simple dotenv file loader.
    Just read file line by line and put key-value pairs into dictionary.

    Empty lines and comments are skipped, a missing file is not an error.
    Variables already set in the environment are never overridden.

    Args:
        path: Path to .env file (default ".env")
        populateEnv: Whether to populate environment variables (default True)

    Returns:
        Dictionary of key-value pairs from .env file
    """
    ret: Dict[str, str] = {}
    envFile = Path(path)
    if not envFile.is_file():
        logger.debug(f"No dotenv file at {path}, skipping")
        return ret

    with open(envFile, "rt", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition("=")
            if not sep:
                continue
            if key.startswith("export "):
                key = key[len("export ") :]
            ret[key.strip()] = value.strip().strip('"').strip("'")

    if populateEnv:
        for k, v in ret.items():
            os.environ.setdefault(k, v)
    logger.debug(f"Loaded {len(ret)} variables from {path}")
    return ret
