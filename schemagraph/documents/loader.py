"""Schema document loader utilities."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

import yaml

from schemagraph.core.exceptions import DocumentLoadError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def load_schema_document(path: Union[str, Path]) -> Any:
    """
    Load a schema document from a JSON or YAML file.

    Args:
        path: Path to the schema file

    Returns:
        The parsed document

    Raises:
        DocumentLoadError: If the file is missing or cannot be parsed
    """
    path = Path(path)

    if not path.exists():
        raise DocumentLoadError(f"Schema file not found: {path}", path=str(path))

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                document = yaml.safe_load(f)
            else:
                document = json.load(f)
    except yaml.YAMLError as e:
        raise DocumentLoadError(f"Invalid YAML in schema file: {e}", path=str(path))
    except json.JSONDecodeError as e:
        raise DocumentLoadError(f"Invalid JSON in schema file: {e}", path=str(path))
    except OSError as e:
        raise DocumentLoadError(f"Failed to read schema file: {e}", path=str(path))

    logger.info(f"Loaded schema document from {path}")
    return document


def document_base_uri(path: Union[str, Path]) -> str:
    """File URI of a document, used as its base URI."""
    return Path(path).resolve().as_uri()


def save_schema_document(document: Any, path: Union[str, Path]) -> None:
    """
    Save a schema document as JSON.

    Args:
        document: Schema document
        path: Path to save the JSON file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2, ensure_ascii=False)
        f.write("\n")

    logger.info(f"Saved schema document to {path}")
