"""Conversion of analysis service documents into TreeNode trees."""

import json
import logging
from pathlib import Path
from typing import Any

from pyktree.errors import ValidationError
from pyktree.model.node import Principle, PrincipleCategory, TreeNode

logger = logging.getLogger(__name__)


def principle_from_dict(data: dict[str, Any]) -> Principle:
    """Build a Principle from its service representation.

    Raises:
        ValidationError: If the confidence is not a number
    """
    raw_confidence = data.get("confidence", 0.0)
    try:
        confidence = float(raw_confidence)
    except (TypeError, ValueError) as e:
        raise ValidationError("confidence", raw_confidence, "number") from e

    return Principle(
        id=str(data.get("id", "")),
        title=str(data.get("title", "")),
        description=str(data.get("description", "")),
        category=PrincipleCategory.parse(data.get("category")),
        confidence=confidence,
        source_url=str(data.get("source_url", "")),
        related_terms=tuple(data.get("related_terms") or ()),
    )


def _principles_from_list(raw: Any, term: str) -> tuple[Principle, ...]:
    """Convert a node's principles, skipping any that are malformed."""
    if not isinstance(raw, list):
        if raw:
            logger.warning(f"Ignoring principles of '{term}': expected a list, got {type(raw).__name__}")
        return ()

    principles = []
    for item in raw:
        if not isinstance(item, dict):
            logger.warning(f"Skipping principle of '{term}': expected an object, got {type(item).__name__}")
            continue
        try:
            principles.append(principle_from_dict(item))
        except ValidationError as e:
            logger.warning(f"Skipping principle of '{term}': {e}")
    return tuple(principles)


def _processing_time(data: dict[str, Any]) -> int:
    raw = data.get("processing_time_ms", data.get("processingTime", 0))
    try:
        return int(raw or 0)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring processing time {raw!r}")
        return 0


def from_analysis_node(data: dict[str, Any], depth: int = 0) -> TreeNode:
    """Transform an analysis node into a TreeNode.

    The service sends children as a mapping of term to node; insertion
    order of that mapping becomes sibling order. A missing ``depth`` is
    filled in from the position in the document, a present one is kept
    as-is so that inconsistencies surface during layout. Children and
    principles that are not objects are logged and skipped.

    Args:
        data: Analysis node dictionary
        depth: Depth implied by the position in the document

    Returns:
        Immutable TreeNode
    """
    name = data.get("term", data.get("name", ""))
    name = name if isinstance(name, str) else ""

    raw_children = data.get("children") or {}
    if isinstance(raw_children, dict):
        raw_children = list(raw_children.values())
    elif not isinstance(raw_children, list):
        logger.warning(f"Ignoring children of '{name}': expected a mapping, got {type(raw_children).__name__}")
        raw_children = []

    children = []
    for child in raw_children:
        if not isinstance(child, dict):
            logger.warning(f"Skipping child of '{name}': expected an object, got {type(child).__name__}")
            continue
        children.append(from_analysis_node(child, depth + 1))

    return TreeNode(
        name=name,
        principles=_principles_from_list(data.get("principles"), name),
        children=tuple(children) or None,
        depth=data.get("depth", depth),
        processing_time=_processing_time(data),
    )


def tree_from_document(document: dict[str, Any]) -> TreeNode:
    """Extract the tree from an analysis document.

    Accepts a bare analysis node, an analysis result (``{"tree": ...}``)
    or an API envelope (``{"success": ..., "data": ...}``) around either.

    Raises:
        ValidationError: If the document holds no tree
    """
    if not isinstance(document, dict):
        raise ValidationError("document", document, "JSON object")

    if "success" in document and "data" in document:
        if not document["success"]:
            raise ValidationError("success", document.get("error"), "successful analysis response")
        document = document["data"]
        if not isinstance(document, dict):
            raise ValidationError("data", document, "JSON object")

    if "tree" in document:
        document = document["tree"]
        if not isinstance(document, dict):
            raise ValidationError("tree", document, "JSON object")

    if "term" not in document and "name" not in document:
        raise ValidationError("tree", document, "analysis node with a 'term'")

    return from_analysis_node(document)


def load_tree(path: Path | str) -> TreeNode:
    """Load a tree from an analysis JSON file.

    Args:
        path: Path to the JSON document

    Returns:
        Root TreeNode

    Raises:
        ValidationError: If the file is not a valid analysis document
    """
    path = Path(path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError("path", str(path), f"readable analysis JSON: {e}") from e

    tree = tree_from_document(document)
    logger.info(f"Loaded tree '{tree.name}' from {path}")
    return tree
