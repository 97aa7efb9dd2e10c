"""Tree node classes representing an analysed concept hierarchy."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Self

from pyktree.errors import MalformedNode


class PrincipleCategory(Enum):
    """Category of an engineering principle."""

    STRUCTURAL = "Structural"
    MECHANICAL = "Mechanical"
    ELECTRICAL = "Electrical"
    THERMAL = "Thermal"
    CHEMICAL = "Chemical"
    MATERIAL = "Material"
    SYSTEM = "System"
    PROCESS = "Process"
    DESIGN = "Design"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: object) -> Self:
        """Parse a category as sent by the analysis service.

        Unknown names and the ``{"Other": "..."}`` form both map to OTHER.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for category in cls:
                if category.value.lower() == value.lower():
                    return category
        return cls.OTHER


@dataclass(frozen=True)
class Principle:
    """An engineering principle discovered for a term.

    Attributes:
        id: Identifier assigned by the analysis service
        title: Short title
        description: Longer description
        category: PrincipleCategory of the principle
        confidence: Confidence score in [0, 1]
        source_url: Where the principle was found
        related_terms: Ordered related terms
    """

    id: str
    title: str
    description: str = ""
    category: PrincipleCategory = PrincipleCategory.OTHER
    confidence: float = 0.0
    source_url: str = ""
    related_terms: tuple[str, ...] = ()


@dataclass(frozen=True)
class TreeNode:
    """A term in the analysis tree.

    Attributes:
        name: The term itself
        principles: Principles found for the term
        children: Child nodes in sibling order (None for leaves)
        depth: Depth in the tree (root = 0)
        processing_time: Analysis time in milliseconds
    """

    name: str
    principles: tuple[Principle, ...] = ()
    children: tuple[Self, ...] | None = None
    depth: int = 0
    processing_time: int = 0

    @property
    def child_nodes(self) -> tuple[Self, ...]:
        """Children as a tuple, empty for leaves."""
        return self.children or ()

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def average_confidence(self) -> float:
        """Mean principle confidence, 0.0 when there are no principles."""
        if not self.principles:
            return 0.0
        return sum(p.confidence for p in self.principles) / len(self.principles)

    def __repr__(self) -> str:
        """String representation of the node."""
        return f"TreeNode({self.name!r}, depth={self.depth}, principles={len(self.principles)})"


def validate_node(node: TreeNode, expected_depth: int) -> None:
    """Check that a node can be placed at the given depth.

    Args:
        node: Node to check
        expected_depth: Depth implied by the node's position in the tree

    Raises:
        MalformedNode: If the name is missing or the depth is inconsistent
    """
    name = getattr(node, "name", None)
    if not isinstance(name, str) or not name:
        raise MalformedNode(name, "missing name")
    depth = getattr(node, "depth", None)
    if not isinstance(depth, int) or isinstance(depth, bool):
        raise MalformedNode(name, f"missing depth (got {depth!r})")
    if depth != expected_depth:
        raise MalformedNode(name, f"depth {depth} does not match expected depth {expected_depth}")


def flatten_tree(root: TreeNode | None) -> list[TreeNode]:
    """Get all nodes in pre-order.

    Args:
        root: Root node (None yields an empty list)

    Returns:
        List of every node, parents before their children
    """
    if root is None:
        return []
    result = [root]
    for child in root.child_nodes:
        result.extend(flatten_tree(child))
    return result


@dataclass
class TreeStats:
    """Summary statistics for a tree."""

    total_nodes: int = 0
    total_principles: int = 0
    avg_confidence: float = 0.0
    category_distribution: dict[PrincipleCategory, int] = field(default_factory=dict)
    max_depth: int = 0

    @property
    def levels(self) -> int:
        return self.max_depth + 1 if self.total_nodes else 0


def tree_stats(root: TreeNode | None) -> TreeStats:
    """Calculate node statistics for a whole tree.

    Args:
        root: Root node

    Returns:
        TreeStats for every node reachable from root
    """
    nodes = flatten_tree(root)
    if not nodes:
        return TreeStats()

    principles = [p for n in nodes for p in n.principles]
    distribution: dict[PrincipleCategory, int] = {}
    for principle in principles:
        distribution[principle.category] = distribution.get(principle.category, 0) + 1

    avg = sum(p.confidence for p in principles) / len(principles) if principles else 0.0
    return TreeStats(
        total_nodes=len(nodes),
        total_principles=len(principles),
        avg_confidence=avg,
        category_distribution=distribution,
        max_depth=max(n.depth for n in nodes),
    )
