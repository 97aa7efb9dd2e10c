"""Grouping of tree nodes by depth."""

import logging

from pyktree.errors import MalformedNode
from pyktree.model.node import TreeNode, validate_node

logger = logging.getLogger(__name__)

DepthGroups = dict[int, list[TreeNode]]


def group_by_depth(root: TreeNode | None) -> DepthGroups:
    """Collect every node of a tree into per-depth groups.

    Nodes are visited in pre-order, so within one depth the order is
    the order in which the walk reaches them: a node's own children
    come before the children of its next sibling. Parent identity is
    not kept.

    Malformed nodes are logged and skipped together with their subtree.

    Args:
        root: Root node (None gives no groups)

    Returns:
        Mapping of depth to nodes at that depth, in ascending depth order
    """
    groups: DepthGroups = {}
    if root is None:
        return groups

    def visit(node: TreeNode, depth: int) -> None:
        try:
            validate_node(node, depth)
        except MalformedNode as e:
            logger.warning(f"Skipping node from layout: {e}")
            return

        groups.setdefault(depth, []).append(node)
        for child in node.child_nodes:
            visit(child, depth + 1)

    visit(root, 0)
    return groups


def max_depth(groups: DepthGroups) -> int:
    """Get the deepest depth present (0 for an empty grouping)."""
    return max(groups) if groups else 0


def node_count(groups: DepthGroups) -> int:
    """Get the number of grouped nodes."""
    return sum(len(nodes) for nodes in groups.values())
