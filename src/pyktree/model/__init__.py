"""Model layer for pyktree.

This module contains the immutable data model for an analysed concept
hierarchy and the loader for analysis service documents.
"""

from pyktree.model.loader import from_analysis_node, load_tree, tree_from_document
from pyktree.model.node import (
    Principle,
    PrincipleCategory,
    TreeNode,
    TreeStats,
    flatten_tree,
    tree_stats,
    validate_node,
)

__all__ = [
    "Principle",
    "PrincipleCategory",
    "TreeNode",
    "TreeStats",
    "flatten_tree",
    "tree_stats",
    "validate_node",
    "from_analysis_node",
    "load_tree",
    "tree_from_document",
]
