"""Treesmith data models."""

from treesmith.models.tree_node import LoadState, TreeNode
from treesmith.models.structure import StructureEntry
from treesmith.models.blocks import CollectedFile, DetectedFileBlock
from treesmith.models.results import (
    CollectResult,
    CreateResult,
    DistributeResult,
    Outcome,
)

__all__ = [
    "CollectResult",
    "CollectedFile",
    "CreateResult",
    "DetectedFileBlock",
    "DistributeResult",
    "LoadState",
    "Outcome",
    "StructureEntry",
    "TreeNode",
]
