"""
Module 01 - Schemas & Canonicalization
File: state.py

Purpose: Pydantic view of the persisted layout of a pool runtime. A
snapshot holds everything that must survive a restart: per tree the
accumulator state, edges and spent nullifiers; globally the parameter
store and pool metadata. Two runtimes in the same state produce snapshots
with identical canonical JSON.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .element import ElementField
from .inputs import HexBytes


class EdgeSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    chain_id: int
    root: ElementField
    latest_leaf_index: int
    src_resource_id: ElementField
    root_history: list[ElementField] = Field(
        default_factory=list, description="Oldest to newest"
    )


class TreeSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tree_id: int
    depth: int
    leaf_count: int
    max_leaves: int
    zero_element: ElementField
    current_root: ElementField
    default_root: ElementField
    filled_subtrees: list[ElementField]
    root_history: list[ElementField] = Field(
        default_factory=list, description="Oldest to newest"
    )
    leaves: list[ElementField] = Field(default_factory=list)
    max_edges: Optional[int] = Field(
        default=None, description="None for trees created without edge slots"
    )
    edges: list[EdgeSnapshot] = Field(default_factory=list, description="Creation order")
    nullifiers: list[ElementField] = Field(default_factory=list, description="Sorted")


class VerifyingMaterialSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    arity: tuple[int, int]
    material: HexBytes


class ParamsSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    hasher: str
    hash_parameters: Optional[HexBytes] = None
    verifying_material: list[VerifyingMaterialSnapshot] = Field(default_factory=list)
    maintainer: Optional[ElementField] = None


class PoolSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tree_id: int
    kind: str
    asset: int
    deposit_size: int = 0


class VAnchorLimitsSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_fee: int
    max_ext_amount: int
    max_deposit_amount: int
    min_withdraw_amount: int
    proposal_nonce: int


class RuntimeSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    chain_id: int
    chain_type: HexBytes
    chain_id_type: int
    next_tree_id: int
    trees: list[TreeSnapshot] = Field(default_factory=list)
    params: ParamsSnapshot
    pools: list[PoolSnapshot] = Field(default_factory=list)
    vanchor_limits: VAnchorLimitsSnapshot


__all__ = [
    "EdgeSnapshot",
    "TreeSnapshot",
    "VerifyingMaterialSnapshot",
    "ParamsSnapshot",
    "PoolSnapshot",
    "VAnchorLimitsSnapshot",
    "RuntimeSnapshot",
]
