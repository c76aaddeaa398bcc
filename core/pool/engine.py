"""
Spend Engine

The one nullifier-gated, proof-verified spend path shared by every pool
variant.

Owner: Protocol/Crypto Engineer

verify_and_spend is all-or-nothing. In order:

1. shape: the variant's slots are present and counts are supported; the
   number of roots matches the tree's edge slots
2. roots: every claimed root is known (locally or via an edge); variants
   that bind neighbor positions additionally check roots[i + 1] against
   the i-th edge
3. nullifiers: none repeats within the spend, none is already spent
4. pool pre-checks (fees, amounts, capacity) supplied by the caller
5. verification with the material for the variant's arity key
6. nullifier commit

Every failure before step 6 leaves state untouched; nothing after step 6
can fail inside the engine.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from core.crypto.hashing import to_hex
from core.linkable.tree import LinkableTree
from core.params.store import ParameterStore
from core.pool.nullifiers import NullifierRegistry
from core.pool.variants import PoolVariant
from core.receipts.models import SpendReceipt
from core.schemas.errors import (
    InvalidInputNullifiersException,
    NullifierAlreadySpentException,
    ProofRejectedException,
    UnknownRootException,
)
from core.schemas.inputs import SpendInputs

logger = logging.getLogger(__name__)

PreCheck = Callable[[], None]


class SpendEngine:
    def __init__(
        self,
        linkable: LinkableTree,
        params: ParameterStore,
        nullifiers: Optional[NullifierRegistry] = None,
    ) -> None:
        self.linkable = linkable
        self.params = params
        self.nullifiers = nullifiers or NullifierRegistry()

    def check_roots(self, tree_id: int, roots: Sequence[bytes], variant: PoolVariant) -> None:
        self.linkable.ensure_max_edges(tree_id, len(roots))
        for root in roots:
            if not self.linkable.is_known_root(tree_id, root):
                logger.warning(f"Tree {tree_id}: unknown root {to_hex(root)}")
                raise UnknownRootException(tree_id, to_hex(root))
        if variant.binds_neighbors:
            self.linkable.ensure_known_neighbor_roots(tree_id, roots[1:])

    def check_nullifiers(self, tree_id: int, nullifiers: Sequence[bytes]) -> None:
        if len(set(nullifiers)) != len(nullifiers):
            raise InvalidInputNullifiersException(
                "A spend must not reveal the same nullifier twice",
                details={"tree_id": tree_id},
            )
        for nullifier in nullifiers:
            if self.nullifiers.is_spent(tree_id, nullifier):
                logger.warning(f"Tree {tree_id}: nullifier {to_hex(nullifier)} already spent")
                raise NullifierAlreadySpentException(tree_id, to_hex(nullifier))

    def verify_and_spend(
        self,
        tree_id: int,
        proof: bytes,
        inputs: SpendInputs,
        variant: PoolVariant,
        *,
        prechecks: Sequence[PreCheck] = (),
    ) -> SpendReceipt:
        """
        Check, verify and commit one spend.

        Raises:
            UnknownTreeException, SchemaValidationException,
            InvalidMerkleRootsException, UnknownRootException,
            InvalidNeighborRootException, InvalidInputNullifiersException,
            NullifierAlreadySpentException, NotInitializedException,
            ProofMalformedException, ProofRejectedException, or whatever a
            pre-check raises
        """
        variant.check_shape(inputs)
        self.check_roots(tree_id, inputs.roots, variant)
        self.check_nullifiers(tree_id, inputs.nullifiers)
        for check in prechecks:
            check()

        arity = variant.arity_key(inputs)
        verifier = self.params.get_verifier(arity)
        if not verifier.verify(variant.encode(inputs), proof):
            logger.warning(f"Tree {tree_id}: {variant.kind.value} proof rejected")
            raise ProofRejectedException(
                f"{variant.kind.value} proof did not verify",
                details={"tree_id": tree_id, "arity": list(arity)},
            )

        self.nullifiers.commit(tree_id, inputs.nullifiers)
        logger.info(
            f"Tree {tree_id}: {variant.kind.value} spend committed "
            f"({len(inputs.nullifiers)} nullifiers)"
        )
        return SpendReceipt(
            tree_id=tree_id,
            variant=variant.kind.value,
            arity=arity,
            roots=list(inputs.roots),
            nullifiers=list(inputs.nullifiers),
        )
