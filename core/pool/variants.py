"""
Pool variants.

The mixer, anchor and variable anchor share one spend engine; a variant
only describes the shape of its public inputs: which slots it uses, the
order they are flattened in for the verifier, and how many nullifiers and
output commitments a spend may carry.

Public-input layouts (each slot is one or more 32-byte elements):

    mixer    nullifier_hash, root, arbitrary_data_hash
    anchor   chain_id_type, nullifier_hash, roots..., arbitrary_data_hash
    vanchor  public_amount, ext_data_hash, nullifiers..., output_commitments...,
             chain_id_type, roots...

The verifying-material key of a spend is (number of roots, number of
nullifiers).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from core.schemas.element import element_from_int
from core.schemas.errors import InvalidInputNullifiersException, SchemaValidationException
from core.schemas.inputs import SpendInputs

LIST_SLOTS = frozenset({"roots", "nullifiers", "output_commitments"})


class VariantKind(str, Enum):
    MIXER = "mixer"
    ANCHOR = "anchor"
    VANCHOR = "vanchor"


@dataclass(frozen=True)
class PoolVariant:
    kind: VariantKind
    slots: tuple[str, ...]
    nullifier_counts: frozenset[int]
    output_counts: frozenset[int] = frozenset({0})
    binds_neighbors: bool = False

    def check_shape(self, inputs: SpendInputs) -> None:
        """
        Raises:
            SchemaValidationException: If a slot this variant uses is missing
                or output commitments have an unsupported count
            InvalidInputNullifiersException: If the nullifier count is unsupported
        """
        for slot in self.slots:
            if slot not in LIST_SLOTS and getattr(inputs, slot) is None:
                raise SchemaValidationException(
                    f"{slot} is required for {self.kind.value} spends",
                    field_path=slot,
                )
        if len(inputs.nullifiers) not in self.nullifier_counts:
            raise InvalidInputNullifiersException(
                f"{self.kind.value} supports {sorted(self.nullifier_counts)} nullifiers, "
                f"got {len(inputs.nullifiers)}",
                details={"count": len(inputs.nullifiers)},
            )
        if len(inputs.output_commitments) not in self.output_counts:
            raise SchemaValidationException(
                f"{self.kind.value} supports {sorted(self.output_counts)} output commitments, "
                f"got {len(inputs.output_commitments)}",
                field_path="output_commitments",
            )

    def arity_key(self, inputs: SpendInputs) -> tuple[int, int]:
        return (len(inputs.roots), len(inputs.nullifiers))

    def encode(self, inputs: SpendInputs) -> bytes:
        """Flatten the public inputs in this variant's slot order."""
        parts: list[bytes] = []
        for slot in self.slots:
            value = getattr(inputs, slot)
            if slot in LIST_SLOTS:
                parts.extend(value)
            elif slot == "chain_id_type":
                parts.append(element_from_int(value))
            else:
                parts.append(value)
        return b"".join(parts)


MIXER = PoolVariant(
    kind=VariantKind.MIXER,
    slots=("nullifiers", "roots", "arbitrary_data_hash"),
    nullifier_counts=frozenset({1}),
)

ANCHOR = PoolVariant(
    kind=VariantKind.ANCHOR,
    slots=("chain_id_type", "nullifiers", "roots", "arbitrary_data_hash"),
    nullifier_counts=frozenset({1}),
    binds_neighbors=True,
)

VANCHOR = PoolVariant(
    kind=VariantKind.VANCHOR,
    slots=(
        "public_amount",
        "ext_data_hash",
        "nullifiers",
        "output_commitments",
        "chain_id_type",
        "roots",
    ),
    nullifier_counts=frozenset({2, 16}),
    output_counts=frozenset({2}),
    binds_neighbors=True,
)

VARIANTS: dict[str, PoolVariant] = {v.kind.value: v for v in (MIXER, ANCHOR, VANCHOR)}
