"""
Module 01 - Schemas & Canonicalization
File: inputs.py

Purpose: Pydantic models for what a caller submits to a pool: the public
inputs bundle the spend engine checks, the variable-anchor proof data and
external data, and the fixed-denomination withdraw request.

Amounts follow the ledger's integer widths: balances are unsigned 128-bit,
the variable-anchor external amount is signed 128-bit.

Hashes over caller data (arbitrary data, external data) are keccak256 of a
fixed little-endian byte layout, interpreted little-endian and reduced into
the scalar field, so they can be fed to the circuit as a single element.
"""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

from core.crypto.hashing import from_hex, keccak256, to_hex

from .element import ZERO_ELEMENT, ElementField, is_zero_element, reduce_to_field


U128_MAX = 2**128 - 1
I128_MIN = -(2**127)
I128_MAX = 2**127 - 1


def _coerce_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return from_hex(value)
    if isinstance(value, bytearray):
        return bytes(value)
    if isinstance(value, bytes):
        return value
    raise ValueError(f"Expected bytes or 0x-hex, got {type(value).__name__}")


HexBytes = Annotated[
    bytes,
    BeforeValidator(_coerce_bytes),
    PlainSerializer(to_hex, return_type=str, when_used="json"),
]

# Accounts are 32-byte identifiers, encoded like elements.
AccountId = ElementField

Balance = Annotated[int, Field(ge=0, le=U128_MAX)]


def _u128_le(value: int) -> bytes:
    return value.to_bytes(16, "little")


def compute_arbitrary_data_hash(
    recipient: bytes,
    relayer: bytes,
    fee: int,
    refund: int,
    commitment: Optional[bytes] = None,
) -> bytes:
    """
    Hash the withdraw parameters a fixed-denomination proof is bound to.

    Layout: recipient(32) || relayer(32) || fee(u128 LE) || refund(u128 LE)
    [|| commitment(32)], keccak256, reduced into the field.
    """
    data = recipient + relayer + _u128_le(fee) + _u128_le(refund)
    if commitment is not None:
        data += commitment
    return reduce_to_field(keccak256(data))


class SpendInputs(BaseModel):
    """
    Decoded public inputs of one spend.

    Which optional slots are required, and in which order they are
    re-encoded for the verifier, is decided by the PoolVariant.
    """

    model_config = ConfigDict(extra="forbid")

    roots: list[ElementField] = Field(
        ..., min_length=1, description="Claimed roots; index 0 is the local tree"
    )
    nullifiers: list[ElementField] = Field(
        ..., min_length=1, description="Nullifier hashes revealed by this spend"
    )
    arbitrary_data_hash: Optional[ElementField] = Field(
        default=None, description="Hash binding withdraw parameters (mixer, anchor)"
    )
    chain_id_type: Optional[int] = Field(
        default=None, ge=0, description="Typed chain id of the local chain (anchor, vanchor)"
    )
    public_amount: Optional[ElementField] = Field(
        default=None, description="ext_amount - fee as a field element (vanchor)"
    )
    ext_data_hash: Optional[ElementField] = Field(
        default=None, description="Hash of the external data (vanchor)"
    )
    output_commitments: list[ElementField] = Field(
        default_factory=list, description="New commitments inserted after the spend (vanchor)"
    )


class ExtData(BaseModel):
    """External (non-circuit) data of a variable-anchor transaction."""

    model_config = ConfigDict(extra="forbid")

    recipient: AccountId
    relayer: AccountId
    ext_amount: int = Field(
        ..., ge=I128_MIN, le=I128_MAX, description="Positive deposits, negative withdraws"
    )
    fee: Balance = 0
    refund: Balance = 0
    token: int = Field(default=0, ge=0, le=2**32 - 1, description="Asset id")
    encrypted_output1: HexBytes = b""
    encrypted_output2: HexBytes = b""

    def encode(self) -> bytes:
        """
        Fixed byte layout of the external data.

        recipient(32) || relayer(32) || ext_amount(i128 LE) || fee(u128 LE)
        || refund(u128 LE) || token(u32 LE) || len(u32 LE) || output1
        || len(u32 LE) || output2
        """
        return b"".join(
            [
                self.recipient,
                self.relayer,
                self.ext_amount.to_bytes(16, "little", signed=True),
                _u128_le(self.fee),
                _u128_le(self.refund),
                self.token.to_bytes(4, "little"),
                len(self.encrypted_output1).to_bytes(4, "little"),
                self.encrypted_output1,
                len(self.encrypted_output2).to_bytes(4, "little"),
                self.encrypted_output2,
            ]
        )

    def compute_hash(self) -> bytes:
        return reduce_to_field(keccak256(self.encode()))


class ProofData(BaseModel):
    """Proof and public values of a variable-anchor transaction."""

    model_config = ConfigDict(extra="forbid")

    proof: HexBytes
    public_amount: ElementField
    roots: list[ElementField] = Field(..., min_length=1)
    input_nullifiers: list[ElementField] = Field(..., min_length=1)
    output_commitments: list[ElementField] = Field(default_factory=list)
    ext_data_hash: ElementField


class WithdrawRequest(BaseModel):
    """
    Withdraw from a fixed-denomination pool.

    ``roots`` holds one root for a mixer and ``max_edges + 1`` roots for an
    anchor. A non-zero ``refresh_commitment`` (anchor only) re-deposits the
    note into the tree instead of paying out.
    """

    model_config = ConfigDict(extra="forbid")

    proof: HexBytes
    roots: list[ElementField] = Field(..., min_length=1)
    nullifier_hash: ElementField
    recipient: AccountId
    relayer: AccountId
    fee: Balance = 0
    refund: Balance = 0
    refresh_commitment: ElementField = ZERO_ELEMENT

    @property
    def is_refresh(self) -> bool:
        return not is_zero_element(self.refresh_commitment)


__all__ = [
    "U128_MAX",
    "I128_MIN",
    "I128_MAX",
    "HexBytes",
    "AccountId",
    "Balance",
    "compute_arbitrary_data_hash",
    "SpendInputs",
    "ExtData",
    "ProofData",
    "WithdrawRequest",
]
