"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy across the pool core.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Every exception raised by a failing pool operation is raised before any
state is touched, so callers may treat a raised PoolException as
"nothing happened".
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the pool core."""

    # Schema & Validation Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Capacity Errors (permanent until operator action)
    TREE_FULL = "TREE_FULL"
    EDGE_CAPACITY_EXCEEDED = "EDGE_CAPACITY_EXCEEDED"

    # Consistency Errors (caller errors, retryable with corrected input)
    UNKNOWN_ROOT = "UNKNOWN_ROOT"
    NULLIFIER_ALREADY_SPENT = "NULLIFIER_ALREADY_SPENT"
    UNKNOWN_EDGE = "UNKNOWN_EDGE"
    EDGE_ALREADY_EXISTS = "EDGE_ALREADY_EXISTS"
    UNKNOWN_TREE = "UNKNOWN_TREE"
    UNKNOWN_POOL = "UNKNOWN_POOL"
    INVALID_DEPTH = "INVALID_DEPTH"
    INVALID_LEAF_RANGE = "INVALID_LEAF_RANGE"
    INVALID_MERKLE_ROOTS = "INVALID_MERKLE_ROOTS"
    INVALID_NEIGHBOR_ROOT = "INVALID_NEIGHBOR_ROOT"
    INVALID_INPUT_NULLIFIERS = "INVALID_INPUT_NULLIFIERS"

    # Pool Amount & External Data Errors
    INVALID_FEE = "INVALID_FEE"
    INVALID_EXT_DATA = "INVALID_EXT_DATA"
    INVALID_EXT_AMOUNT = "INVALID_EXT_AMOUNT"
    INVALID_PUBLIC_AMOUNT = "INVALID_PUBLIC_AMOUNT"
    INVALID_DEPOSIT_AMOUNT = "INVALID_DEPOSIT_AMOUNT"
    INVALID_WITHDRAW_AMOUNT = "INVALID_WITHDRAW_AMOUNT"
    INVALID_NONCE = "INVALID_NONCE"

    # Configuration & Authorization Errors
    NOT_INITIALIZED = "NOT_INITIALIZED"
    INVALID_PARAMETERS = "INVALID_PARAMETERS"
    UNAUTHORIZED = "UNAUTHORIZED"

    # Cryptographic Errors (terminal for the specific proof)
    PROOF_MALFORMED = "PROOF_MALFORMED"
    PROOF_REJECTED = "PROOF_REJECTED"


# Codes that a caller may retry with corrected input.
RETRYABLE_CODES: frozenset[str] = frozenset({
    ErrorCodes.UNKNOWN_ROOT,
    ErrorCodes.NULLIFIER_ALREADY_SPENT,
    ErrorCodes.UNKNOWN_EDGE,
    ErrorCodes.EDGE_ALREADY_EXISTS,
})


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class PoolError(BaseModel):
    """
    Base error model for structured error communication.

    Used by the HTTP layer and by anything that needs to serialize a failure
    instead of raising it.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.UNKNOWN_ROOT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried with corrected input",
    )

    def to_exception(self) -> "PoolException":
        """Convert this error model to a raisable exception."""
        return PoolException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class PoolException(Exception):
    """
    Base exception for all pool core errors.

    This exception carries structured error information and can be
    converted to/from PoolError models.
    """

    default_code: str = "POOL_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message
        self.details = details or {}
        self.retryable = (
            retryable if retryable is not None else self.code in RETRYABLE_CODES
        )

    def to_error_model(self) -> PoolError:
        """Convert this exception to a PoolError model."""
        return PoolError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(PoolException):
    """Exception raised when canonical serialization fails."""

    default_code = ErrorCodes.CANONICALIZATION_ERROR


class SchemaValidationException(PoolException):
    """Exception raised when an input cannot be coerced into a pool type."""

    default_code = ErrorCodes.SCHEMA_VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(message=message, details=full_details)


# -----------------------------------------------------------------------------
# Capacity
# -----------------------------------------------------------------------------

class TreeFullException(PoolException):
    """Raised when inserting into a tree whose leaf_count == max_leaves."""

    default_code = ErrorCodes.TREE_FULL

    def __init__(self, tree_id: int, max_leaves: int) -> None:
        super().__init__(
            message=f"Tree {tree_id} is full ({max_leaves} leaves)",
            details={"tree_id": tree_id, "max_leaves": max_leaves},
        )


class EdgeCapacityExceededException(PoolException):
    """Raised when a new peer chain would exceed a tree's max_edges."""

    default_code = ErrorCodes.EDGE_CAPACITY_EXCEEDED

    def __init__(self, tree_id: int, max_edges: int) -> None:
        super().__init__(
            message=f"Tree {tree_id} already links {max_edges} peer chains",
            details={"tree_id": tree_id, "max_edges": max_edges},
        )


# -----------------------------------------------------------------------------
# Consistency
# -----------------------------------------------------------------------------

class UnknownRootException(PoolException):
    """Raised when a claimed root is in neither the local nor any edge history."""

    default_code = ErrorCodes.UNKNOWN_ROOT

    def __init__(self, tree_id: int, root_hex: str) -> None:
        super().__init__(
            message=f"Root {root_hex} is not known to tree {tree_id}",
            details={"tree_id": tree_id, "root": root_hex},
        )


class NullifierAlreadySpentException(PoolException):
    """Raised when a nullifier hash has already been revealed for this tree."""

    default_code = ErrorCodes.NULLIFIER_ALREADY_SPENT

    def __init__(self, tree_id: int, nullifier_hex: str) -> None:
        super().__init__(
            message=f"Nullifier {nullifier_hex} already spent in tree {tree_id}",
            details={"tree_id": tree_id, "nullifier": nullifier_hex},
        )


class UnknownEdgeException(PoolException):
    """Raised when updating an edge that was never added."""

    default_code = ErrorCodes.UNKNOWN_EDGE

    def __init__(self, tree_id: int, chain_id: int) -> None:
        super().__init__(
            message=f"Tree {tree_id} has no edge for chain {chain_id}",
            details={"tree_id": tree_id, "chain_id": chain_id},
        )


class EdgeAlreadyExistsException(PoolException):
    """Raised when adding an edge for a peer chain that is already linked."""

    default_code = ErrorCodes.EDGE_ALREADY_EXISTS

    def __init__(self, tree_id: int, chain_id: int) -> None:
        super().__init__(
            message=f"Tree {tree_id} already has an edge for chain {chain_id}",
            details={"tree_id": tree_id, "chain_id": chain_id},
        )


class UnknownTreeException(PoolException):
    """Raised when a TreeId was never created."""

    default_code = ErrorCodes.UNKNOWN_TREE

    def __init__(self, tree_id: int) -> None:
        super().__init__(
            message=f"Tree {tree_id} does not exist",
            details={"tree_id": tree_id},
        )


class UnknownPoolException(PoolException):
    """Raised when a tree exists but has no pool of the requested kind."""

    default_code = ErrorCodes.UNKNOWN_POOL

    def __init__(self, tree_id: int, kind: str) -> None:
        super().__init__(
            message=f"No {kind} pool registered for tree {tree_id}",
            details={"tree_id": tree_id, "kind": kind},
        )


class InvalidDepthException(PoolException):
    """Raised when a tree depth is 0 or above the configured maximum."""

    default_code = ErrorCodes.INVALID_DEPTH

    def __init__(self, depth: int, max_depth: int) -> None:
        super().__init__(
            message=f"Tree depth must be in 1..{max_depth}, got {depth}",
            details={"depth": depth, "max_depth": max_depth},
        )


class InvalidLeafRangeException(PoolException):
    """Raised when a leaf range query falls outside the inserted leaves."""

    default_code = ErrorCodes.INVALID_LEAF_RANGE

    def __init__(self, tree_id: int, start: int, end: int, leaf_count: int) -> None:
        super().__init__(
            message=(
                f"Leaf range [{start}, {end}) is invalid for tree {tree_id} "
                f"with {leaf_count} leaves"
            ),
            details={
                "tree_id": tree_id,
                "start": start,
                "end": end,
                "leaf_count": leaf_count,
            },
        )


class InvalidMerkleRootsException(PoolException):
    """Raised when the number of claimed roots does not match the tree's edge budget."""

    default_code = ErrorCodes.INVALID_MERKLE_ROOTS

    def __init__(self, tree_id: int, expected: int, actual: int) -> None:
        super().__init__(
            message=f"Tree {tree_id} expects {expected} roots, got {actual}",
            details={"tree_id": tree_id, "expected": expected, "actual": actual},
        )


class InvalidNeighborRootException(PoolException):
    """Raised when a positional neighbor root is not in its edge's history."""

    default_code = ErrorCodes.INVALID_NEIGHBOR_ROOT

    def __init__(self, tree_id: int, chain_id: int, root_hex: str) -> None:
        super().__init__(
            message=f"Root {root_hex} is not a known root of chain {chain_id} on tree {tree_id}",
            details={"tree_id": tree_id, "chain_id": chain_id, "root": root_hex},
        )


class InvalidInputNullifiersException(PoolException):
    """Raised when one spend reveals the same nullifier twice, or none at all."""

    default_code = ErrorCodes.INVALID_INPUT_NULLIFIERS


# -----------------------------------------------------------------------------
# Amounts & external data
# -----------------------------------------------------------------------------

class InvalidFeeException(PoolException):
    default_code = ErrorCodes.INVALID_FEE


class InvalidExtDataException(PoolException):
    default_code = ErrorCodes.INVALID_EXT_DATA


class InvalidExtAmountException(PoolException):
    default_code = ErrorCodes.INVALID_EXT_AMOUNT


class InvalidPublicAmountException(PoolException):
    default_code = ErrorCodes.INVALID_PUBLIC_AMOUNT


class InvalidDepositAmountException(PoolException):
    default_code = ErrorCodes.INVALID_DEPOSIT_AMOUNT


class InvalidWithdrawAmountException(PoolException):
    default_code = ErrorCodes.INVALID_WITHDRAW_AMOUNT


class InvalidNonceException(PoolException):
    """Raised when a proposal nonce is not strictly ahead of the stored one."""

    default_code = ErrorCodes.INVALID_NONCE

    def __init__(self, current: int, proposed: int) -> None:
        super().__init__(
            message=f"Proposal nonce {proposed} is invalid (current nonce {current})",
            details={"current": current, "proposed": proposed},
        )


# -----------------------------------------------------------------------------
# Configuration & authorization
# -----------------------------------------------------------------------------

class NotInitializedException(PoolException):
    """
    Raised when hash parameters or a verifying key were never set.

    Operating with an absent key would silently accept forged proofs, so a
    missing value is always an explicit failure.
    """

    default_code = ErrorCodes.NOT_INITIALIZED

    def __init__(self, what: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=f"{what} not initialized",
            details=details,
        )


class InvalidParametersException(PoolException):
    default_code = ErrorCodes.INVALID_PARAMETERS


class UnauthorizedException(PoolException):
    """Raised when the injected authorization predicate refuses an action."""

    default_code = ErrorCodes.UNAUTHORIZED

    def __init__(self, action: str) -> None:
        super().__init__(
            message=f"Caller is not authorized to {action}",
            details={"action": action},
        )


# -----------------------------------------------------------------------------
# Cryptographic
# -----------------------------------------------------------------------------

class ProofMalformedException(PoolException):
    """Raised by a verifier backend when proof, key or inputs are structurally invalid."""

    default_code = ErrorCodes.PROOF_MALFORMED


class ProofRejectedException(PoolException):
    """Raised when a structurally valid proof does not verify."""

    default_code = ErrorCodes.PROOF_REJECTED
