"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.

Element and input models are imported from their own modules
(``core.schemas.element``, ``core.schemas.inputs``) because they depend on
``core.crypto``, which itself imports the canonical serializer from here.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    loads_canonical,
)

# Error models and exceptions
from .errors import (
    RETRYABLE_CODES,
    CanonicalizationException,
    EdgeAlreadyExistsException,
    EdgeCapacityExceededException,
    ErrorCodes,
    InvalidDepositAmountException,
    InvalidDepthException,
    InvalidExtAmountException,
    InvalidExtDataException,
    InvalidFeeException,
    InvalidInputNullifiersException,
    InvalidLeafRangeException,
    InvalidMerkleRootsException,
    InvalidNeighborRootException,
    InvalidNonceException,
    InvalidParametersException,
    InvalidPublicAmountException,
    InvalidWithdrawAmountException,
    NotInitializedException,
    NullifierAlreadySpentException,
    PoolError,
    PoolException,
    ProofMalformedException,
    ProofRejectedException,
    SchemaValidationException,
    TreeFullException,
    UnauthorizedException,
    UnknownEdgeException,
    UnknownPoolException,
    UnknownRootException,
    UnknownTreeException,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    "loads_canonical",
    # Errors
    "RETRYABLE_CODES",
    "ErrorCodes",
    "PoolError",
    "PoolException",
    "CanonicalizationException",
    "SchemaValidationException",
    "TreeFullException",
    "EdgeCapacityExceededException",
    "UnknownRootException",
    "NullifierAlreadySpentException",
    "UnknownEdgeException",
    "EdgeAlreadyExistsException",
    "UnknownTreeException",
    "UnknownPoolException",
    "InvalidDepthException",
    "InvalidLeafRangeException",
    "InvalidMerkleRootsException",
    "InvalidNeighborRootException",
    "InvalidInputNullifiersException",
    "InvalidFeeException",
    "InvalidExtDataException",
    "InvalidExtAmountException",
    "InvalidPublicAmountException",
    "InvalidDepositAmountException",
    "InvalidWithdrawAmountException",
    "InvalidNonceException",
    "NotInitializedException",
    "InvalidParametersException",
    "UnauthorizedException",
    "ProofMalformedException",
    "ProofRejectedException",
]
