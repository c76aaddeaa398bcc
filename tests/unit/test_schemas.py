"""
Schema Unit Tests
Tests for core/schemas/element.py, core/schemas/inputs.py and
core/schemas/errors.py
"""
import pytest
from pydantic import ValidationError

from core.crypto.hashing import keccak256
from core.schemas.element import (
    FIELD_MODULUS,
    ZERO_ELEMENT,
    element_from_int,
    element_to_int,
    ensure_element,
    is_zero_element,
    reduce_to_field,
)
from core.schemas.errors import (
    ErrorCodes,
    NullifierAlreadySpentException,
    SchemaValidationException,
    TreeFullException,
)
from core.schemas.inputs import (
    ExtData,
    SpendInputs,
    WithdrawRequest,
    compute_arbitrary_data_hash,
)

from fixtures.common import make_account, make_element


class TestElement:
    def test_accepts_bytes_and_hex(self):
        assert ensure_element(b"\x01" * 32) == b"\x01" * 32
        assert ensure_element("0x" + "01" * 32) == b"\x01" * 32

    @pytest.mark.parametrize("value", [b"\x01" * 31, "0x01", "01" * 32, 5])
    def test_rejects_bad_values(self, value):
        with pytest.raises(SchemaValidationException):
            ensure_element(value, "leaf")

    def test_field_path_in_details(self):
        with pytest.raises(SchemaValidationException) as exc_info:
            ensure_element(b"", "roots[0]")
        assert exc_info.value.details["field_path"] == "roots[0]"

    def test_zero_element(self):
        assert is_zero_element(ZERO_ELEMENT)
        assert not is_zero_element(make_element(1))

    def test_int_encoding_is_little_endian(self):
        assert element_from_int(1) == b"\x01" + bytes(31)
        assert element_to_int(element_from_int(12345)) == 12345

    def test_negative_wraps_into_field(self):
        assert element_to_int(element_from_int(-1)) == FIELD_MODULUS - 1

    def test_reduce_to_field(self):
        digest = b"\xff" * 32
        assert element_to_int(reduce_to_field(digest)) == int.from_bytes(digest, "little") % FIELD_MODULUS


class TestInputs:
    def test_spend_inputs_require_roots_and_nullifiers(self):
        with pytest.raises(ValidationError):
            SpendInputs(roots=[], nullifiers=[make_element(1)])
        with pytest.raises(ValidationError):
            SpendInputs(roots=[make_element(1)], nullifiers=[])

    def test_spend_inputs_reject_short_elements(self):
        with pytest.raises(ValidationError):
            SpendInputs(roots=[b"\x01"], nullifiers=[make_element(1)])

    def test_spend_inputs_json_uses_hex(self):
        inputs = SpendInputs(roots=[make_element(1)], nullifiers=[make_element(2)])
        data = inputs.model_dump(mode="json")
        assert data["roots"] == ["0x" + make_element(1).hex()]

    def test_withdraw_request_from_hex(self):
        request = WithdrawRequest(
            proof="0x" + "ab" * 32,
            roots=["0x" + "01" * 32],
            nullifier_hash="0x" + "02" * 32,
            recipient="0x" + "03" * 32,
            relayer="0x" + "04" * 32,
        )
        assert request.proof == b"\xab" * 32
        assert not request.is_refresh

    def test_fee_must_fit_u128(self):
        with pytest.raises(ValidationError):
            WithdrawRequest(
                proof=b"",
                roots=[make_element(1)],
                nullifier_hash=make_element(2),
                recipient=make_account("r"),
                relayer=make_account("l"),
                fee=2**128,
            )

    def test_arbitrary_data_hash_layout(self):
        recipient, relayer = make_account("r"), make_account("l")
        data = recipient + relayer + (7).to_bytes(16, "little") + (9).to_bytes(16, "little")

        assert compute_arbitrary_data_hash(recipient, relayer, 7, 9) == reduce_to_field(
            keccak256(data)
        )
        assert compute_arbitrary_data_hash(
            recipient, relayer, 7, 9, make_element(5)
        ) == reduce_to_field(keccak256(data + make_element(5)))

    def test_ext_data_encoding(self):
        ext = ExtData(
            recipient=make_account("r"),
            relayer=make_account("l"),
            ext_amount=-2,
            fee=1,
            refund=0,
            token=3,
            encrypted_output1=b"ab",
            encrypted_output2=b"",
        )
        encoded = ext.encode()

        assert encoded[64:80] == (-2).to_bytes(16, "little", signed=True)
        assert encoded[80:96] == (1).to_bytes(16, "little")
        assert encoded[112:116] == (3).to_bytes(4, "little")
        assert encoded[116:122] == (2).to_bytes(4, "little") + b"ab"
        assert encoded[122:] == bytes(4)
        assert ext.compute_hash() == reduce_to_field(keccak256(encoded))

    def test_ext_amount_must_fit_i128(self):
        with pytest.raises(ValidationError):
            ExtData(recipient=make_account("r"), relayer=make_account("l"), ext_amount=2**127)


class TestErrors:
    def test_consistency_errors_are_retryable(self):
        exc = NullifierAlreadySpentException(0, "0x01")
        assert exc.code == ErrorCodes.NULLIFIER_ALREADY_SPENT
        assert exc.retryable

    def test_capacity_errors_are_not_retryable(self):
        exc = TreeFullException(0, 8)
        assert not exc.retryable
        assert exc.details == {"tree_id": 0, "max_leaves": 8}

    def test_error_model_round_trip(self):
        model = TreeFullException(2, 8).to_error_model()
        assert model.code == ErrorCodes.TREE_FULL
        assert model.to_exception().code == ErrorCodes.TREE_FULL
