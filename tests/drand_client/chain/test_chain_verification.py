"""Tests for matching chain descriptions against pinned fingerprints."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from drand_client.chain import verify_chain_info
from drand_client.errors import ChainVerificationError
from drand_client.types import ChainVerificationParams
from tests.drand_client.helpers import CHAIN_HASH, PUBLIC_KEY, make_chain_info

PINNED = ChainVerificationParams(chain_hash=CHAIN_HASH, public_key=PUBLIC_KEY)


class TestVerifyChainInfo:
    """Tests for verify_chain_info()."""

    def test_matching_description_accepted(self) -> None:
        """Identical hash and public key pass."""
        verify_chain_info(make_chain_info(), PINNED)

    def test_no_params_accepts_anything(self) -> None:
        """Without pinning every description passes."""
        verify_chain_info(make_chain_info(hash="00" * 32, public_key=None), None)

    def test_wrong_hash_rejected(self) -> None:
        """A different hash is another chain."""
        with pytest.raises(ChainVerificationError, match="did not match the verification params"):
            verify_chain_info(make_chain_info(hash="00" * 32), PINNED)

    def test_wrong_public_key_rejected(self) -> None:
        """A different public key is another chain."""
        with pytest.raises(ChainVerificationError) as exc_info:
            verify_chain_info(make_chain_info(public_key="ab" * 48), PINNED)

        assert exc_info.value.actual_public_key == "ab" * 48
        assert exc_info.value.missing_fields == []

    def test_missing_fields_rejected(self) -> None:
        """Absent fields never match and are named in the error."""
        with pytest.raises(ChainVerificationError) as exc_info:
            verify_chain_info(make_chain_info(hash=None, public_key=None), PINNED)

        assert exc_info.value.missing_fields == ["hash", "public_key"]
        assert "missing from response" in str(exc_info.value)

    def test_empty_strings_match(self) -> None:
        """Two empty strings are equal, not missing."""
        empty = ChainVerificationParams(chain_hash="", public_key="")

        verify_chain_info(make_chain_info(hash="", public_key=""), empty)

    def test_comparison_is_case_sensitive(self) -> None:
        """Hex fields are compared literally."""
        with pytest.raises(ChainVerificationError):
            verify_chain_info(make_chain_info(hash=CHAIN_HASH.upper()), PINNED)


_hex = st.text(alphabet="0123456789abcdef", min_size=0, max_size=8)


@given(info_hash=_hex, info_key=_hex, pinned_hash=_hex, pinned_key=_hex)
def test_accepted_iff_both_fields_equal(
    info_hash: str, info_key: str, pinned_hash: str, pinned_key: str
) -> None:
    """Verification passes exactly when both fields match."""
    info = make_chain_info(hash=info_hash, public_key=info_key)
    params = ChainVerificationParams(chain_hash=pinned_hash, public_key=pinned_key)
    should_pass = info_hash == pinned_hash and info_key == pinned_key

    try:
        verify_chain_info(info, params)
        passed = True
    except ChainVerificationError:
        passed = False

    assert passed == should_pass
