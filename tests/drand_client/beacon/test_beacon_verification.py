"""Tests for verifying beacons against their chain."""

import pytest

from drand_client.beacon import G1_DST, verify_beacon
from drand_client.errors import BeaconFailure, BeaconVerificationError
from drand_client.types import ChainInfo, SchemeID
from tests.drand_client.helpers import (
    FakeSigner,
    make_beacon,
    make_chain_info,
    make_signature,
    make_unchained_info,
    signed_beacon,
    signed_chain_info,
)


def _reason(exc_info: pytest.ExceptionInfo[BeaconVerificationError]) -> BeaconFailure:
    return exc_info.value.reason


class TestValidBeacons:
    """Beacons that must be accepted."""

    def test_chained_beacon(self, chain_info: ChainInfo, signer: FakeSigner) -> None:
        """A consistent chained beacon passes."""
        verify_beacon(make_beacon(10), chain_info, signer=signer)

    def test_chained_beacon_with_previous(
        self, chain_info: ChainInfo, signer: FakeSigner
    ) -> None:
        """A beacon linking to its predecessor passes and the signer sees both."""
        verify_beacon(make_beacon(10), chain_info, make_beacon(9), signer=signer)

        assert signer.calls == [(10, 9)]

    def test_unchained_beacon(self, signer: FakeSigner) -> None:
        """Unchained beacons need no previous signature."""
        verify_beacon(make_beacon(10, chained=False), make_unchained_info(), signer=signer)

    def test_uppercase_randomness(self, chain_info: ChainInfo, signer: FakeSigner) -> None:
        """Randomness hex is compared case-insensitively."""
        beacon = make_beacon(10)
        beacon = beacon.copy(randomness=beacon.randomness.upper())

        verify_beacon(beacon, chain_info, signer=signer)


class TestInvalidBeacons:
    """Each failing check is reported with its own reason."""

    def test_unsupported_scheme(self, chain_info: ChainInfo) -> None:
        """A signer that cannot check the scheme rejects every beacon."""
        with pytest.raises(BeaconVerificationError) as exc_info:
            verify_beacon(make_beacon(10), chain_info, signer=FakeSigner(supported=False))

        assert _reason(exc_info) is BeaconFailure.UNSUPPORTED_SCHEME

    def test_bad_signature(self, chain_info: ChainInfo) -> None:
        """A signature the signer refuses is rejected."""
        with pytest.raises(BeaconVerificationError) as exc_info:
            verify_beacon(make_beacon(10), chain_info, signer=FakeSigner(valid=False))

        assert _reason(exc_info) is BeaconFailure.SIGNATURE
        assert exc_info.value.round == 10

    def test_randomness_mismatch(self, chain_info: ChainInfo, signer: FakeSigner) -> None:
        """Randomness that is not the signature digest is rejected before the pairing check."""
        beacon = make_beacon(10).copy(randomness="00" * 32)

        with pytest.raises(BeaconVerificationError) as exc_info:
            verify_beacon(beacon, chain_info, signer=signer)

        assert _reason(exc_info) is BeaconFailure.RANDOMNESS_DIGEST
        assert signer.calls == []

    def test_signature_not_hex(self, chain_info: ChainInfo, signer: FakeSigner) -> None:
        """Undecodable signatures are invalid signatures."""
        beacon = make_beacon(10).copy(signature="not hex")

        with pytest.raises(BeaconVerificationError) as exc_info:
            verify_beacon(beacon, chain_info, signer=signer)

        assert _reason(exc_info) is BeaconFailure.SIGNATURE

    def test_chained_without_previous_signature(
        self, chain_info: ChainInfo, signer: FakeSigner
    ) -> None:
        """Chained beacons must name the signature they extend."""
        beacon = make_beacon(10, chained=False)

        with pytest.raises(BeaconVerificationError) as exc_info:
            verify_beacon(beacon, chain_info, signer=signer)

        assert _reason(exc_info) is BeaconFailure.MISSING_PREVIOUS_SIGNATURE

    def test_non_consecutive_round(self, chain_info: ChainInfo, signer: FakeSigner) -> None:
        """A known predecessor must be exactly one round earlier."""
        with pytest.raises(BeaconVerificationError) as exc_info:
            verify_beacon(make_beacon(10), chain_info, make_beacon(8), signer=signer)

        assert _reason(exc_info) is BeaconFailure.ROUND_LINKAGE

    def test_previous_signature_mismatch(
        self, chain_info: ChainInfo, signer: FakeSigner
    ) -> None:
        """The named previous signature must be the predecessor's signature."""
        beacon = make_beacon(10).copy(previous_signature=make_signature(42))

        with pytest.raises(BeaconVerificationError) as exc_info:
            verify_beacon(beacon, chain_info, make_beacon(9), signer=signer)

        assert _reason(exc_info) is BeaconFailure.ROUND_LINKAGE

    def test_unchained_ignores_linkage(self, signer: FakeSigner) -> None:
        """Unchained schemes do not link rounds."""
        info = make_unchained_info()

        verify_beacon(make_beacon(10, chained=False), info, make_beacon(3), signer=signer)

    def test_error_message_names_round_and_reason(self, chain_info: ChainInfo) -> None:
        """The message carries the round and the failing check."""
        with pytest.raises(BeaconVerificationError, match="round 7 was not valid: signature"):
            verify_beacon(make_beacon(7), chain_info, signer=FakeSigner(valid=False))


class TestDefaultSigner:
    """Tests for the default verifier selection."""

    def test_bn254_scheme_unsupported(self) -> None:
        """The default signer refuses BN254 chains rather than guessing."""
        info = make_chain_info(scheme_id="bls-bn254-unchained-on-g1")

        with pytest.raises(BeaconVerificationError) as exc_info:
            verify_beacon(make_beacon(10, chained=False), info)

        assert _reason(exc_info) is BeaconFailure.UNSUPPORTED_SCHEME

    def test_g1_scheme_verified(self) -> None:
        """The default signer checks quicknet style G1 signatures."""
        info = signed_chain_info(SchemeID.BLS_UNCHAINED_G1_RFC9380)

        verify_beacon(signed_beacon(42, info, G1_DST), info)
