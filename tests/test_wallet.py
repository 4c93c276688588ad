import pytest
from eth_account.messages import encode_defunct

from app.core.errors import InvalidAddress
from app.services.wallet import build_challenge, generate_nonce, normalize_address, recover_address

CHECKSUMMED = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


class TestNormalizeAddress:
    """Tests for EIP-55 address normalization"""

    def test_lowercase_is_checksummed(self):
        """All-lowercase input normalizes to the checksummed form"""
        assert normalize_address(CHECKSUMMED.lower()) == CHECKSUMMED

    def test_uppercase_hex_is_checksummed(self):
        """All-uppercase hex digits normalize to the same form"""
        assert normalize_address("0x" + CHECKSUMMED[2:].upper()) == CHECKSUMMED

    def test_checksummed_is_unchanged(self):
        assert normalize_address(CHECKSUMMED) == CHECKSUMMED

    def test_surrounding_whitespace_is_ignored(self):
        assert normalize_address(f"  {CHECKSUMMED}\n") == CHECKSUMMED

    def test_bad_checksum_is_rejected(self):
        """Mixed case with a wrong checksum is not silently accepted"""
        # Arrange: flip the case of one letter in a valid checksummed address
        bad = CHECKSUMMED.replace("F", "f", 1)
        assert bad != CHECKSUMMED

        # Act & Assert
        with pytest.raises(InvalidAddress):
            normalize_address(bad)

    @pytest.mark.parametrize(
        "value",
        ["", "0x123", "not an address", "0x" + "g" * 40, "0x" + "1" * 41, None, 12345],
    )
    def test_malformed_input_is_rejected(self, value):
        with pytest.raises(InvalidAddress):
            normalize_address(value)


class TestChallenge:
    def test_nonces_are_unique(self):
        assert len({generate_nonce() for _ in range(100)}) == 100

    def test_challenge_embeds_nonce(self):
        nonce = generate_nonce()
        text = build_challenge(nonce)
        assert text == f"Sign this message to authenticate. Nonce: {nonce}"


class TestRecoverAddress:
    """Tests for EIP-191 signer recovery"""

    def test_recovers_signer(self, alice):
        # Arrange
        account = alice
        signed = account.sign_message(encode_defunct(text="hello"))

        # Act
        recovered = recover_address("hello", signed.signature.hex())

        # Assert
        assert recovered == account.address

    def test_accepts_prefixed_signature(self, alice):
        account = alice
        signed = account.sign_message(encode_defunct(text="hello"))
        hex_sig = signed.signature.hex()
        prefixed = hex_sig if hex_sig.startswith("0x") else "0x" + hex_sig

        assert recover_address("hello", prefixed) == account.address

    def test_different_text_recovers_different_address(self, alice):
        """A signature is bound to the exact text it was made over"""
        account = alice
        signed = account.sign_message(encode_defunct(text="hello"))

        assert recover_address("hello!", signed.signature.hex()) != account.address

    def test_other_key_recovers_other_address(self, alice, bob):
        signed = bob.sign_message(encode_defunct(text="hello"))

        recovered = recover_address("hello", signed.signature.hex())

        assert recovered == bob.address
        assert recovered != alice.address

    def test_malformed_signature_raises(self):
        with pytest.raises(Exception):
            recover_address("hello", "0xdeadbeef")
