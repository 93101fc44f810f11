"""
WebAuthn passkey verification.

Only the pieces needed for server-side assertion checks are implemented:
client data parsing, authenticator data parsing and ES256/RS256 signature
verification against a stored SubjectPublicKeyInfo public key.
"""

import base64
import hashlib
import json
import logging
import struct
from typing import List

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.serialization import load_der_public_key

from src.domain.entities import PasskeyAlgorithm

logger = logging.getLogger(__name__)

FLAG_USER_PRESENT = 0x01
AUTHENTICATOR_DATA_MIN_LENGTH = 37  # rpIdHash(32) + flags(1) + signCount(4)


def b64url_decode(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def parse_sign_count(authenticator_data: bytes) -> int:
    return struct.unpack(">I", authenticator_data[33:37])[0]


class PasskeyVerifier:
    """
    Verifies WebAuthn ceremonies for one relying party.

    Every check returns a plain bool: malformed input, an unsupported key,
    a wrong origin or a bad signature are all just "not verified".
    """

    def __init__(self, rp_id: str, origins: List[str]):
        self.rp_id = rp_id
        self.origins = list(origins)
        self.rp_id_hash = hashlib.sha256(rp_id.encode("utf-8")).digest()

    def verify_assertion(
        self,
        public_key: str,
        algorithm: int,
        stored_sign_count: int,
        challenge: str,
        client_data_json: str,
        authenticator_data: str,
        signature: str,
    ) -> bool:
        """
        Verify a navigator.credentials.get() response.

        All byte fields are base64url encoded as sent by the browser.
        """
        try:
            client_data_bytes = b64url_decode(client_data_json)
            auth_data = b64url_decode(authenticator_data)
            signature_bytes = b64url_decode(signature)

            if not self._check_client_data(client_data_bytes, "webauthn.get", challenge):
                return False
            if not self._check_authenticator_data(auth_data):
                return False

            if parse_sign_count(auth_data) < stored_sign_count:
                logger.warning("Passkey signature counter went backwards")
                return False

            signed = auth_data + hashlib.sha256(client_data_bytes).digest()
            return self._verify_signature(public_key, algorithm, signature_bytes, signed)
        except ValueError:
            return False

    def verify_registration(
        self, challenge: str, client_data_json: str, authenticator_data: str
    ) -> bool:
        """Verify the client and authenticator data of a navigator.credentials.create() response"""
        try:
            client_data_bytes = b64url_decode(client_data_json)
            auth_data = b64url_decode(authenticator_data)
        except ValueError:
            return False
        return self._check_client_data(
            client_data_bytes, "webauthn.create", challenge
        ) and self._check_authenticator_data(auth_data)

    def is_supported_public_key(self, public_key: str, algorithm: int) -> bool:
        return self._load_public_key(public_key, algorithm) is not None

    def _check_client_data(self, client_data_bytes: bytes, expected_type: str, challenge: str) -> bool:
        try:
            client_data = json.loads(client_data_bytes.decode("utf-8"))
        except ValueError:
            return False
        if not isinstance(client_data, dict):
            return False
        if client_data.get("type") != expected_type:
            return False

        received = client_data.get("challenge")
        if not isinstance(received, str):
            return False
        try:
            if b64url_decode(received) != b64url_decode(challenge):
                return False
        except ValueError:
            return False

        if client_data.get("origin") not in self.origins:
            logger.warning("Passkey ceremony from unexpected origin")
            return False
        return True

    def _check_authenticator_data(self, auth_data: bytes) -> bool:
        if len(auth_data) < AUTHENTICATOR_DATA_MIN_LENGTH:
            return False
        if auth_data[:32] != self.rp_id_hash:
            return False
        return bool(auth_data[32] & FLAG_USER_PRESENT)

    def _load_public_key(self, public_key: str, algorithm: int):
        try:
            key = load_der_public_key(b64url_decode(public_key))
        except (ValueError, UnsupportedAlgorithm):
            return None

        if algorithm == PasskeyAlgorithm.ES256:
            if isinstance(key, ec.EllipticCurvePublicKey) and isinstance(key.curve, ec.SECP256R1):
                return key
        elif algorithm == PasskeyAlgorithm.RS256:
            if isinstance(key, rsa.RSAPublicKey):
                return key
        return None

    def _verify_signature(self, public_key: str, algorithm: int, signature: bytes, signed: bytes) -> bool:
        key = self._load_public_key(public_key, algorithm)
        if key is None:
            return False
        try:
            if algorithm == PasskeyAlgorithm.ES256:
                key.verify(signature, signed, ec.ECDSA(hashes.SHA256()))
            else:
                key.verify(signature, signed, padding.PKCS1v15(), hashes.SHA256())
        except InvalidSignature:
            return False
        return True
