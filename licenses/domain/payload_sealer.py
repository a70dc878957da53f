"""
Password-based payload sealing.

License payloads are sealed with AES-256-GCM under a key derived from the
activation password with PBKDF2-HMAC-SHA256. Two wire forms are produced:

- compact: ``v1:`` + base64(salt || iv || tag || ciphertext)
- verbose: a mapping naming the algorithm, KDF parameters and each part
  in base64
"""
import base64
import binascii
import json
import os
from typing import Any, Dict, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from core.domain.exceptions import SealedPayloadError

ALGORITHM = "aes-256-gcm"
KDF = "pbkdf2"
DIGEST = "sha256"
COMPACT_PREFIX = "v1:"

SALT_BYTES = 16
IV_BYTES = 12
TAG_BYTES = 16
KEY_BYTES = 32
DEFAULT_ITERATIONS = 150000


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _unb64(value: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise SealedPayloadError("Sealed payload is not valid base64") from e


class PayloadSealer:
    """Seals and opens JSON payloads with a password."""

    def __init__(self, iterations: int = DEFAULT_ITERATIONS):
        """
        Initialize sealer.

        Args:
            iterations: PBKDF2 iteration count used for new seals
        """
        self.iterations = iterations

    @staticmethod
    def _derive_key(password: str, salt: bytes, iterations: int) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_BYTES,
            salt=salt,
            iterations=iterations,
        )
        return kdf.derive(password.encode("utf-8"))

    @staticmethod
    def _encode(payload: Dict[str, Any]) -> bytes:
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    def _encrypt(self, payload: Dict[str, Any], password: str):
        salt = os.urandom(SALT_BYTES)
        iv = os.urandom(IV_BYTES)
        key = self._derive_key(password, salt, self.iterations)
        # AESGCM appends the tag to the ciphertext
        sealed = AESGCM(key).encrypt(iv, self._encode(payload), None)
        return salt, iv, sealed[-TAG_BYTES:], sealed[:-TAG_BYTES]

    def seal(self, payload: Dict[str, Any], password: str) -> str:
        """
        Seal a payload into the compact form.

        Args:
            payload: JSON-serializable mapping
            password: Password to derive the key from

        Returns:
            Compact sealed string
        """
        salt, iv, tag, ciphertext = self._encrypt(payload, password)
        return COMPACT_PREFIX + _b64(salt + iv + tag + ciphertext)

    def seal_verbose(self, payload: Dict[str, Any], password: str) -> Dict[str, Any]:
        """
        Seal a payload into the verbose form.

        Args:
            payload: JSON-serializable mapping
            password: Password to derive the key from

        Returns:
            Mapping with algorithm, KDF parameters and base64 parts
        """
        salt, iv, tag, ciphertext = self._encrypt(payload, password)
        return {
            "algorithm": ALGORITHM,
            "kdf": KDF,
            "iterations": self.iterations,
            "digest": DIGEST,
            "iv": _b64(iv),
            "salt": _b64(salt),
            "tag": _b64(tag),
            "ciphertext": _b64(ciphertext),
        }

    def unseal(self, sealed: Union[str, Dict[str, Any]], password: str) -> Dict[str, Any]:
        """
        Open a sealed payload in either form.

        Args:
            sealed: Compact string (with or without prefix) or verbose mapping
            password: Password the payload was sealed with

        Returns:
            The original payload

        Raises:
            SealedPayloadError: If the input is malformed or the tag does not verify
        """
        if isinstance(sealed, dict):
            if sealed.get("algorithm") != ALGORITHM or sealed.get("kdf") != KDF:
                raise SealedPayloadError("Unsupported sealing algorithm")
            if sealed.get("digest", DIGEST) != DIGEST:
                raise SealedPayloadError("Unsupported key derivation digest")
            try:
                iterations = int(sealed["iterations"])
                salt = _unb64(sealed["salt"])
                iv = _unb64(sealed["iv"])
                tag = _unb64(sealed["tag"])
                ciphertext = _unb64(sealed["ciphertext"])
            except (KeyError, TypeError, ValueError) as e:
                raise SealedPayloadError("Sealed payload is missing fields") from e
        elif isinstance(sealed, str):
            body = sealed[len(COMPACT_PREFIX):] if sealed.startswith(COMPACT_PREFIX) else sealed
            raw = _unb64(body)
            if len(raw) <= SALT_BYTES + IV_BYTES + TAG_BYTES:
                raise SealedPayloadError("Sealed payload is truncated")
            iterations = self.iterations
            salt = raw[:SALT_BYTES]
            iv = raw[SALT_BYTES:SALT_BYTES + IV_BYTES]
            tag = raw[SALT_BYTES + IV_BYTES:SALT_BYTES + IV_BYTES + TAG_BYTES]
            ciphertext = raw[SALT_BYTES + IV_BYTES + TAG_BYTES:]
        else:
            raise SealedPayloadError("Unsupported sealed payload type")

        if len(iv) != IV_BYTES or len(tag) != TAG_BYTES:
            raise SealedPayloadError("Sealed payload is truncated")

        key = self._derive_key(password, salt, iterations)
        try:
            plaintext = AESGCM(key).decrypt(iv, ciphertext + tag, None)
        except InvalidTag as e:
            raise SealedPayloadError() from e
        return json.loads(plaintext.decode("utf-8"))
