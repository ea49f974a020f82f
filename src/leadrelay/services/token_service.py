"""
Redirect token codec.

A token is ``<version>:<iv>:<ciphertext>`` where ``iv`` and ``ciphertext`` are
unpadded URL-safe base64. ``v1`` is AES-256-GCM with a random 96-bit IV, the
version tag as associated data, and a key derived from the configured secret
with HKDF-SHA256. Decoders are looked up by version so a second format can be
accepted alongside ``v1`` while tokens in flight are migrated.
"""
import base64
import binascii
import os
from typing import Callable, Dict
from urllib.parse import urlencode

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from leadrelay.utils.exceptions import DecryptionFailure
TOKEN_SEPARATOR = ":"
IV_BYTES = 12
TAG_BYTES = 16


def b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64decode(segment: str) -> bytes:
    """Strict unpadded URL-safe base64; anything non-canonical is rejected"""
    try:
        data = base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
    except (binascii.Error, ValueError):
        raise DecryptionFailure("malformed base64")
    # urlsafe_b64decode silently skips stray characters and unused bits
    if b64encode(data) != segment:
        raise DecryptionFailure("non-canonical base64")
    return data


def derive_key(secret: str, version: str) -> bytes:
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=32,
        salt=None,
        info=f"leadrelay-redirect-token-{version}".encode("ascii"),
    )
    return hkdf.derive(secret.encode("utf-8"))


class TokenCodec:
    """
    Encrypts a destination URL into an opaque token and back.
    """

    CURRENT_VERSION = "v1"

    def __init__(self, secret: str, redirect_base_url: str = "http://localhost:8000"):
        if not secret:
            raise ValueError("An encryption secret is required")
        self.redirect_base_url = redirect_base_url
        self._v1 = AESGCM(derive_key(secret, "v1"))
        self._decoders: Dict[str, Callable[[str, str], str]] = {
            "v1": self._decrypt_v1,
        }

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a string into a current-version token"""
        iv = os.urandom(IV_BYTES)
        version = self.CURRENT_VERSION
        ciphertext = self._v1.encrypt(iv, plaintext.encode("utf-8"), version.encode("ascii"))
        return TOKEN_SEPARATOR.join([version, b64encode(iv), b64encode(ciphertext)])

    def decrypt(self, token: str) -> str:
        """
        Recover the string inside a token.

        Raises:
            DecryptionFailure: On an unknown version, bad structure, wrong key
                or any tampering. Nothing partial is ever returned.
        """
        version, sep, body = token.partition(TOKEN_SEPARATOR)
        if not sep:
            raise DecryptionFailure("missing version tag")

        decoder = self._decoders.get(version)
        if decoder is None:
            raise DecryptionFailure(f"unsupported token version {version!r}")
        return decoder(version, body)

    def _decrypt_v1(self, version: str, body: str) -> str:
        parts = body.split(TOKEN_SEPARATOR)
        if len(parts) != 2:
            raise DecryptionFailure("expected iv:ciphertext")

        iv = b64decode(parts[0])
        ciphertext = b64decode(parts[1])
        if len(iv) != IV_BYTES or len(ciphertext) < TAG_BYTES:
            raise DecryptionFailure("bad iv or ciphertext length")

        try:
            plaintext = self._v1.decrypt(iv, ciphertext, version.encode("ascii"))
        except InvalidTag:
            raise DecryptionFailure("authentication failed")

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError:
            raise DecryptionFailure("plaintext is not utf-8")

    def redirect_url_for_token(self, token: str) -> str:
        """Redirect endpoint URL carrying an already issued token"""
        return f"{self.redirect_base_url.rstrip('/')}/redirect?{urlencode({'token': token})}"

    def build_redirect_url(self, destination: str) -> str:
        """Redirect endpoint URL that will bounce the browser to ``destination``"""
        return self.redirect_url_for_token(self.encrypt(destination))
