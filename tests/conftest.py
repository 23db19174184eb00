"""Shared key fixtures for keyfmt tests.

Keys are generated once per session with ``cryptography`` and serialized
into every container it can write.
"""

import logging
from collections.abc import Iterator

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from keyfmt.core.logging import LOGGER_NAME
from keyfmt.crypto.types import Encoding, Format, KeyType

PASSWORD = "correct horse battery staple"

_ENCODINGS = {
    Encoding.PEM: serialization.Encoding.PEM,
    Encoding.DER: serialization.Encoding.DER,
}

_PRIVATE_FORMATS = {
    Format.PKCS8: serialization.PrivateFormat.PKCS8,
    # OpenSSL "traditional" is PKCS1 for RSA and SEC1 for EC keys.
    Format.PKCS1: serialization.PrivateFormat.TraditionalOpenSSL,
    Format.SEC1: serialization.PrivateFormat.TraditionalOpenSSL,
}

_PUBLIC_FORMATS = {
    Format.SPKI: serialization.PublicFormat.SubjectPublicKeyInfo,
    Format.PKCS1: serialization.PublicFormat.PKCS1,
}


def _full_length_rsa(bits: int) -> rsa.RSAPrivateKey:
    """RSA key whose private exponent fills the modulus byte length."""
    while True:
        key = rsa.generate_private_key(public_exponent=65537, key_size=bits)
        if key.private_numbers().d.bit_length() > bits - 8:
            return key


def _documents(private_key, private_formats, public_formats) -> dict:
    docs = {}
    public_key = private_key.public_key()
    for encoding, wire in _ENCODINGS.items():
        for fmt in private_formats:
            docs[(fmt, KeyType.PRIVATE, encoding)] = private_key.private_bytes(
                encoding=wire,
                format=_PRIVATE_FORMATS[fmt],
                encryption_algorithm=serialization.NoEncryption(),
            )
        for fmt in public_formats:
            docs[(fmt, KeyType.PUBLIC, encoding)] = public_key.public_bytes(
                encoding=wire,
                format=_PUBLIC_FORMATS[fmt],
            )
    return docs


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment settings out of the tests."""
    monkeypatch.delenv("KEYFMT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("KEYFMT_PEM_LINE_ENDING", raising=False)
    monkeypatch.delenv("KEYFMT_PBKDF2_ITERATIONS", raising=False)


@pytest.fixture(autouse=True)
def _reset_logger() -> Iterator[None]:
    """Drop handlers bound to a previous test's captured stderr."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return _full_length_rsa(2048)


@pytest.fixture(scope="session")
def rsa_4096_key() -> rsa.RSAPrivateKey:
    return _full_length_rsa(4096)


@pytest.fixture(scope="session")
def ec_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ed25519_key() -> ed25519.Ed25519PrivateKey:
    return ed25519.Ed25519PrivateKey.generate()


@pytest.fixture(scope="session")
def rsa_docs(rsa_key: rsa.RSAPrivateKey) -> dict:
    """RSA documents keyed by (format, key type, encoding)."""
    return _documents(
        rsa_key, (Format.PKCS1, Format.PKCS8), (Format.SPKI, Format.PKCS1)
    )


@pytest.fixture(scope="session")
def ec_docs(ec_key: ec.EllipticCurvePrivateKey) -> dict:
    """P-256 documents keyed by (format, key type, encoding)."""
    return _documents(ec_key, (Format.SEC1, Format.PKCS8), (Format.SPKI,))


@pytest.fixture(scope="session")
def ed25519_docs(ed25519_key: ed25519.Ed25519PrivateKey) -> dict:
    """Ed25519 documents keyed by (format, key type, encoding)."""
    return _documents(ed25519_key, (Format.PKCS8,), (Format.SPKI,))


@pytest.fixture(scope="session")
def encrypted_pkcs8(rsa_key: rsa.RSAPrivateKey) -> dict:
    """Password protected PKCS8 documents keyed by encoding."""
    return {
        encoding: rsa_key.private_bytes(
            encoding=wire,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.BestAvailableEncryption(
                PASSWORD.encode()
            ),
        )
        for encoding, wire in _ENCODINGS.items()
    }


@pytest.fixture
def password() -> str:
    return PASSWORD


@pytest.fixture(scope="session")
def encrypted_pairs(
    rsa_key: rsa.RSAPrivateKey,
    ec_key: ec.EllipticCurvePrivateKey,
    ed25519_key: ed25519.Ed25519PrivateKey,
) -> dict:
    """(plain PKCS8 DER, encrypted PKCS8 PEM) for each key, by name."""
    pairs = {}
    for name, key in (("rsa", rsa_key), ("ec", ec_key), ("ed25519", ed25519_key)):
        plain = key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        encrypted = key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.BestAvailableEncryption(
                PASSWORD.encode()
            ),
        )
        pairs[name] = (plain, encrypted)
    return pairs
