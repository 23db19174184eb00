"""DER/PEM decoding and encoding of key containers.

Decoders raise ``ValueError`` when the bytes are not the requested
structure; discovery treats that as "probe did not match". PKCS8
encryption works on the DER as stored: the enclosed PrivateKeyInfo is
never re-serialized through a key object.
"""

import os
from typing import TypeVar

from asn1crypto import algos, core, pem
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from keyfmt.core.errors import BadContainerError, DecryptionError
from keyfmt.crypto.schemas import (
    EC_PRIVATE_KEY_VERSION,
    ECPrivateKey,
    EncryptedPrivateKeyInfo,
    PrivateKeyInfo,
    RSAPrivateKey,
    RSAPublicKey,
    SubjectPublicKeyInfo,
)
from keyfmt.crypto.types import Format, KeyType

T = TypeVar("T", bound=core.Asn1Value)

LABEL_PUBLIC_KEY = "PUBLIC KEY"
LABEL_RSA_PUBLIC_KEY = "RSA PUBLIC KEY"
LABEL_PRIVATE_KEY = "PRIVATE KEY"
LABEL_ENCRYPTED_PRIVATE_KEY = "ENCRYPTED PRIVATE KEY"
LABEL_RSA_PRIVATE_KEY = "RSA PRIVATE KEY"
LABEL_EC_PRIVATE_KEY = "EC PRIVATE KEY"

PBKDF2_SALT_BYTES = 16
AES_256_KEY_BYTES = 32
AES_BLOCK_BITS = 128

PRF_HASHES: dict[str, type[hashes.HashAlgorithm]] = {
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}

PEM_LABELS: dict[tuple[Format, KeyType], str] = {
    (Format.SPKI, KeyType.PUBLIC): LABEL_PUBLIC_KEY,
    (Format.PKCS1, KeyType.PUBLIC): LABEL_RSA_PUBLIC_KEY,
    (Format.PKCS8, KeyType.PRIVATE): LABEL_PRIVATE_KEY,
    (Format.PKCS1, KeyType.PRIVATE): LABEL_RSA_PRIVATE_KEY,
    (Format.SEC1, KeyType.PRIVATE): LABEL_EC_PRIVATE_KEY,
}


def is_text(raw: bytes) -> bool:
    """True when the buffer decodes as UTF-8 text."""
    try:
        raw.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def pem_decode(raw: bytes, label: str) -> bytes:
    """Unwrap a single PEM document carrying ``label``; return its DER."""
    if not pem.detect(raw):
        raise ValueError("not a PEM document")
    type_name, headers, der = pem.unarmor(raw)
    if type_name != label:
        raise ValueError(f"PEM label {type_name!r} is not {label!r}")
    if headers:
        raise ValueError("PEM documents with headers are not supported")
    return der


def pem_encode(label: str, der: bytes, line_ending: bytes = b"\n") -> bytes:
    """Wrap DER bytes in a PEM document using ``line_ending`` between lines."""
    text = pem.armor(label, der)
    if line_ending != b"\n":
        text = text.replace(b"\n", line_ending)
    return text


def _load(schema: type[T], der: bytes) -> T:
    try:
        value = schema.load(der, strict=True)
        # Parsing is lazy; touching .native walks the whole structure.
        value.native
    except Exception as exc:
        # asn1crypto reports corrupt nested values with assorted error types.
        raise ValueError(f"not a valid {schema.__name__}: {exc!r}") from exc
    if isinstance(value, core.Sequence) and len(value.children) > len(value._fields):
        # asn1crypto keeps unexpected trailing children instead of failing.
        raise ValueError(f"{schema.__name__} has more fields than expected")
    return value


def decode_oid(der: bytes) -> str:
    """Dotted form of a DER OBJECT IDENTIFIER."""
    return _load(core.ObjectIdentifier, der).dotted


def decode_spki(der: bytes) -> SubjectPublicKeyInfo:
    return _load(SubjectPublicKeyInfo, der)


def decode_pkcs8(der: bytes) -> PrivateKeyInfo:
    info = _load(PrivateKeyInfo, der)
    if info["version"].native not in (0, 1):
        raise ValueError(f"unsupported PrivateKeyInfo version {info['version'].native}")
    return info


def decode_encrypted_pkcs8(der: bytes) -> EncryptedPrivateKeyInfo:
    return _load(EncryptedPrivateKeyInfo, der)


def decode_rsa_private(der: bytes) -> RSAPrivateKey:
    return _load(RSAPrivateKey, der)


def decode_rsa_public(der: bytes) -> RSAPublicKey:
    return _load(RSAPublicKey, der)


def decode_ec_private(der: bytes) -> ECPrivateKey:
    key = _load(ECPrivateKey, der)
    if key["version"].native != EC_PRIVATE_KEY_VERSION:
        raise ValueError(f"unsupported ECPrivateKey version {key['version'].native}")
    return key


def decode_curve_private(der: bytes) -> bytes:
    """RFC 8410 CurvePrivateKey: an OCTET STRING holding the raw key."""
    return _load(core.OctetString, der).native


def _pbes2_cipher(scheme: algos.EncryptionAlgorithm, password: str) -> Cipher:
    """AES-CBC cipher keyed from the PBKDF2 parameters of a PBES2 scheme."""
    if scheme["algorithm"].native != "pbes2":
        raise DecryptionError(
            f"Unsupported PKCS8 encryption scheme {scheme['algorithm'].native}"
        )
    try:
        kdf = scheme.kdf
        prf = scheme.kdf_hmac
        cipher = scheme.encryption_cipher
        mode = scheme.encryption_mode
        if kdf != "pbkdf2" or prf not in PRF_HASHES or (cipher, mode) != ("aes", "cbc"):
            raise DecryptionError(
                f"Unsupported PBES2 parameters {kdf}/{prf}/{cipher}-{mode}"
            )
        key = PBKDF2HMAC(
            algorithm=PRF_HASHES[prf](),
            length=scheme.key_length,
            salt=scheme.kdf_salt,
            iterations=scheme.kdf_iterations,
        ).derive(password.encode())
        return Cipher(algorithms.AES(key), modes.CBC(scheme.encryption_iv))
    except (ValueError, TypeError, KeyError) as exc:
        raise DecryptionError(f"Malformed PBES2 parameters: {exc}") from exc


def decrypt_pkcs8(der: bytes, password: str) -> bytes:
    """Decrypt an EncryptedPrivateKeyInfo into the enclosed PrivateKeyInfo DER.

    Only PBES2 with PBKDF2 and AES-CBC is understood. The plaintext is
    returned as stored, so the key's AlgorithmIdentifier is never rewritten.
    """
    info = decode_encrypted_pkcs8(der)
    cipher = _pbes2_cipher(info["encryption_algorithm"], password)
    decryptor = cipher.decryptor()
    unpadder = padding.PKCS7(AES_BLOCK_BITS).unpadder()
    try:
        padded = decryptor.update(info["encrypted_data"].native) + decryptor.finalize()
        plain = unpadder.update(padded) + unpadder.finalize()
        decode_pkcs8(plain)
    except ValueError as exc:
        raise DecryptionError(
            "Cannot decrypt PKCS8 container: bad password or data"
        ) from exc
    return plain


def encrypt_pkcs8(der: bytes, password: str, iterations: int) -> bytes:
    """Wrap PrivateKeyInfo DER in PBES2 (PBKDF2-HMAC-SHA256, AES-256-CBC)."""
    try:
        decode_pkcs8(der)
    except ValueError as exc:
        raise BadContainerError(f"Cannot encrypt malformed PKCS8: {exc}") from exc
    salt = os.urandom(PBKDF2_SALT_BYTES)
    iv = os.urandom(AES_BLOCK_BITS // 8)
    key = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=AES_256_KEY_BYTES,
        salt=salt,
        iterations=iterations,
    ).derive(password.encode())
    padder = padding.PKCS7(AES_BLOCK_BITS).padder()
    padded = padder.update(der) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    encrypted = encryptor.update(padded) + encryptor.finalize()

    scheme = algos.EncryptionAlgorithm(
        {
            "algorithm": "pbes2",
            "parameters": {
                "key_derivation_func": {
                    "algorithm": "pbkdf2",
                    "parameters": {
                        "salt": {"specified": salt},
                        "iteration_count": iterations,
                        "prf": {"algorithm": "sha256", "parameters": core.Null()},
                    },
                },
                "encryption_scheme": {"algorithm": "aes256_cbc", "parameters": iv},
            },
        }
    )
    info = EncryptedPrivateKeyInfo(
        {"encryption_algorithm": scheme, "encrypted_data": encrypted}
    )
    return info.dump()
