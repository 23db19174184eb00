"""Discovery probes: one per (container, encoding) pair.

A probe's ``decode`` receives DER bytes (already unarmored for PEM probes)
and either returns a descriptor or raises ``ValueError``/``TypeError`` when
the bytes are not its container. Probes for encrypted PKCS8 raise
``MissingInputError`` or ``DecryptionError``; those end discovery.
"""

from collections.abc import Callable, Sequence
from enum import StrEnum
from typing import NamedTuple

from asn1crypto import core

from keyfmt.core.errors import BadContainerError, MissingInputError
from keyfmt.crypto import alg_id, codec, oids
from keyfmt.crypto.types import (
    Algorithm,
    AlgorithmIdData,
    Encoding,
    Format,
    KeyDescriptor,
    KeyMaterial,
    KeyType,
    algorithm_for_oid,
)

RSA_ALGORITHMS = (Algorithm.RSA, Algorithm.RSASSA_PSS)


class Category(StrEnum):
    PUBLIC = "public"
    PRIVATE = "private"


Decoder = Callable[[bytes, Encoding, str | None], KeyDescriptor]


class Probe(NamedTuple):
    name: str
    category: Category
    encoding: Encoding
    label: str | None
    decode: Decoder


def _byte_length(value: int) -> int:
    return (value.bit_length() + 7) // 8


def _rsa_public_bits(der: bytes) -> int:
    key = codec.decode_rsa_public(der)
    return 8 * _byte_length(key["modulus"].native)


def _rsa_private_bits(der: bytes) -> int:
    key = codec.decode_rsa_private(der)
    return 8 * _byte_length(key["private_exponent"].native)


def _curve_bits(alg_data: AlgorithmIdData) -> int | None:
    curve = alg_id.parameter_oid(alg_data.parameters)
    return oids.CURVE_BITS.get(curve) if curve else None


def decode_spki(der: bytes, encoding: Encoding, password: str | None) -> KeyDescriptor:
    info = codec.decode_spki(der)
    algorithm, alg_data = alg_id.parse(info["algorithm"])
    material = info["subject_public_key"].native
    bits = None
    if algorithm in RSA_ALGORITHMS:
        bits = _rsa_public_bits(material)
    elif algorithm is Algorithm.ECDSA:
        bits = _curve_bits(alg_data)
    return KeyDescriptor(
        encoding=encoding,
        format=Format.SPKI,
        key_type=KeyType.PUBLIC,
        algorithm=algorithm,
        key_material=KeyMaterial(material),
        key_length_bits=bits,
        algorithm_identifier=alg_data,
    )


def decode_pkcs1_public(
    der: bytes, encoding: Encoding, password: str | None
) -> KeyDescriptor:
    bits = _rsa_public_bits(der)
    return KeyDescriptor(
        encoding=encoding,
        format=Format.PKCS1,
        key_type=KeyType.PUBLIC,
        algorithm=Algorithm.RSA,
        key_material=KeyMaterial(der),
        key_length_bits=bits,
    )


def _pkcs8_descriptor(der: bytes, encoding: Encoding, encrypted: bool) -> KeyDescriptor:
    info = codec.decode_pkcs8(der)
    algorithm, alg_data = alg_id.parse(info["private_key_algorithm"])
    material = info["private_key"].native
    bits = None
    if algorithm in RSA_ALGORITHMS:
        bits = _rsa_private_bits(material)
    elif algorithm is Algorithm.ECDSA:
        codec.decode_ec_private(material)
        bits = _curve_bits(alg_data)
    return KeyDescriptor(
        encoding=encoding,
        format=Format.PKCS8,
        key_type=KeyType.PRIVATE,
        algorithm=algorithm,
        key_material=KeyMaterial(material),
        key_length_bits=bits,
        algorithm_identifier=alg_data,
        encrypted=encrypted,
    )


def decode_pkcs8(der: bytes, encoding: Encoding, password: str | None) -> KeyDescriptor:
    return _pkcs8_descriptor(der, encoding, encrypted=False)


def decode_encrypted_pkcs8(
    der: bytes, encoding: Encoding, password: str | None
) -> KeyDescriptor:
    codec.decode_encrypted_pkcs8(der)
    if password is None:
        raise MissingInputError("password")
    plain = codec.decrypt_pkcs8(der, password)
    try:
        return _pkcs8_descriptor(plain, encoding, encrypted=True)
    except (ValueError, TypeError) as exc:
        raise BadContainerError(
            f"Decrypted PKCS8 container is malformed: {exc}"
        ) from exc


def decode_pkcs1_private(
    der: bytes, encoding: Encoding, password: str | None
) -> KeyDescriptor:
    bits = _rsa_private_bits(der)
    return KeyDescriptor(
        encoding=encoding,
        format=Format.PKCS1,
        key_type=KeyType.PRIVATE,
        algorithm=Algorithm.RSA,
        key_material=KeyMaterial(der),
        key_length_bits=bits,
    )


def decode_sec1(der: bytes, encoding: Encoding, password: str | None) -> KeyDescriptor:
    key = codec.decode_ec_private(der)
    curve = key["parameters"].dotted if key["parameters"].native is not None else None
    algorithm = Algorithm.ECDSA
    alg_data = None
    if curve is not None:
        named = algorithm_for_oid(curve)
        if named not in (Algorithm.UNKNOWN, Algorithm.ECDSA):
            # RFC 8410 curve stored in an ECPrivateKey shell.
            algorithm = named
            alg_data = AlgorithmIdData(oid=curve)
        else:
            alg_data = AlgorithmIdData(
                oid=oids.EC_PUBLIC_KEY,
                parameters=core.ObjectIdentifier(curve).dump(),
            )
    return KeyDescriptor(
        encoding=encoding,
        format=Format.SEC1,
        key_type=KeyType.PRIVATE,
        algorithm=algorithm,
        key_material=KeyMaterial(der),
        key_length_bits=oids.CURVE_BITS.get(curve) if curve else None,
        algorithm_identifier=alg_data,
    )


def _text_then_binary(
    category: Category, entries: Sequence[tuple[str, str, Decoder]]
) -> tuple[Probe, ...]:
    pem_probes = [
        Probe(f"{name}-pem", category, Encoding.PEM, label, fn)
        for name, label, fn in entries
    ]
    der_probes = [
        Probe(f"{name}-der", category, Encoding.DER, None, fn)
        for name, _label, fn in entries
    ]
    return (*pem_probes, *der_probes)


PUBLIC_PROBES = _text_then_binary(
    Category.PUBLIC,
    [
        ("spki", codec.LABEL_PUBLIC_KEY, decode_spki),
        ("pkcs1-public", codec.LABEL_RSA_PUBLIC_KEY, decode_pkcs1_public),
    ],
)

PRIVATE_PROBES = _text_then_binary(
    Category.PRIVATE,
    [
        ("pkcs8", codec.LABEL_PRIVATE_KEY, decode_pkcs8),
        ("pkcs8-encrypted", codec.LABEL_ENCRYPTED_PRIVATE_KEY, decode_encrypted_pkcs8),
        ("pkcs1-private", codec.LABEL_RSA_PRIVATE_KEY, decode_pkcs1_private),
        ("sec1", codec.LABEL_EC_PRIVATE_KEY, decode_sec1),
    ],
)


def build_probe_order(
    public: Sequence[Probe], private: Sequence[Probe]
) -> tuple[Probe, ...]:
    """Every public probe runs before any private probe."""
    for probe in public:
        if probe.category is not Category.PUBLIC:
            raise ValueError(f"probe {probe.name} is not a public-key probe")
    for probe in private:
        if probe.category is not Category.PRIVATE:
            raise ValueError(f"probe {probe.name} is not a private-key probe")
    return (*public, *private)


PROBE_ORDER = build_probe_order(PUBLIC_PROBES, PRIVATE_PROBES)
