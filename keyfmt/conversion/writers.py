"""Container writers used by the conversion engine.

Each writer takes key material in the shape discovery stores it and returns
DER. Material the codec cannot re-read as the expected structure raises
``BadContainerError``.
"""

from collections.abc import Callable
from typing import TypeVar

from asn1crypto import core

from keyfmt.core.errors import BadContainerError, NotSupportedError
from keyfmt.crypto import alg_id, codec, oids
from keyfmt.crypto.schemas import (
    EC_PRIVATE_KEY_VERSION,
    AlgorithmIdentifier,
    ECPrivateKey,
    PrivateKeyInfo,
    RSAPublicKey,
    SubjectPublicKeyInfo,
)
from keyfmt.crypto.types import Algorithm, AlgorithmIdData, OID_BY_ALGORITHM

T = TypeVar("T")

PKCS8_VERSION = 0


def _reread(decode: Callable[[bytes], T], material: bytes, what: str) -> T:
    try:
        return decode(material)
    except (ValueError, TypeError) as exc:
        raise BadContainerError(f"Key material is not a valid {what}: {exc}") from exc


def rsa_private_pkcs1(material: bytes) -> bytes:
    return _reread(codec.decode_rsa_private, material, "RSAPrivateKey").dump()


def rsa_private_pkcs8(material: bytes, algorithm_id: AlgorithmIdentifier) -> bytes:
    _reread(codec.decode_rsa_private, material, "RSAPrivateKey")
    info = PrivateKeyInfo(
        {
            "version": PKCS8_VERSION,
            "private_key_algorithm": algorithm_id,
            "private_key": material,
        }
    )
    return info.dump()


def rsa_public_pkcs1(material: bytes) -> bytes:
    return _reread(codec.decode_rsa_public, material, "RSAPublicKey").dump()


def rsa_public_spki(material: bytes, algorithm_id: AlgorithmIdentifier) -> bytes:
    _reread(codec.decode_rsa_public, material, "RSAPublicKey")
    return spki(material, algorithm_id)


def spki(material: bytes, algorithm_id: AlgorithmIdentifier) -> bytes:
    info = SubjectPublicKeyInfo(
        {"algorithm": algorithm_id, "subject_public_key": material}
    )
    return info.dump()


def rsa_algorithm_id(
    target: Algorithm, source: Algorithm, source_id: AlgorithmIdData | None
) -> AlgorithmIdentifier:
    """rsaEncryption, or id-RSASSA-PSS keeping the source PSS parameters."""
    if target is Algorithm.RSASSA_PSS:
        parameters = None
        if source is Algorithm.RSASSA_PSS and source_id is not None:
            parameters = source_id.parameters
        return alg_id.rsassa_pss(parameters)
    return alg_id.rsa_encryption()


def curve_algorithm_id(
    algorithm: Algorithm, source_id: AlgorithmIdData | None
) -> AlgorithmIdentifier:
    if source_id is not None:
        return alg_id.from_data(source_id)
    if algorithm is Algorithm.ECDSA:
        raise NotSupportedError("EC key has no named curve to write")
    return alg_id.for_curve_algorithm(algorithm)


def _named_curve(algorithm: Algorithm, source_id: AlgorithmIdData | None) -> str | None:
    if algorithm is Algorithm.ECDSA:
        if source_id is None:
            return None
        return alg_id.parameter_oid(source_id.parameters)
    return OID_BY_ALGORITHM.get(algorithm)


def sec1(
    material: bytes, algorithm: Algorithm, source_id: AlgorithmIdData | None
) -> bytes:
    """Write an ECPrivateKey.

    ECPrivateKey material is re-emitted, gaining a named curve when it has
    none. CurvePrivateKey material is wrapped with the algorithm OID as the
    curve.
    """
    try:
        key = codec.decode_ec_private(material)
    except (ValueError, TypeError):
        key = None
    if key is not None:
        curve = _named_curve(algorithm, source_id)
        if key["parameters"].native is not None or curve is None:
            return key.dump()
        public_key = key["public_key"].native
        return ECPrivateKey(
            {
                "version": EC_PRIVATE_KEY_VERSION,
                "private_key": key["private_key"].native,
                "parameters": curve,
                "public_key": public_key,
            }
        ).dump()

    seed = _reread(
        codec.decode_curve_private, material, "ECPrivateKey or CurvePrivateKey"
    )
    curve = OID_BY_ALGORITHM.get(algorithm)
    if curve is None or algorithm is Algorithm.ECDSA:
        raise BadContainerError(f"{algorithm} key material is not an ECPrivateKey")
    return ECPrivateKey(
        {
            "version": EC_PRIVATE_KEY_VERSION,
            "private_key": seed,
            "parameters": curve,
        }
    ).dump()


def public_from_private(
    algorithm: Algorithm, material: bytes, source_id: AlgorithmIdData | None
) -> tuple[bytes, AlgorithmIdData | None]:
    """Public half of a private key, taken from fields the container stores."""
    if algorithm in (Algorithm.RSA, Algorithm.RSASSA_PSS):
        key = _reread(codec.decode_rsa_private, material, "RSAPrivateKey")
        public = RSAPublicKey(
            {
                "modulus": key["modulus"].native,
                "public_exponent": key["public_exponent"].native,
            }
        )
        return public.dump(), source_id

    if algorithm is Algorithm.ECDSA:
        key = _reread(codec.decode_ec_private, material, "ECPrivateKey")
        point = key["public_key"].native
        if point is None:
            raise NotSupportedError("EC private key does not carry its public key")
        if source_id is None or source_id.parameters is None:
            if key["parameters"].native is None:
                raise NotSupportedError("EC private key has no named curve")
            source_id = AlgorithmIdData(
                oid=oids.EC_PUBLIC_KEY,
                parameters=core.ObjectIdentifier(key["parameters"].dotted).dump(),
            )
        return point, source_id

    raise NotSupportedError(
        f"Cannot derive a public key from a {algorithm} private key"
    )
