"""Validate a conversion request and re-serialize a discovered key."""

import logging
from typing import NamedTuple

from keyfmt.conversion import writers
from keyfmt.core.errors import (
    NotSupportedError,
    TypeMismatchError,
    UnknownAlgorithmError,
)
from keyfmt.core.settings import KeyfmtSettings
from keyfmt.crypto import codec
from keyfmt.crypto.types import (
    Algorithm,
    AlgorithmIdData,
    ConversionTarget,
    Encoding,
    Format,
    KeyDescriptor,
    KeyType,
)

logger = logging.getLogger(__name__)

RSA_FAMILY = frozenset({Algorithm.RSA, Algorithm.RSASSA_PSS})
CURVE_ALGORITHMS = frozenset(
    {
        Algorithm.ECDSA,
        Algorithm.X25519,
        Algorithm.X448,
        Algorithm.ED25519,
        Algorithm.ED448,
        Algorithm.ED25519_PH,
        Algorithm.ED448_PH,
    }
)


class Document(NamedTuple):
    """DER output of the dispatch step, before the encoding step."""

    format: Format
    key_type: KeyType
    der: bytes


def family(algorithm: Algorithm) -> frozenset[Algorithm]:
    """Algorithms a key of ``algorithm`` may be converted to."""
    if algorithm in RSA_FAMILY:
        return RSA_FAMILY
    return frozenset({algorithm})


def resolve_defaults(
    descriptor: KeyDescriptor, target: ConversionTarget
) -> ConversionTarget:
    """Fill every unset target field from the descriptor."""
    update = {
        field: getattr(descriptor, field)
        for field in ("encoding", "format", "algorithm", "key_type")
        if getattr(target, field) is None
    }
    return target.model_copy(update=update)


def check_compatible(descriptor: KeyDescriptor, target: ConversionTarget) -> None:
    """Raise if no conversion path exists from ``descriptor`` to ``target``."""
    if descriptor.key_type is KeyType.PUBLIC and target.key_type is not KeyType.PUBLIC:
        logger.info("refusing to convert a public key to %s", target.key_type)
        raise TypeMismatchError()
    if target.key_type is KeyType.KEYPAIR:
        logger.info("refusing key pair output")
        raise NotSupportedError("Key pair output is not supported")
    if descriptor.algorithm is Algorithm.UNKNOWN:
        logger.info("refusing to convert a key with an unknown algorithm")
        raise UnknownAlgorithmError("Cannot convert a key with an unknown algorithm")
    if target.algorithm not in family(descriptor.algorithm):
        logger.info(
            "refusing %s to %s conversion", descriptor.algorithm, target.algorithm
        )
        raise NotSupportedError(
            f"Cannot convert a {descriptor.algorithm} key to {target.algorithm}"
        )


def _rsa(
    descriptor: KeyDescriptor,
    target: ConversionTarget,
    key_type: KeyType,
    material: bytes,
    source_id: AlgorithmIdData | None,
) -> Document:
    algorithm_id = writers.rsa_algorithm_id(
        target.algorithm, descriptor.algorithm, source_id
    )
    if key_type is KeyType.PRIVATE:
        if target.format is Format.PKCS1:
            return Document(Format.PKCS1, key_type, writers.rsa_private_pkcs1(material))
        if target.format is Format.PKCS8:
            der = writers.rsa_private_pkcs8(material, algorithm_id)
            return Document(Format.PKCS8, key_type, der)
    else:
        if target.format is Format.PKCS1:
            return Document(Format.PKCS1, key_type, writers.rsa_public_pkcs1(material))
        if target.format in (Format.PKCS8, Format.SPKI):
            der = writers.rsa_public_spki(material, algorithm_id)
            return Document(Format.SPKI, key_type, der)
    raise NotSupportedError(f"Cannot write an RSA {key_type} key as {target.format}")


def _curve(
    descriptor: KeyDescriptor,
    target: ConversionTarget,
    key_type: KeyType,
    material: bytes,
    source_id: AlgorithmIdData | None,
) -> Document:
    if target.format is Format.PKCS1:
        logger.info("refusing PKCS1 output for a %s key", descriptor.algorithm)
        raise NotSupportedError(f"Cannot write a {descriptor.algorithm} key as PKCS1")
    if key_type is KeyType.PRIVATE:
        der = writers.sec1(material, descriptor.algorithm, source_id)
        return Document(Format.SEC1, key_type, der)
    algorithm_id = writers.curve_algorithm_id(descriptor.algorithm, source_id)
    return Document(Format.SPKI, key_type, writers.spki(material, algorithm_id))


def dispatch(descriptor: KeyDescriptor, target: ConversionTarget) -> Document:
    """Produce the DER document for a resolved, compatible target."""
    material = bytes(descriptor.key_material)
    source_id = descriptor.algorithm_identifier
    key_type = descriptor.key_type
    if key_type is KeyType.PRIVATE and target.key_type is KeyType.PUBLIC:
        material, source_id = writers.public_from_private(
            descriptor.algorithm, material, source_id
        )
        key_type = KeyType.PUBLIC

    if descriptor.algorithm in RSA_FAMILY:
        document = _rsa(descriptor, target, key_type, material, source_id)
    elif descriptor.algorithm in CURVE_ALGORITHMS:
        document = _curve(descriptor, target, key_type, material, source_id)
    else:
        raise NotSupportedError(f"No conversion path for {descriptor.algorithm}")
    logger.debug(
        "wrote %s %s %s document",
        descriptor.algorithm,
        document.key_type,
        document.format,
    )
    return document


def encode(
    document: Document, target: ConversionTarget, settings: KeyfmtSettings
) -> bytes:
    """DER or PEM output, optionally encrypting PKCS8 private keys."""
    if target.encoding not in (Encoding.DER, Encoding.PEM):
        logger.info("refusing %s output", target.encoding)
        raise NotSupportedError(f"{target.encoding} output is not supported")

    der = document.der
    label = codec.PEM_LABELS[(document.format, document.key_type)]
    if target.output_password is not None:
        if (document.format, document.key_type) != (Format.PKCS8, KeyType.PRIVATE):
            raise NotSupportedError("Only PKCS8 private keys can be written encrypted")
        der = codec.encrypt_pkcs8(
            der, target.output_password, settings.pbkdf2_iterations
        )
        label = codec.LABEL_ENCRYPTED_PRIVATE_KEY

    if target.encoding is Encoding.DER:
        return der
    return codec.pem_encode(label, der, settings.line_ending_bytes())


def convert(
    descriptor: KeyDescriptor,
    target: ConversionTarget,
    settings: KeyfmtSettings | None = None,
) -> bytes:
    """Convert a discovered key; the complete output buffer is returned."""
    target = resolve_defaults(descriptor, target)
    check_compatible(descriptor, target)
    document = dispatch(descriptor, target)
    return encode(document, target, settings or KeyfmtSettings())
