"""Build and interpret AlgorithmIdentifier structures.

Three parameter shapes are produced: NULL (rsaEncryption), a named-curve
OID (id-ecPublicKey) and absent (RFC 8410 curves, unparameterised
RSASSA-PSS). Parameters read from a container are kept as raw DER so they
can be written back byte for byte.
"""

from enum import StrEnum

from asn1crypto import core

from keyfmt.crypto import codec, oids
from keyfmt.crypto.schemas import AlgorithmIdentifier
from keyfmt.crypto.types import (
    OID_BY_ALGORITHM,
    Algorithm,
    AlgorithmIdData,
    algorithm_for_oid,
)


class ParameterKind(StrEnum):
    NULL = "null"
    OID = "oid"
    ABSENT = "absent"


def build(
    oid: str,
    kind: ParameterKind = ParameterKind.NULL,
    parameter: str | None = None,
) -> AlgorithmIdentifier:
    """Create an AlgorithmIdentifier with the given parameter shape."""
    params: core.Asn1Value | None
    if kind is ParameterKind.NULL:
        params = core.Null()
    elif kind is ParameterKind.OID:
        if parameter is None:
            raise ValueError("an OID parameter is required")
        params = core.ObjectIdentifier(parameter)
    else:
        params = None
    return AlgorithmIdentifier({"algorithm": oid, "parameters": params})


def from_data(data: AlgorithmIdData) -> AlgorithmIdentifier:
    """Rebuild an AlgorithmIdentifier from verbatim descriptor data."""
    params = core.Any.load(data.parameters) if data.parameters is not None else None
    return AlgorithmIdentifier({"algorithm": data.oid, "parameters": params})


def parse(alg_id: AlgorithmIdentifier) -> tuple[Algorithm, AlgorithmIdData]:
    """Return the algorithm and the verbatim (OID, parameters) pair."""
    oid = alg_id["algorithm"].dotted
    params = alg_id["parameters"]
    raw = None if isinstance(params, core.Void) else params.dump()
    return algorithm_for_oid(oid), AlgorithmIdData(oid=oid, parameters=raw)


def parameter_oid(parameters: bytes | None) -> str | None:
    """Dotted OID held in the parameters, if they are an OID."""
    if not parameters:
        return None
    try:
        return codec.decode_oid(parameters)
    except ValueError:
        return None


def is_null(parameters: bytes | None) -> bool:
    return parameters == core.Null().dump()


def rsa_encryption() -> AlgorithmIdentifier:
    return build(oids.RSA_ENCRYPTION, ParameterKind.NULL)


def rsassa_pss(parameters: bytes | None = None) -> AlgorithmIdentifier:
    """id-RSASSA-PSS; parameters are reused verbatim or left absent."""
    return from_data(AlgorithmIdData(oid=oids.RSASSA_PSS, parameters=parameters))


def ec_public_key(curve_oid: str) -> AlgorithmIdentifier:
    return build(oids.EC_PUBLIC_KEY, ParameterKind.OID, curve_oid)


def for_curve_algorithm(algorithm: Algorithm) -> AlgorithmIdentifier:
    """RFC 8410 identifier, which carries no parameters."""
    return build(OID_BY_ALGORITHM[algorithm], ParameterKind.ABSENT)
