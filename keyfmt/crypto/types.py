"""Type definitions for key classification and conversion requests."""

import hmac
from enum import StrEnum
from typing import Self, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

from keyfmt.crypto import oids


E = TypeVar("E", bound=StrEnum)


class Encoding(StrEnum):
    """Text encoding of a key document."""

    UNKNOWN = "Unknown"
    PEM = "PEM"
    DER = "DER"
    JWK = "JWK"

    @classmethod
    def parse(cls, name: str) -> "Encoding":
        return _lookup(cls, name)


class Format(StrEnum):
    """ASN.1 container shape."""

    UNKNOWN = "Unknown"
    PKCS1 = "PKCS1"
    PKCS8 = "PKCS8"
    SPKI = "SPKI"
    SEC1 = "SEC1"

    @classmethod
    def parse(cls, name: str) -> "Format":
        return _lookup(cls, name)


class KeyType(StrEnum):
    """Which half of a key pair a document holds."""

    UNKNOWN = "Unknown"
    PUBLIC = "Public"
    PRIVATE = "Private"
    KEYPAIR = "KeyPair"

    @classmethod
    def parse(cls, name: str) -> "KeyType":
        return _lookup(cls, name)


class Algorithm(StrEnum):
    """Key algorithm, as named by the container's algorithm identifier."""

    UNKNOWN = "Unknown"
    RSA = "RSA"
    RSASSA_PSS = "RSASSA-PSS"
    ECDSA = "ECDSA"
    X25519 = "X25519"
    X448 = "X448"
    ED25519 = "Ed25519"
    ED448 = "Ed448"
    ED25519_PH = "Ed25519ph"
    ED448_PH = "Ed448ph"

    @classmethod
    def parse(cls, name: str) -> "Algorithm":
        return _lookup(cls, name, _ALGORITHM_ALIASES)


_ALGORITHM_ALIASES = {
    "RSASSA_PSS": "RSASSA-PSS",
    "EC": "ECDSA",
    "EDDSA25519": "Ed25519",
    "ED_DSA25519": "Ed25519",
    "EDDSA448": "Ed448",
    "ED_DSA448": "Ed448",
    "EDDSA25519PH": "Ed25519ph",
    "ED_DSA25519_PH": "Ed25519ph",
    "EDDSA448PH": "Ed448ph",
    "ED_DSA448_PH": "Ed448ph",
}


def _lookup(cls: type[E], name: str, aliases: dict[str, str] | None = None) -> E:
    """Case-insensitive enum lookup; Unknown is never a valid request."""
    wanted = name.strip().upper()
    if aliases and wanted in aliases:
        wanted = aliases[wanted].upper()
    for member in cls:
        if member.value.upper() == wanted and member.value != "Unknown":
            return member
    raise ValueError(f"Unknown {cls.__name__.lower()}: {name}")


ALGORITHM_BY_OID: dict[str, Algorithm] = {
    oids.RSA_ENCRYPTION: Algorithm.RSA,
    oids.RSASSA_PSS: Algorithm.RSASSA_PSS,
    oids.EC_PUBLIC_KEY: Algorithm.ECDSA,
    oids.X25519: Algorithm.X25519,
    oids.X448: Algorithm.X448,
    oids.ED25519: Algorithm.ED25519,
    oids.ED448: Algorithm.ED448,
    oids.ED25519_PH: Algorithm.ED25519_PH,
    oids.ED448_PH: Algorithm.ED448_PH,
}

OID_BY_ALGORITHM: dict[Algorithm, str] = {
    alg: oid for oid, alg in ALGORITHM_BY_OID.items()
}


def algorithm_for_oid(oid: str) -> Algorithm:
    """Map an algorithm OID to its algorithm, Unknown when not in the table."""
    return ALGORITHM_BY_OID.get(oid, Algorithm.UNKNOWN)


class KeyMaterial:
    """Inner key bytes held in a buffer that is zeroed on wipe.

    Copies handed to the codec libraries as ``bytes`` are outside this
    buffer's control and are left to the garbage collector.
    """

    __slots__ = ("_buf", "_wiped")

    def __init__(self, data: bytes) -> None:
        self._buf = bytearray(data)
        self._wiped = False

    def __bytes__(self) -> bytes:
        if self._wiped:
            raise ValueError("key material has been wiped")
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, KeyMaterial):
            return hmac.compare_digest(self._buf, other._buf)
        if isinstance(other, (bytes, bytearray)):
            return hmac.compare_digest(self._buf, other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "wiped" if self._wiped else f"{len(self._buf)} bytes"
        return f"KeyMaterial(<{state}>)"

    @property
    def wiped(self) -> bool:
        return self._wiped

    def wipe(self) -> None:
        """Overwrite the buffer with zeroes in place."""
        self._buf[:] = bytes(len(self._buf))
        self._wiped = True

    def __del__(self) -> None:
        self.wipe()


class AlgorithmIdData(BaseModel):
    """AlgorithmIdentifier copied verbatim from a container."""

    model_config = ConfigDict(frozen=True)

    oid: str
    parameters: bytes | None = None


class KeyDescriptor(BaseModel):
    """Classification of a discovered key.

    Built once by discovery and never modified. Use as a context manager
    so the key material is wiped when the caller is done with it.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    encoding: Encoding
    format: Format
    key_type: KeyType
    algorithm: Algorithm
    key_material: KeyMaterial
    key_length_bits: int | None = None
    algorithm_identifier: AlgorithmIdData | None = None
    encrypted: bool = False

    @model_validator(mode="after")
    def _check_classified(self) -> Self:
        if self.key_type is KeyType.UNKNOWN:
            raise ValueError("descriptor key type must be resolved")
        if self.format is Format.UNKNOWN:
            raise ValueError("descriptor format must be resolved")
        if self.algorithm_identifier is not None:
            expected = algorithm_for_oid(self.algorithm_identifier.oid)
            if expected is not Algorithm.UNKNOWN and expected is not self.algorithm:
                raise ValueError(
                    f"algorithm {self.algorithm} does not match OID "
                    f"{self.algorithm_identifier.oid}"
                )
        return self

    def close(self) -> None:
        """Zero the key material."""
        self.key_material.wipe()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()


class ConversionTarget(BaseModel):
    """A possibly partial conversion request.

    Unset fields are filled from the discovered descriptor by
    ``resolve_defaults`` before conversion runs.
    """

    model_config = ConfigDict(frozen=True)

    encoding: Encoding | None = None
    format: Format | None = None
    algorithm: Algorithm | None = None
    key_type: KeyType | None = None
    key_id: str | None = None
    input_password: str | None = None
    output_password: str | None = None
