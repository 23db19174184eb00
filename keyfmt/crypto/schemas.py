"""ASN.1 container shapes for the key documents keyfmt reads and writes.

Parameters and inner key fields are kept opaque (``Any``, ``OctetString``,
``OctetBitString``) so that algorithm identifiers with unknown OIDs still
decode and can be copied verbatim. PKCS1 RSA structures and the PBES2 aware
EncryptedPrivateKeyInfo come straight from ``asn1crypto.keys``.
"""

from asn1crypto import core, keys

RSAPrivateKey = keys.RSAPrivateKey
RSAPublicKey = keys.RSAPublicKey
EncryptedPrivateKeyInfo = keys.EncryptedPrivateKeyInfo


class AlgorithmIdentifier(core.Sequence):
    _fields = [
        ("algorithm", core.ObjectIdentifier),
        ("parameters", core.Any, {"optional": True}),
    ]


class Attributes(core.SetOf):
    _child_spec = core.Any


class PrivateKeyInfo(core.Sequence):
    """RFC 5208 PrivateKeyInfo, with the RFC 5958 public key extension."""

    _fields = [
        ("version", core.Integer),
        ("private_key_algorithm", AlgorithmIdentifier),
        ("private_key", core.OctetString),
        ("attributes", Attributes, {"implicit": 0, "optional": True}),
        ("public_key", core.OctetBitString, {"implicit": 1, "optional": True}),
    ]


class SubjectPublicKeyInfo(core.Sequence):
    _fields = [
        ("algorithm", AlgorithmIdentifier),
        ("subject_public_key", core.OctetBitString),
    ]


class ECPrivateKey(core.Sequence):
    """RFC 5915 ECPrivateKey. Only the namedCurve parameter form is read."""

    _fields = [
        ("version", core.Integer),
        ("private_key", core.OctetString),
        ("parameters", core.ObjectIdentifier, {"explicit": 0, "optional": True}),
        ("public_key", core.OctetBitString, {"explicit": 1, "optional": True}),
    ]


EC_PRIVATE_KEY_VERSION = 1
