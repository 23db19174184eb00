"""Object identifiers for key algorithms and named curves."""

RSA_ENCRYPTION = "1.2.840.113549.1.1.1"
RSASSA_PSS = "1.2.840.113549.1.1.10"
EC_PUBLIC_KEY = "1.2.840.10045.2.1"
X25519 = "1.3.101.110"
X448 = "1.3.101.111"
ED25519 = "1.3.101.112"
ED448 = "1.3.101.113"
ED25519_PH = "1.3.101.114"
ED448_PH = "1.3.101.115"

PRIME_256_V1 = "1.2.840.10045.3.1.7"
SECP_384_R1 = "1.3.132.0.34"
SECP_521_R1 = "1.3.132.0.35"
SECP_256_K1 = "1.3.132.0.10"

OID_NAMES: dict[str, str] = {
    RSA_ENCRYPTION: "rsaEncryption",
    RSASSA_PSS: "rsassaPss",
    EC_PUBLIC_KEY: "id-ecPublicKey",
    X25519: "id-X25519",
    X448: "id-X448",
    ED25519: "id-Ed25519",
    ED448: "id-Ed448",
    ED25519_PH: "id-Ed25519ph",
    ED448_PH: "id-Ed448ph",
    PRIME_256_V1: "prime256v1",
    SECP_384_R1: "secp384r1",
    SECP_521_R1: "secp521r1",
    SECP_256_K1: "secp256k1",
}

CURVE_BITS: dict[str, int] = {
    PRIME_256_V1: 256,
    SECP_384_R1: 384,
    SECP_521_R1: 521,
    SECP_256_K1: 256,
}


def oid_to_str(oid: str) -> str:
    """Render an OID with its well-known name."""
    name = OID_NAMES.get(oid)
    if name is None:
        return f"Unknown OID: {oid}"
    return f"{name}: {oid}"
