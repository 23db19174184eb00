"""Tests for AlgorithmIdentifier helpers."""

from asn1crypto import core

from keyfmt.crypto import alg_id, oids
from keyfmt.crypto.schemas import AlgorithmIdentifier
from keyfmt.crypto.types import Algorithm, AlgorithmIdData

RSA_ENCRYPTION_DER = bytes.fromhex("300d06092a864886f70d0101010500")
EC_P256_DER = bytes.fromhex("301306072a8648ce3d020106082a8648ce3d030107")
ED25519_DER = bytes.fromhex("300506032b6570")
PSS_BARE_DER = bytes.fromhex("300b06092a864886f70d01010a")
PSS_EMPTY_PARAMS_DER = bytes.fromhex("300d06092a864886f70d01010a3000")


class TestBuild:
    """Tests for AlgorithmIdentifier construction."""

    def test_rsa_encryption_has_null(self) -> None:
        assert alg_id.rsa_encryption().dump() == RSA_ENCRYPTION_DER

    def test_ec_named_curve(self) -> None:
        assert alg_id.ec_public_key(oids.PRIME_256_V1).dump() == EC_P256_DER

    def test_curve_algorithm_absent_parameters(self) -> None:
        assert alg_id.for_curve_algorithm(Algorithm.ED25519).dump() == ED25519_DER

    def test_pss_without_parameters(self) -> None:
        assert alg_id.rsassa_pss().dump() == PSS_BARE_DER

    def test_pss_keeps_parameters(self) -> None:
        assert alg_id.rsassa_pss(b"\x30\x00").dump() == PSS_EMPTY_PARAMS_DER

    def test_from_data_is_verbatim(self) -> None:
        _, data = alg_id.parse(AlgorithmIdentifier.load(EC_P256_DER))
        assert alg_id.from_data(data).dump() == EC_P256_DER


class TestParse:
    """Tests for reading AlgorithmIdentifiers."""

    def test_rsa(self) -> None:
        algorithm, data = alg_id.parse(alg_id.rsa_encryption())
        assert algorithm is Algorithm.RSA
        assert data == AlgorithmIdData(oid=oids.RSA_ENCRYPTION, parameters=b"\x05\x00")
        assert alg_id.is_null(data.parameters)

    def test_absent_parameters(self) -> None:
        algorithm, data = alg_id.parse(alg_id.for_curve_algorithm(Algorithm.X25519))
        assert algorithm is Algorithm.X25519
        assert data.parameters is None

    def test_unknown_oid(self) -> None:
        identifier = alg_id.build("1.2.3.4", alg_id.ParameterKind.ABSENT)
        algorithm, data = alg_id.parse(identifier)
        assert algorithm is Algorithm.UNKNOWN
        assert data.oid == "1.2.3.4"

    def test_parameter_oid(self) -> None:
        der = core.ObjectIdentifier(oids.SECP_384_R1).dump()
        assert alg_id.parameter_oid(der) == oids.SECP_384_R1
        assert alg_id.parameter_oid(b"\x05\x00") is None
        assert alg_id.parameter_oid(None) is None


class TestOidNames:
    def test_known(self) -> None:
        assert oids.oid_to_str(oids.ED25519) == "id-Ed25519: 1.3.101.112"

    def test_unknown(self) -> None:
        assert oids.oid_to_str("1.2.3") == "Unknown OID: 1.2.3"
