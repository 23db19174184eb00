"""Plain-text summary of a discovered key."""

from keyfmt.crypto import alg_id, oids
from keyfmt.crypto.types import KeyDescriptor


def _parameters_to_str(parameters: bytes) -> str:
    if alg_id.is_null(parameters):
        return "NULL"
    curve = alg_id.parameter_oid(parameters)
    if curve is not None:
        return oids.oid_to_str(curve)
    return parameters.hex()


def describe(descriptor: KeyDescriptor) -> str:
    lines = [
        f"Key Type: {descriptor.key_type}",
        f"Encoding: {descriptor.encoding}",
        f"Format: {descriptor.format}",
        f"Algorithm: {descriptor.algorithm}",
    ]
    if descriptor.key_length_bits is not None:
        lines.append(f"Key Length: {descriptor.key_length_bits}")
    if descriptor.encrypted:
        lines.append("Encrypted: yes")
    identifier = descriptor.algorithm_identifier
    if identifier is not None:
        lines.append("Algorithm Identifier:")
        lines.append(f"\tObject Identifier: {oids.oid_to_str(identifier.oid)}")
        if identifier.parameters is not None:
            lines.append(f"\tParameters: {_parameters_to_str(identifier.parameters)}")
    return "\n".join(lines) + "\n"
