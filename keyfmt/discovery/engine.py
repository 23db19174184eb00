"""Classify an unknown byte buffer by trying each probe in order."""

import logging
from collections.abc import Sequence

from keyfmt.core.errors import UnknownKeyTypeError
from keyfmt.crypto import codec
from keyfmt.crypto.types import Encoding, KeyDescriptor
from keyfmt.discovery.probes import PROBE_ORDER, Probe

logger = logging.getLogger(__name__)


def run_probe(
    probe: Probe, raw: bytes, password: str | None = None
) -> KeyDescriptor | None:
    """Apply one probe; ``None`` when the bytes are not its container.

    Missing-password and decryption failures are not probe mismatches and
    propagate to the caller.
    """
    der = raw
    try:
        if probe.encoding is Encoding.PEM:
            if not codec.is_text(raw):
                return None
            der = codec.pem_decode(raw, probe.label)
        return probe.decode(der, probe.encoding, password)
    except (ValueError, TypeError) as exc:
        logger.debug("probe %s did not match: %s", probe.name, exc)
        return None


def discover(
    raw: bytes,
    password: str | None = None,
    probes: Sequence[Probe] = PROBE_ORDER,
) -> KeyDescriptor:
    """Return the descriptor from the first probe that accepts ``raw``."""
    for probe in probes:
        descriptor = run_probe(probe, raw, password)
        if descriptor is not None:
            logger.info(
                "classified input as %s %s %s key via %s",
                descriptor.encoding,
                descriptor.format,
                descriptor.key_type,
                probe.name,
            )
            return descriptor
    logger.info("no probe matched %d input bytes", len(raw))
    raise UnknownKeyTypeError()
