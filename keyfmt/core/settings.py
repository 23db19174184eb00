"""Tool settings loaded from environment variables."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVEL_DEFAULT = "WARNING"
PEM_LINE_ENDING_DEFAULT = "CRLF"
PBKDF2_ITERATIONS_DEFAULT = 100_000

LINE_ENDINGS = {"CRLF": b"\r\n", "LF": b"\n"}


class KeyfmtSettings(BaseSettings):
    """Logging, PEM output and PKCS8 encryption settings."""

    model_config = SettingsConfigDict(env_prefix="KEYFMT_")

    log_level: str = LOG_LEVEL_DEFAULT
    pem_line_ending: Literal["CRLF", "LF"] = PEM_LINE_ENDING_DEFAULT
    pbkdf2_iterations: int = PBKDF2_ITERATIONS_DEFAULT

    def line_ending_bytes(self) -> bytes:
        """Byte sequence used between PEM lines."""
        return LINE_ENDINGS[self.pem_line_ending]
