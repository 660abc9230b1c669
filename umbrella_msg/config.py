"""Parser configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden via env vars,
matching the rest of the Umbrella services.
"""

from __future__ import annotations

import codecs

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class MsgParserConfig(BaseSettings):
    """Settings for :class:`umbrella_msg.parser.MsgParser`."""

    model_config = {"env_prefix": "MSG_PARSER_"}

    unnamed_filename: str = Field(
        default="unnamed",
        description="Filename given to attachments that carry no name property",
    )
    extension_filename_stem: str = Field(
        default="attachment",
        description="Stem used when only the attachment extension is known",
    )
    legacy_codec: str = Field(
        default="gb18030",
        description="Codec for the double-byte Chinese (GBK) decoding stage",
    )

    @field_validator("legacy_codec")
    @classmethod
    def _known_codec(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"Unknown codec: {value}") from exc
        return value
