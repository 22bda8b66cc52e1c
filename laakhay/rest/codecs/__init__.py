"""Input encoders and output decoders keyed by wire format."""

from .decoders import DECODERS, decode_body
from .encoders import ENCODERS, EncodedInput, encode_input
from .settings import DecoderSettings, EncoderSettings

__all__ = [
    "DECODERS",
    "ENCODERS",
    "EncodedInput",
    "EncoderSettings",
    "DecoderSettings",
    "decode_body",
    "encode_input",
]
