"""HTML entity codec.

Escapes text into HTML character references and decodes entity-encoded text
back to plain text, with a streaming single-pass decoder that supports strict
and sloppy recovery.

Progressive API Disclosure:
- Level 1: Simple functions - decode_html(), encode_minimal(), encode_attribute()
  and their buffer/stream variants
- Level 2: Configured codec - EntityCodec with CodecConfig
"""

__version__ = "0.1.0"
__author__ = "HTML Entity Codec Team"

# Level 1: Simple functions
# Level 2: Configured codec
from .api import (
    EntityCodec,
    decode_html,
    decode_html_buf,
    decode_html_buf_sloppy,
    decode_html_rw,
    decode_html_sloppy,
    encode_attribute,
    encode_attribute_w,
    encode_minimal,
    encode_minimal_w,
)
from .encoding import MINIMAL_ENTITIES

# Configuration, errors and results
from .shared import (
    CodecConfig,
    DecodeError,
    DecodeErrorKind,
    DecodeMode,
    DecodeResult,
    EncodePolicy,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "decode_html",
    "decode_html_sloppy",
    "decode_html_buf",
    "decode_html_buf_sloppy",
    "decode_html_rw",
    "encode_minimal",
    "encode_minimal_w",
    "encode_attribute",
    "encode_attribute_w",
    "MINIMAL_ENTITIES",

    # Level 2: Configured codec
    "EntityCodec",

    # Configuration, errors and results
    "CodecConfig",
    "DecodeMode",
    "EncodePolicy",
    "DecodeError",
    "DecodeErrorKind",
    "DecodeResult",
]
