"""Public codec API."""

from .codec import (
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

__all__ = [
    "EntityCodec",
    "decode_html",
    "decode_html_buf",
    "decode_html_buf_sloppy",
    "decode_html_rw",
    "decode_html_sloppy",
    "encode_attribute",
    "encode_attribute_w",
    "encode_minimal",
    "encode_minimal_w",
]
