"""Public codec API with progressive disclosure.

Level 1 is a set of module-level functions mirroring each other for strings,
byte buffers and streams:

* ``decode_html`` / ``decode_html_sloppy`` / ``decode_html_buf`` /
  ``decode_html_buf_sloppy`` / ``decode_html_rw``
* ``encode_minimal`` / ``encode_minimal_w`` / ``encode_attribute`` /
  ``encode_attribute_w``

Level 2 is ``EntityCodec``, driven by a ``CodecConfig`` and returning
``DecodeResult`` objects with statistics and recovery diagnostics.

Buffer and string functions are thin wrappers that run the streaming entry
points against in-memory byte buffers.
"""

import io
from typing import BinaryIO, Optional, Union

from html_entity_codec.decoding import EntityDecoder, policy_for
from html_entity_codec.encoding import EntityEncoder
from html_entity_codec.shared import (
    CodecConfig,
    DecodeError,
    DecodeErrorKind,
    DecodeMode,
    DecodeResult,
    EncodePolicy,
    get_logger,
)

BytesLike = Union[bytes, bytearray, memoryview]

_MINIMAL_ENCODER = EntityEncoder(EncodePolicy.MINIMAL)
_ATTRIBUTE_ENCODER = EntityEncoder(EncodePolicy.ATTRIBUTE)


def _utf8(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        # Lone surrogates cannot be represented in the UTF-8 source.
        raise DecodeError(e.start, DecodeErrorKind.ENCODING_ERROR) from e


def _check_buffer(data: BytesLike) -> None:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(
            f"expected a bytes-like object, got {type(data).__name__}"
        )


def decode_html_rw(reader: BinaryIO, writer: BinaryIO, sloppy: bool = False) -> None:
    """Decode an entity-encoded UTF-8 stream from ``reader`` into ``writer``.

    Args:
        reader: UTF-8 encoded data is read from here
        writer: UTF-8 decoded data is written to here
        sloppy: Recover from malformed references instead of failing

    Raises:
        DecodeError: on I/O errors, invalid UTF-8, or (strict mode) syntax
            errors. Output written before the error is left in ``writer``.
    """
    mode = DecodeMode.SLOPPY if sloppy else DecodeMode.STRICT
    policy = policy_for(mode, record_diagnostics=False)
    EntityDecoder(policy).decode(reader, writer)


def decode_html_buf(data: BytesLike) -> str:
    """Strictly decode an entity-encoded UTF-8 byte buffer."""
    _check_buffer(data)
    return _decode_buffer(data, sloppy=False)


def decode_html_buf_sloppy(data: BytesLike) -> str:
    """Sloppily decode an entity-encoded UTF-8 byte buffer."""
    _check_buffer(data)
    return _decode_buffer(data, sloppy=True)


def decode_html(text: str) -> str:
    """Decode an entity-encoded string.

    Named entities are case-sensitive (``&Amp;`` is unknown), hex digits are
    not (``&#x2E;`` equals ``&#x2e;``).

    Raises:
        DecodeError: for unknown named entities (``&nosuchentity;``),
            malformed numeric references (``&#xRT;``), references to invalid
            code points (``&#xD800;``) and unterminated references
            (``"&amp hej"``). Never raised with kind ``IO_ERROR``.

    Example:
        >>> decode_html("&lt;em&gt;Hej!&lt;/em&gt;")
        '<em>Hej!</em>'
    """
    return _decode_buffer(_utf8(text), sloppy=False)


def decode_html_sloppy(text: str) -> str:
    """Decode an entity-encoded string, recovering from malformed references.

    Unknown named entities are kept verbatim; malformed numeric references and
    an unterminated trailing reference are dropped. References to invalid code
    points still raise ``DecodeError``.

    Example:
        >>> decode_html_sloppy("&nosuch; &#x4g; &amp")
        '&nosuch; g; '
    """
    return _decode_buffer(_utf8(text), sloppy=True)


def _decode_buffer(data: BytesLike, sloppy: bool) -> str:
    writer = io.BytesIO()
    decode_html_rw(io.BytesIO(data), writer, sloppy)
    return writer.getvalue().decode("utf-8")


def encode_minimal_w(text: str, writer: BinaryIO) -> None:
    """Entity-encode ``text`` with the minimal set of entities into ``writer``.

    Raises:
        SinkWriteError: if ``writer`` fails
    """
    _MINIMAL_ENCODER.encode_to(text, writer)


def encode_minimal(text: str) -> str:
    """Entity-encode a string with a minimal set of entities.

    - ``"`` -- ``&quot;``
    - ``&`` -- ``&amp;``
    - ``'`` -- ``&#x27;``
    - ``<`` -- ``&lt;``
    - ``>`` -- ``&gt;``

    Not safe for unquoted attribute values: ``"dummy onmouseover=alert(1)"``
    passes through unchanged. Use ``encode_attribute`` for attributes.

    Example:
        >>> encode_minimal("<em>Hej!</em>")
        '&lt;em&gt;Hej!&lt;/em&gt;'
    """
    writer = io.BytesIO()
    encode_minimal_w(text, writer)
    return writer.getvalue().decode("utf-8")


def encode_attribute_w(text: str, writer: BinaryIO) -> None:
    """Entity-encode ``text`` for use in attribute values into ``writer``.

    Raises:
        SinkWriteError: if ``writer`` fails
    """
    _ATTRIBUTE_ENCODER.encode_to(text, writer)


def encode_attribute(text: str) -> str:
    """Entity-encode a string for use in HTML attribute values.

    All entities of ``encode_minimal`` are used, and every other character
    below U+0100 that is not an ASCII letter or digit is hex-encoded.

    Example:
        >>> encode_attribute('"No", he said.')
        '&quot;No&quot;&#x2C;&#x20;he&#x20;said&#x2E;'
    """
    writer = io.BytesIO()
    encode_attribute_w(text, writer)
    return writer.getvalue().decode("utf-8")


class EntityCodec:
    """Configured codec with decode statistics and recovery diagnostics.

    The codec keeps no per-call state, so one instance can serve concurrent
    callers.

    Examples:
        Strict decoding with statistics:
        >>> codec = EntityCodec()
        >>> result = codec.decode("&amp;&#65;")
        >>> result.text, result.statistics.entities_resolved
        ('&A', 2)

        Sloppy decoding reports what was recovered:
        >>> codec = EntityCodec(CodecConfig.sloppy())
        >>> result = codec.decode("a &bogus; b")
        >>> result.text, result.recovered
        ('a &bogus; b', True)

        Attribute-safe encoding:
        >>> EntityCodec(CodecConfig.attribute_safe()).encode("x=1")
        'x&#x3D;1'
    """

    def __init__(
        self,
        config: Optional[CodecConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the codec.

        Args:
            config: Codec configuration (defaults to strict decoding, minimal encoding)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or CodecConfig()
        if self.config.global_.enable_correlation_tracking:
            self.correlation_id = correlation_id
        else:
            self.correlation_id = None
        self.logger = get_logger(__name__, self.correlation_id, "entity_codec")
        self._encoder = EntityEncoder(self.config.encode.policy)

    @property
    def mode(self) -> DecodeMode:
        return self.config.decode.mode

    def _new_decoder(self) -> EntityDecoder:
        decode_config = self.config.decode
        policy = policy_for(
            decode_config.mode,
            self.correlation_id,
            decode_config.record_diagnostics,
            decode_config.max_diagnostics,
        )
        return EntityDecoder(
            policy,
            chunk_size=decode_config.read_chunk_size,
            correlation_id=self.correlation_id,
        )

    def decode(self, data: Union[str, BytesLike]) -> DecodeResult:
        """Decode a string or UTF-8 byte buffer.

        Raises:
            DecodeError: as ``decode_html`` / ``decode_html_sloppy``
        """
        if isinstance(data, str):
            data = _utf8(data)
        else:
            _check_buffer(data)
        writer = io.BytesIO()
        result = self.decode_stream(io.BytesIO(data), writer)
        result.text = writer.getvalue().decode("utf-8")
        return result

    def decode_stream(self, reader: BinaryIO, writer: BinaryIO) -> DecodeResult:
        """Decode from ``reader`` into ``writer``; the result carries no text."""
        decoder = self._new_decoder()
        statistics = decoder.decode(reader, writer)
        result = DecodeResult(
            text=None,
            statistics=statistics,
            mode=self.mode.name,
            diagnostics=list(decoder.policy.diagnostics),
            correlation_id=self.correlation_id,
        )
        if result.recovered:
            self.logger.info(
                "Decoded with recovery",
                extra={
                    "fragments_recovered": statistics.fragments_recovered,
                    "characters_processed": statistics.characters_processed,
                }
            )
        return result

    def encode(self, text: str) -> str:
        """Encode ``text`` with the configured policy."""
        writer = io.BytesIO()
        self.encode_stream(text, writer)
        return writer.getvalue().decode("utf-8")

    def encode_stream(self, text: str, writer: BinaryIO) -> None:
        """Encode ``text`` with the configured policy into ``writer``."""
        self._encoder.encode_to(text, writer)
