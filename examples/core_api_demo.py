#!/usr/bin/env python3
"""Entity Codec API Progressive Disclosure Demo.

This example walks from the simple module-level functions to the configured
codec, and shows how strict and sloppy decoding report malformed input.
"""

import io
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

import html_entity_codec as hec


def demo_level_1_simple_api():
    """Demonstrate Level 1: Simple encode and decode functions."""
    print("=" * 60)
    print("LEVEL 1: Simple API Functions")
    print("=" * 60)

    untrusted = '<script>alert("x")</script> & friends'

    print("\n1. Escaping text content:")
    encoded = hec.encode_minimal(untrusted)
    print(f"  {untrusted!r}")
    print(f"  -> {encoded!r}")

    print("\n2. Escaping attribute values:")
    value = "x onmouseover=alert(1)"
    print(f"  {value!r}")
    print(f"  -> {hec.encode_attribute(value)!r}")

    print("\n3. Decoding:")
    source = "caf&eacute; &lt;3 &#x1F600; &#169;"
    print(f"  {source!r}")
    print(f"  -> {hec.decode_html(source)!r}")

    print("\n4. Streaming between binary files:")
    reader = io.BytesIO("&quot;Sm&ouml;rg&aring;sbord&quot;".encode("utf-8"))
    writer = io.BytesIO()
    hec.decode_html_rw(reader, writer)
    print(f"  wrote {writer.getvalue()!r}")


def demo_level_2_configured_codec():
    """Demonstrate Level 2: EntityCodec with CodecConfig."""
    print("\n" + "=" * 60)
    print("LEVEL 2: Configured Codec")
    print("=" * 60)

    print("\n1. Sloppy decoding with diagnostics:")
    codec = hec.EntityCodec(hec.CodecConfig.sloppy(), correlation_id="demo-1")
    result = codec.decode("Tom &amp Jerry &bogus; &#x4g; end &am")
    print(f"  Text: {result.text!r}")
    print(f"  Recovered: {result.recovered}")
    for entry in result.diagnostics:
        print(f"  - position {entry.position}: {entry.message}")

    print("\n2. Statistics:")
    stats = hec.EntityCodec().decode("&lt;p&gt;&#65;&#x42;&lt;/p&gt;").statistics
    print(f"  Characters processed: {stats.characters_processed}")
    print(f"  Named entities: {stats.named_entities_resolved}")
    print(f"  Numeric references: {stats.numeric_references_resolved}")

    print("\n3. Configuration overrides and JSON:")
    config = hec.CodecConfig.attribute_safe().override(decode__read_chunk_size=1024)
    print(config.to_json())
    print(f"  Encoded: {hec.EntityCodec(config).encode('a=b c')!r}")


def demo_error_handling():
    """Demonstrate strict-mode errors and their positions."""
    print("\n" + "=" * 60)
    print("Strict Error Reporting")
    print("=" * 60)

    test_cases = [
        ("Unknown entity", "fish &chips; peas"),
        ("Malformed numeric", "value &#12a;"),
        ("Not a character", "&#xD800;"),
        ("Unterminated", "Tom &amp"),
        ("Invalid UTF-8", b"ok \xff"),
    ]

    for name, test_input in test_cases:
        print(f"\n{name}: {test_input!r}")
        try:
            if isinstance(test_input, bytes):
                hec.decode_html_buf(test_input)
            else:
                hec.decode_html(test_input)
            print("  decoded without error")
        except hec.DecodeError as e:
            print(f"  {e.kind.name} at position {e.position}")
            print(f"  {e}")


def main():
    """Run all demonstrations."""
    print("HTML Entity Codec - Core API Demo")
    print("Progressive Disclosure from Simple to Configured")

    demo_level_1_simple_api()
    demo_level_2_configured_codec()
    demo_error_handling()

    print("\n" + "=" * 60)
    print("Demo completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
