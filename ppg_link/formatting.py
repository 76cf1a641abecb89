"""
formatting.py

Converts raw frame bytes into human-readable strings for logs and the CLI.
"""

OUTPUT_FORMATS = ["Hex", "ASCII", "Decimal", "Binary"]


def format_bytes(data: bytes, output_format: str = "ASCII") -> str:
    """
    Converts raw bytes to a string according to the output format.

    Args:
        data: The raw bytes.
        output_format: One of OUTPUT_FORMATS.

    Returns:
        A formatted string representation.

    Raises:
        ValueError: If the output format is unknown.
    """
    if not data:
        return "<no data>"
    if output_format == "Hex":
        return data.hex(" ")
    if output_format == "ASCII":
        # Non-printable bytes are shown as escapes so corrupt frames stay visible.
        return "".join(chr(b) if 32 <= b <= 126 else f"\\x{b:02x}" for b in data)
    if output_format == "Decimal":
        return " ".join(str(b) for b in data)
    if output_format == "Binary":
        return " ".join(f"{b:08b}" for b in data)
    raise ValueError(f"Unknown output format: {output_format}")
