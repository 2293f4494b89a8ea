from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from ..models.contact import Contact

"""vCard 3.0 text encoder.

Only valid contacts are written, one block each, blocks concatenated
without blank lines and every line terminated by ``\\n``.

Values are written verbatim by default: ``;``, ``,`` and ``\\`` in names are
not escaped. Pass ``escape=True`` for RFC 6350 text escaping.
"""

__all__ = [
    "encode_vcf",
    "encode_contact",
    "escape_text",
    "display_name",
    "output_file_name",
    "write_vcf",
    "VCF_SUFFIX",
]

VCF_SUFFIX = "_converted.vcf"


def escape_text(value: str) -> str:
    """Escape backslash, newline, semicolon and comma for vCard text values."""
    return (
        value.replace("\\", "\\\\")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
        .replace(";", "\\;")
        .replace(",", "\\,")
    )


def display_name(contact: Contact, prefix: str = "") -> str:
    """Export name: prefix + original name, outer whitespace trimmed."""
    return f"{prefix}{contact.original_name}".strip()


def encode_contact(contact: Contact, prefix: str = "", *, escape: bool = False) -> str:
    full_name = display_name(contact, prefix)
    if escape:
        full_name = escape_text(full_name)
    lines = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"FN:{full_name}",
        f"N:;{full_name};;;",
        f"TEL;TYPE=CELL:{contact.cleaned_number}",
        "END:VCARD",
    ]
    return "".join(line + "\n" for line in lines)


def encode_vcf(contacts: Iterable[Contact], prefix: str = "", *, escape: bool = False) -> str:
    """Serialize valid contacts to a single VCF document.

    Returns "" when there is no valid contact.
    """
    return "".join(encode_contact(c, prefix, escape=escape) for c in contacts if c.is_valid)


def output_file_name(source: Path | str, sheet_name: str) -> str:
    """``<source stem>_<sheet>_converted.vcf``"""
    return f"{Path(source).stem}_{sheet_name}{VCF_SUFFIX}"


def write_vcf(text: str, path: Path) -> Path:
    """Write VCF text as UTF-8, replacing ``path`` atomically.

    The content goes to a temporary file in the target directory first, so a
    failed write never leaves a truncated file behind.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path
