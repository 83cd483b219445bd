"""
Palette export helpers.
"""

from typing import Sequence

from .conversions import ColorRecord


def palette_to_css(records: Sequence[ColorRecord], prefix: str = "color") -> str:
    """
    Render a palette as CSS custom properties on :root.

    Variables are numbered from 1 in palette order: --color-1, --color-2, ...
    """
    lines = [f"  --{prefix}-{i}: {record.hex};" for i, record in enumerate(records, start=1)]
    return ":root {\n" + "\n".join(lines) + "\n}"
