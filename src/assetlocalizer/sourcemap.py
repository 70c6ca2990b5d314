"""Source Map v3 mappings codec and edit remapping.

The ``mappings`` field of a v3 source map is a list of generated lines
(separated by ";") holding segments (separated by ","), each a run of
Base64 VLQ numbers. Generated columns are relative within a line; source
index, original line, original column and name index are relative across
the whole field.

Segments are handled here in absolute form:

    (generated_column,)
    (generated_column, source, original_line, original_column)
    (generated_column, source, original_line, original_column, name)

Columns are counted in Python characters (code points). For text without
characters outside the Basic Multilingual Plane this equals the UTF-16
columns JavaScript tools produce.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from assetlocalizer.syntax import LineOffsetCache

__all__ = [
    "Segment",
    "decode_mappings",
    "decode_vlq",
    "encode_mappings",
    "encode_vlq",
    "remap_source_map",
]

type Segment = tuple[int, ...]

_BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_BASE64_VALUES = {char: index for index, char in enumerate(_BASE64)}
_VLQ_SHIFT = 5
_VLQ_CONTINUATION = 1 << _VLQ_SHIFT
_VLQ_MASK = _VLQ_CONTINUATION - 1


# ============================================================================
# VLQ
# ============================================================================


def encode_vlq(value: int) -> str:
    """Encode one signed integer as Base64 VLQ.

    Example:
        >>> encode_vlq(0), encode_vlq(1), encode_vlq(-1), encode_vlq(16)
        ('A', 'C', 'D', 'gB')
    """
    vlq = (-value << 1) | 1 if value < 0 else value << 1
    out: list[str] = []
    while True:
        digit = vlq & _VLQ_MASK
        vlq >>= _VLQ_SHIFT
        if vlq:
            digit |= _VLQ_CONTINUATION
        out.append(_BASE64[digit])
        if not vlq:
            return "".join(out)


def decode_vlq(segment: str) -> list[int]:
    """Decode every Base64 VLQ number in segment.

    Raises:
        ValueError: Invalid character or truncated number
    """
    values: list[int] = []
    shift = 0
    accumulator = 0
    for char in segment:
        try:
            digit = _BASE64_VALUES[char]
        except KeyError as e:
            msg = f"Invalid Base64 VLQ character {char!r}"
            raise ValueError(msg) from e
        accumulator += (digit & _VLQ_MASK) << shift
        if digit & _VLQ_CONTINUATION:
            shift += _VLQ_SHIFT
            continue
        negative = accumulator & 1
        accumulator >>= 1
        values.append(-accumulator if negative else accumulator)
        shift = 0
        accumulator = 0
    if shift:
        msg = f"Truncated Base64 VLQ segment {segment!r}"
        raise ValueError(msg)
    return values


# ============================================================================
# MAPPINGS
# ============================================================================


def decode_mappings(mappings: str) -> list[list[Segment]]:
    """Decode a mappings string into absolute segments per generated line.

    Raises:
        ValueError: Malformed segment
    """
    lines: list[list[Segment]] = []
    source = original_line = original_column = name = 0
    for line_text in mappings.split(";"):
        column = 0
        segments: list[Segment] = []
        for segment_text in line_text.split(","):
            if not segment_text:
                continue
            fields = decode_vlq(segment_text)
            if len(fields) not in (1, 4, 5):
                msg = f"Segment must have 1, 4 or 5 fields, got {len(fields)}"
                raise ValueError(msg)
            column += fields[0]
            if len(fields) == 1:
                segments.append((column,))
                continue
            source += fields[1]
            original_line += fields[2]
            original_column += fields[3]
            if len(fields) == 5:
                name += fields[4]
                segments.append((column, source, original_line, original_column, name))
            else:
                segments.append((column, source, original_line, original_column))
        lines.append(segments)
    return lines


def encode_mappings(lines: Sequence[Sequence[Segment]]) -> str:
    """Encode absolute segments per generated line into a mappings string."""
    source = original_line = original_column = name = 0
    encoded_lines: list[str] = []
    for segments in lines:
        column = 0
        encoded_segments: list[str] = []
        for segment in segments:
            parts = [encode_vlq(segment[0] - column)]
            column = segment[0]
            if len(segment) >= 4:
                parts.append(encode_vlq(segment[1] - source))
                parts.append(encode_vlq(segment[2] - original_line))
                parts.append(encode_vlq(segment[3] - original_column))
                source, original_line, original_column = segment[1], segment[2], segment[3]
            if len(segment) == 5:
                parts.append(encode_vlq(segment[4] - name))
                name = segment[4]
            encoded_segments.append("".join(parts))
        encoded_lines.append(",".join(encoded_segments))
    return ";".join(encoded_lines)


# ============================================================================
# REMAPPING
# ============================================================================


def remap_source_map(
    source_map: Mapping[str, Any],
    old_text: str,
    new_text: str,
    edits: Sequence[tuple[int, int, int]],
    *,
    file: str | None = None,
) -> dict[str, Any]:
    """Carry a source map of old_text over to new_text.

    Args:
        source_map: v3 source map whose generated file is old_text
        old_text: Text before the edits
        new_text: Text after the edits
        edits: Sorted, non-overlapping (start, end, replacement_length) in
            old_text offsets
        file: New value for the map's ``file`` field

    Returns:
        New source map dict. Segments outside edited ranges move with their
        text; segments strictly inside a replaced range are dropped; each
        replacement starts with the mapping that covered its range start.
    """
    old_lines = LineOffsetCache(old_text)
    new_lines = LineOffsetCache(new_text)

    # (old offset, tail) for every segment that lands inside old_text
    flat: list[tuple[int, int, Segment]] = []
    for line_index, segments in enumerate(decode_mappings(source_map.get("mappings", ""))):
        if line_index >= old_lines.line_count:
            break
        for segment in segments:
            offset = old_lines.get_offset(line_index + 1, segment[0] + 1)
            flat.append((offset, line_index, segment[1:]))
    flat.sort(key=lambda item: item[0])

    placed: list[tuple[int, Segment]] = []
    edit_index = 0
    delta = 0
    last_with_source: tuple[int, int, Segment] | None = None

    def covering_for(start: int) -> Segment | None:
        # Mapping in effect at start, unless a segment already sits there.
        if last_with_source is None:
            return None
        offset, line_index, tail = last_with_source
        if offset >= start or old_lines.get_line_col(start)[0] != line_index + 1:
            return None
        return tail

    for offset, line_index, tail in flat:
        # Apply edits that end at or before this segment.
        while edit_index < len(edits) and edits[edit_index][1] <= offset:
            start, end, replacement_length = edits[edit_index]
            if end > start:
                inherited = covering_for(start)
                if inherited is not None:
                    placed.append((start + delta, inherited))
            delta += replacement_length - (end - start)
            edit_index += 1

        if edit_index < len(edits):
            start, end, _ = edits[edit_index]
            if start < offset < end:
                continue
        placed.append((offset + delta, tail))
        if tail:
            last_with_source = (offset, line_index, tail)

    # Edits after the last segment may still inherit a mapping.
    while edit_index < len(edits):
        start, end, replacement_length = edits[edit_index]
        if end > start:
            inherited = covering_for(start)
            if inherited is not None:
                placed.append((start + delta, inherited))
        delta += replacement_length - (end - start)
        edit_index += 1

    new_segments: list[list[Segment]] = [[] for _ in range(new_lines.line_count)]
    seen: set[int] = set()
    for new_offset, tail in sorted(placed, key=lambda item: item[0]):
        if new_offset in seen:
            continue
        seen.add(new_offset)
        line, column = new_lines.get_line_col(new_offset)
        new_segments[line - 1].append((column - 1, *tail))

    while new_segments and not new_segments[-1]:
        new_segments.pop()

    remapped = dict(source_map)
    remapped["mappings"] = encode_mappings(new_segments)
    if file is not None:
        remapped["file"] = file
    return remapped
