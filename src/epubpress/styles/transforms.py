"""Parser for CSS ``transform`` values.

``rotate(45deg) scale(1.5) translateX(10px)`` becomes an ordered tuple of
:class:`TransformOp` values. Unknown functions are skipped.
"""

from __future__ import annotations

import re

from epubpress.styles.models import TransformKind, TransformOp
from epubpress.styles.units import convert_unit

_FUNCTION_RE = re.compile(r"(\w+)\(([^)]+)\)")


def _to_float(raw: str, default: float) -> float:
    try:
        return float(raw)
    except ValueError:
        return default


def _scale(raw: str) -> float:
    return _to_float(raw, 1.0)


def _function_ops(name: str, args: list[str]) -> list[TransformOp]:
    if name == "rotate":
        return [TransformOp(TransformKind.ROTATE, args[0])]

    if name == "scale":
        if len(args) == 1:
            return [TransformOp(TransformKind.SCALE, _scale(args[0]))]
        return [
            TransformOp(TransformKind.SCALE_X, _scale(args[0])),
            TransformOp(TransformKind.SCALE_Y, _scale(args[1])),
        ]
    if name == "scaleX":
        return [TransformOp(TransformKind.SCALE_X, _scale(args[0]))]
    if name == "scaleY":
        return [TransformOp(TransformKind.SCALE_Y, _scale(args[0]))]

    if name == "translate":
        ops = [TransformOp(TransformKind.TRANSLATE_X, convert_unit(args[0]))]
        if len(args) >= 2:
            ops.append(TransformOp(TransformKind.TRANSLATE_Y, convert_unit(args[1])))
        return ops
    if name == "translateX":
        return [TransformOp(TransformKind.TRANSLATE_X, convert_unit(args[0]))]
    if name == "translateY":
        return [TransformOp(TransformKind.TRANSLATE_Y, convert_unit(args[0]))]

    if name == "skew":
        ops = [TransformOp(TransformKind.SKEW_X, args[0])]
        if len(args) >= 2:
            ops.append(TransformOp(TransformKind.SKEW_Y, args[1]))
        return ops
    if name == "skewX":
        return [TransformOp(TransformKind.SKEW_X, args[0])]
    if name == "skewY":
        return [TransformOp(TransformKind.SKEW_Y, args[0])]

    if name == "matrix":
        # matrix(a, b, c, d, tx, ty)
        if len(args) == 6:
            return [TransformOp(TransformKind.MATRIX, tuple(_to_float(arg, 0.0) for arg in args))]
        return []

    return []


def parse_transform(raw: str) -> tuple[TransformOp, ...] | None:
    """Parse a transform expression, returning ``None`` when nothing was recognized."""

    ops: list[TransformOp] = []
    for match in _FUNCTION_RE.finditer(raw or ""):
        args = [arg.strip() for arg in match.group(2).split(",")]
        ops.extend(_function_ops(match.group(1), args))
    return tuple(ops) if ops else None
