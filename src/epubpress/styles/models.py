"""Typed values shared by the stylesheet conversion modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Union


class TransformKind(Enum):
    ROTATE = "rotate"
    SCALE = "scale"
    SCALE_X = "scaleX"
    SCALE_Y = "scaleY"
    TRANSLATE_X = "translateX"
    TRANSLATE_Y = "translateY"
    SKEW_X = "skewX"
    SKEW_Y = "skewY"
    MATRIX = "matrix"


@dataclass(frozen=True, slots=True)
class TransformOp:
    """One primitive transform operation, applied in sequence by the renderer."""

    kind: TransformKind
    value: float | str | tuple[float, ...]

    def as_dict(self) -> dict[str, float | str | list[float]]:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {self.kind.value: value}


# number | percentage/keyword/unit string | parsed transform
StyleValue = Union[float, str, tuple[TransformOp, ...]]

# Plain keys map to StyleValue; keys starting with MEDIA_KEY_PREFIX map to a
# nested mapping of plain keys.
StyleMapping = Mapping[str, Union[StyleValue, Mapping[str, StyleValue]]]

MEDIA_KEY_PREFIX = "@media"


def is_media_key(key: str) -> bool:
    return key.startswith(MEDIA_KEY_PREFIX)
