"""Native functions registered into every global scope via register_native."""

from __future__ import annotations

import time
from typing import List

from .runtime import register_native
from .types import Frame, LoxNumber, LoxValue

@register_native("clock", arity=0)
def std_clock(_frame: Frame, args: List[LoxValue]) -> LoxNumber:
    return LoxNumber(time.time())
