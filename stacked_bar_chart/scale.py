"""Round-number value axis for stacked bars."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .logging_utils import apply_debug_logging
from .model import AxisScale, ChartError

logger = logging.getLogger(__name__)

NICE_MANTISSAS: Tuple[float, ...] = (1.0, 2.0, 2.5, 5.0, 10.0)
# Scale used when every category total is zero: 0..1 split by the target.
DEGENERATE_FALLBACK_MAX = 1.0
TICK_TOLERANCE = 2
_EPS = 1e-9


class ScaleOverflow(ChartError):
    """The rounded-up axis maximum does not fit in a float."""

    def __init__(self, data_max: float) -> None:
        self.data_max = data_max
        super().__init__(f"data maximum {data_max:g} is too large for a value axis")


@dataclass(frozen=True)
class DegenerateScaleWarning:
    """Non-fatal signal that the fallback scale replaced the data scale."""

    data_max: float
    fallback: AxisScale
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ScaleResult:
    scale: AxisScale
    warning: Optional[DegenerateScaleWarning] = None


def _decompose(raw_step: float) -> Tuple[float, int]:
    exponent = math.floor(math.log10(raw_step))
    fraction = raw_step / (10.0 ** exponent)
    # log10 noise can leave the fraction just outside [1, 10)
    if fraction >= 10.0 - _EPS:
        exponent += 1
        fraction /= 10.0
    elif fraction < 1.0 - _EPS:
        exponent -= 1
        fraction *= 10.0
    return fraction, exponent


def _make_step(mantissa: float, exponent: int) -> Tuple[float, int]:
    """Return the step and the decimal places needed to print its multiples."""

    if mantissa >= 10.0:
        mantissa, exponent = 1.0, exponent + 1
    # Going through text keeps 2.5e-3 exactly representable as typed.
    step = float(f"{mantissa:g}e{exponent}")
    precision = max(0, -exponent)
    if mantissa == 2.5:
        precision = max(0, 1 - exponent)
    return step, precision


def _smaller_nice(mantissa: float, exponent: int) -> Tuple[float, int]:
    idx = NICE_MANTISSAS.index(mantissa)
    if idx == 0:
        return NICE_MANTISSAS[-2], exponent - 1
    return NICE_MANTISSAS[idx - 1], exponent


def _tick_count(data_max: float, step: float) -> int:
    ticks = max(1, math.ceil(data_max / step))
    while ticks > 1 and (ticks - 1) * step >= data_max:
        ticks -= 1
    while ticks * step < data_max:
        ticks += 1
    return ticks


def nice_step(raw_step: float) -> Tuple[float, int]:
    """Round ``raw_step`` up to ``{1, 2, 2.5, 5} x 10^k``.

    Returns ``(step, precision)`` where ``precision`` is the number of decimal
    places that renders every multiple of ``step`` without floating noise.
    """

    if not math.isfinite(raw_step) or raw_step <= 0:
        raise ValueError(f"raw step must be a positive finite number, got {raw_step!r}")
    fraction, exponent = _decompose(raw_step)
    mantissa = next(m for m in NICE_MANTISSAS if fraction <= m + _EPS)
    return _make_step(mantissa, exponent)


def _scale_for(data_max: float, target: int) -> AxisScale:
    raw_step = data_max / target
    fraction, exponent = _decompose(raw_step)
    mantissa = next(m for m in NICE_MANTISSAS if fraction <= m + _EPS)
    if mantissa >= 10.0:
        mantissa, exponent = 1.0, exponent + 1

    step, precision = _make_step(mantissa, exponent)
    ticks = _tick_count(data_max, step)

    if ticks < target - TICK_TOLERANCE:
        finer_mantissa, finer_exponent = _smaller_nice(mantissa, exponent)
        finer_step, finer_precision = _make_step(finer_mantissa, finer_exponent)
        finer_ticks = _tick_count(data_max, finer_step)
        if finer_ticks <= target + TICK_TOLERANCE:
            step, precision, ticks = finer_step, finer_precision, finer_ticks

    maximum = round(ticks * step, precision)
    if maximum < data_max:
        ticks += 1
        maximum = round(ticks * step, precision)
    return AxisScale(minimum=0.0, maximum=maximum, step=step, precision=precision)


def compute_scale(data_max: float, tick_count_target: int = 5) -> ScaleResult:
    """Derive a zero-based round-number axis covering ``data_max``."""

    if tick_count_target < 1:
        raise ValueError(f"tick_count_target must be >= 1, got {tick_count_target}")

    data_max = float(data_max)
    if math.isinf(data_max) and data_max > 0.0:
        raise ScaleOverflow(data_max)
    if math.isnan(data_max) or data_max <= 0.0:
        fallback = _scale_for(DEGENERATE_FALLBACK_MAX, tick_count_target)
        warning = DegenerateScaleWarning(
            data_max=data_max,
            fallback=fallback,
            message=(
                f"all category totals are zero (max={data_max:g}); "
                f"using default scale 0..{fallback.format_tick(fallback.maximum)}"
            ),
        )
        return ScaleResult(scale=fallback, warning=warning)

    try:
        scale = _scale_for(data_max, tick_count_target)
    except OverflowError as exc:
        raise ScaleOverflow(data_max) from exc
    if not math.isfinite(scale.maximum):
        raise ScaleOverflow(data_max)
    return ScaleResult(scale=scale)


apply_debug_logging(globals(), logger=logger)
