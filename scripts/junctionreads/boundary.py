"""
Insertion-Centre Resolution

The insert sequence (transposon / cassette) is split into two arms at the
insertion centre. A read whose insert alignment starts before the centre
touches the first arm, which tells which side of the element the junction
belongs to.

Modes:
    AutomaticCentre  empirical estimate from an external estimator; falls
                     back to the half-length when the estimate is missing
    DefaultCentre    round(insert_length / 2)
    FixedCentre      user-supplied position, 0 < position <= insert_length

Configuration values map onto modes the same way the `centre` option of the
command line does: "auto"/True, "default"/False or an integer position.
"""

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .errors import InvalidBoundary, InvalidMode

logger = logging.getLogger(__name__)

Estimator = Callable[[], Optional[float]]

MODE_AUTOMATIC = "auto"
MODE_DEFAULT = "default"
MODE_FIXED = "fixed"


@dataclass(frozen=True)
class AutomaticCentre:
    """Estimate the centre from the observed alignments."""
    estimator: Optional[Estimator] = None


@dataclass(frozen=True)
class DefaultCentre:
    """Use the middle of the insert sequence."""


@dataclass(frozen=True)
class FixedCentre:
    """Use a caller-supplied position."""
    position: Union[int, float]


CentreMode = Union[AutomaticCentre, DefaultCentre, FixedCentre]


@dataclass(frozen=True)
class InsertionBoundary:
    """Resolved insertion centre of one run."""
    position: int
    mode: str  # 'auto', 'default', 'fixed', 'auto-fallback'
    insert_length: int


def half_length(insert_length: int) -> int:
    """
    Middle of the insert sequence, rounded to the nearest integer.

    Examples:
        >>> half_length(2476)
        1238
    """
    return int(round(insert_length / 2))


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_missing(value) -> bool:
    """None, NaN and infinite estimates count as no estimate."""
    if value is None:
        return True
    return _is_number(value) and not math.isfinite(value)


def _checked_position(position, insert_length: int) -> int:
    if isinstance(position, bool) or not isinstance(position, (int, float)):
        raise InvalidBoundary(position, insert_length)
    if isinstance(position, float) and not position.is_integer():
        raise InvalidBoundary(position, insert_length)
    if position <= 0 or position > insert_length:
        raise InvalidBoundary(position, insert_length)
    return int(position)


def resolve_boundary(mode: CentreMode, insert_length: int) -> InsertionBoundary:
    """
    Resolve the insertion centre for a run.

    Args:
        mode: AutomaticCentre, DefaultCentre or FixedCentre
        insert_length: Length of the insert sequence in the hybrid reference

    Returns:
        InsertionBoundary with the position to classify reads against

    Raises:
        InvalidBoundary: Fixed (or estimated) position outside
            [1, insert_length], or a non-positive insert length
        InvalidMode: `mode` is not one of the three mode types

    Examples:
        >>> resolve_boundary(DefaultCentre(), 2476).position
        1238
        >>> resolve_boundary(FixedCentre(500), 2476).position
        500
    """
    if insert_length is None or insert_length <= 0:
        raise InvalidBoundary.for_insert_length(insert_length)

    if isinstance(mode, DefaultCentre):
        return InsertionBoundary(half_length(insert_length), MODE_DEFAULT, insert_length)

    if isinstance(mode, FixedCentre):
        position = _checked_position(mode.position, insert_length)
        return InsertionBoundary(position, MODE_FIXED, insert_length)

    if isinstance(mode, AutomaticCentre):
        estimate = mode.estimator() if mode.estimator is not None else None
        if _is_missing(estimate):
            position = half_length(insert_length)
            logger.warning(
                f"No empirical insertion centre available, "
                f"using half the insert length ({position})"
            )
            return InsertionBoundary(position, f"{MODE_AUTOMATIC}-fallback", insert_length)
        if not _is_number(estimate):
            raise InvalidBoundary(estimate, insert_length)
        position = _checked_position(float(round(estimate)), insert_length)
        return InsertionBoundary(position, MODE_AUTOMATIC, insert_length)

    raise InvalidMode(mode)


def parse_centre_mode(value, estimator: Optional[Estimator] = None) -> CentreMode:
    """
    Map a configuration or command line value onto a centre mode.

    Args:
        value: "auto"/True, "default"/False, or an integer position (int or
            numeric string)
        estimator: Empirical estimator used by the automatic mode

    Returns:
        CentreMode instance

    Raises:
        InvalidMode: For any other value

    Examples:
        >>> parse_centre_mode("default")
        DefaultCentre()
        >>> parse_centre_mode("350")
        FixedCentre(position=350)
    """
    if isinstance(value, bool):
        return AutomaticCentre(estimator) if value else DefaultCentre()

    if isinstance(value, (int, float)):
        return FixedCentre(value)

    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("auto", "automatic", "true", "t"):
            return AutomaticCentre(estimator)
        if text in ("default", "false", "f"):
            return DefaultCentre()
        try:
            return FixedCentre(int(text))
        except ValueError:
            pass

    raise InvalidMode(value)
