from __future__ import annotations

import logging
import math
import numbers
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .models import CanonicalProcess, DroppedRow, Number, ProcessDescriptor

logger = logging.getLogger(__name__)


def _to_number(value: Any) -> Optional[Number]:
    """
    Parse a form-style numeric field. Returns None when the value is not a
    finite number. A blank string counts as 0, like an emptied input box.

    Other real number types (Decimal, Fraction, numpy scalars) come back as
    int when integral and float otherwise, so the engines only ever add ints
    and floats.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (numbers.Real, Decimal)):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if "_" in text:
            # Digit separators are a Python literal feature, not a form value.
            return None
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return None
    else:
        return None

    try:
        as_float = float(number)
    except (OverflowError, ValueError):
        return None
    if not math.isfinite(as_float):
        return None

    if isinstance(number, (int, float)):
        return number
    return int(number) if number == int(number) else as_float


def normalize_with_diagnostics(
    descriptors: Sequence[ProcessDescriptor],
) -> Tuple[List[CanonicalProcess], List[DroppedRow]]:
    """
    Canonicalize raw descriptors and report which ones were excluded and why.

    Rows with a blank pid, a non-numeric arrival or burst, or a burst <= 0
    are left out of the canonical list. Negative arrivals are kept as given.
    """
    canonical: List[CanonicalProcess] = []
    dropped: List[DroppedRow] = []

    for index, raw in enumerate(descriptors):
        if not isinstance(raw, Mapping):
            logger.debug("Dropping row %d (not a descriptor): %r", index, raw)
            dropped.append(DroppedRow(original_index=index, descriptor=raw, reason="not a descriptor"))
            continue

        raw_pid = raw.get("pid")
        pid = "" if raw_pid is None else str(raw_pid).strip()
        arrival = _to_number(raw.get("arrival"))
        burst = _to_number(raw.get("burst"))

        reason = None
        if not pid:
            reason = "blank pid"
        elif arrival is None:
            reason = "non-numeric arrival"
        elif burst is None:
            reason = "non-numeric burst"
        elif burst <= 0:
            reason = "non-positive burst"

        if reason is not None:
            logger.debug("Dropping row %d (%s): %r", index, reason, raw)
            dropped.append(DroppedRow(original_index=index, descriptor=raw, reason=reason))
            continue

        if arrival < 0:
            # Accepted without clamping; the engines start their clock at 0.
            logger.warning("Process %s has negative arrival %s; keeping it as-is", pid, arrival)

        canonical.append(CanonicalProcess(pid=pid, arrival=arrival, burst=burst, original_index=index))

    return canonical, dropped


def normalize(descriptors: Sequence[ProcessDescriptor]) -> List[CanonicalProcess]:
    canonical, _ = normalize_with_diagnostics(descriptors)
    return canonical
