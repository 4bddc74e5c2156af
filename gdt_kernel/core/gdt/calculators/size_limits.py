"""Size limit calculation with MMC/LMC role assignment."""

from typing import Optional

from ..symbols import EXTERNAL_FEATURES, FeatureType
from .types import SizeLimits, round_to


def calculate_size_limits(
    nominal: float,
    tolerance_plus: float,
    tolerance_minus: float,
    feature_type: Optional[FeatureType],
    precision: Optional[int] = None,
) -> SizeLimits:
    """
    Calculate size limits and assign material condition roles.

    Internal features (hole, slot) are at maximum material at their lower
    limit; external features (pin, boss) at their upper limit. Any other
    feature type is treated as internal.

    Args:
        nominal: Nominal size
        tolerance_plus: Upper size tolerance (magnitude)
        tolerance_minus: Lower size tolerance (magnitude)
        feature_type: Toleranced feature
        precision: Decimal places to round to; unrounded when omitted

    Example:
        >>> limits = calculate_size_limits(10.0, 0.1, 0.0, FeatureType.HOLE)
        >>> limits.mmc, limits.lmc
        (10.0, 10.1)
    """
    upper = nominal + tolerance_plus
    lower = nominal - tolerance_minus
    if precision is not None:
        upper = round_to(upper, precision)
        lower = round_to(lower, precision)
        nominal = round_to(nominal, precision)

    if feature_type in EXTERNAL_FEATURES:
        mmc, lmc = upper, lower
    else:
        mmc, lmc = lower, upper

    return SizeLimits(
        nominal=nominal,
        mmc=mmc,
        lmc=lmc,
        upper_limit=upper,
        lower_limit=lower,
    )
