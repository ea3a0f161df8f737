"""Price impact of a sweep relative to a spot reference."""

from depthsweep.domain.results import PriceImpactMetrics


def compute_price_impact(spot_price: float, average_realized_price: float) -> PriceImpactMetrics:
    """Compare the sweep's average price to spot.

    A non-positive spot means the reference is missing or invalid; the
    impact is reported as neutral (zeros) rather than NaN or infinity.
    """
    if spot_price <= 0:
        return PriceImpactMetrics(
            spot_price=spot_price,
            average_realized_price=average_realized_price,
            price_difference=0.0,
            discount_percent=0.0,
        )
    return PriceImpactMetrics(
        spot_price=spot_price,
        average_realized_price=average_realized_price,
        price_difference=spot_price - average_realized_price,
        discount_percent=1 - average_realized_price / spot_price,
    )
