from typing import Iterable
from flightfinder.obs.logger import log_event
from flightfinder.types import Offer, PriceOrder, RankedSelection

def rank_offers(offers: Iterable[Offer], order: PriceOrder = PriceOrder.ASCENDING,
                limit: int = 1) -> RankedSelection:
    """Sort by total price and keep the first `limit` offers.

    Ascending (cheapest first) is the product default; ties keep provider order.
    Prices are only compared within the first offer's currency; offers quoted
    in another currency are dropped.
    """
    items = list(offers)
    if not items:
        return RankedSelection(offers=(), order=order)
    currency = items[0].price.currency
    comparable = [o for o in items if o.price.currency == currency]
    if len(comparable) < len(items):
        log_event("offers_currency_mismatch", level="WARNING", currency=currency,
                  dropped=[o.id for o in items if o.price.currency != currency])
    sorted_by_price = sorted(
        comparable,
        key=lambda o: o.price.amount,
        reverse=order == PriceOrder.DESCENDING,
    )
    return RankedSelection(offers=tuple(sorted_by_price[:max(1, limit)]), order=order)
