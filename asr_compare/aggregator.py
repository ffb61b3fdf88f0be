"""Aggregator — reduces a completed outcome set into comparison statistics."""
from collections.abc import Sequence
from functools import reduce

from asr_compare.constants import MSG_ERR_EMPTY
from asr_compare.errors import EmptyInputError
from asr_compare.models import BackendOutcome, ComparisonReport


def summarize(outcomes: Sequence[BackendOutcome]) -> ComparisonReport:
    """Fastest and slowest are taken over every outcome, failures included.

    Ties keep the earliest outcome in request order. Raises EmptyInputError
    for an empty sequence instead of inventing statistics.
    """
    ordered = tuple(outcomes)
    match ordered:
        case []:
            raise EmptyInputError(MSG_ERR_EMPTY)
        case _:
            pass

    return ComparisonReport(
        outcomes=ordered,
        success_count=sum(1 for o in ordered if o.ok),
        fastest=reduce(lambda best, o: o if o.elapsed < best.elapsed else best, ordered),
        slowest=reduce(lambda worst, o: o if o.elapsed > worst.elapsed else worst, ordered),
    )
