"""
Pleno Recommender - single numbers to back inside a dozen.

Ranks the dozen's numbers by how long ago they last appeared, most
overdue first. Numbers never seen rank above everything else; ties go to
the lower number.
"""

import math

import sys
sys.path.insert(0, '.')
from config import ZERO_DOZEN, DOZEN_RANGES, PLENOS_PRIMARY_COUNT, get_dozen_numbers


def number_gaps(outcomes, dozen):
    """Gap since last appearance for every number of `dozen` (inf if unseen)."""
    start, end = DOZEN_RANGES[dozen]
    gaps = {n: math.inf for n in get_dozen_numbers(dozen)}
    remaining = len(gaps)

    for gap, number in enumerate(reversed(list(outcomes))):
        if start <= number <= end and gaps[number] == math.inf:
            gaps[number] = gap
            remaining -= 1
            if remaining == 0:
                break

    return gaps


def recommend_plenos(outcomes, dozen, take=PLENOS_PRIMARY_COUNT):
    if dozen == ZERO_DOZEN:
        return [0]
    if take <= 0:
        return []

    gaps = number_gaps(outcomes, dozen)
    ranked = sorted(gaps, key=lambda n: (-gaps[n], n))
    return ranked[:take]
