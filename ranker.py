from dataclasses import dataclass
from typing import List, Mapping


@dataclass(frozen=True)
class RankedPair:
    key: str
    count: int


def rank(
    counts: Mapping[str, int],
    minimum: int = 0,
    maximum: int = 0,
) -> List[RankedPair]:
    """
    Keep keys whose count lies in [minimum, maximum] and order them by
    count descending, then key ascending. A maximum of 0 means no upper
    bound. `counts` is not modified.
    """
    pairs = [
        RankedPair(key, count)
        for key, count in counts.items()
        if count >= minimum and (maximum <= 0 or count <= maximum)
    ]

    pairs.sort(key=lambda p: (-p.count, p.key))
    return pairs
