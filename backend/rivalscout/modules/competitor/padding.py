# rivalscout/modules/competitor/padding.py
from typing import Callable, Iterable, List, Optional, Sequence


def fill_to_n(
    primary: List[str],
    pools: Sequence[Iterable[str]],
    n: int,
    exclude: Optional[Callable[[str], bool]] = None,
) -> List[str]:
    """
    Top up *primary* to *n* items from *pools*, tried in order.

    Case-insensitive duplicates are skipped, and so is anything *exclude*
    rejects. Overlap between buckets is fine; blocked or self domains are not.
    """
    out: List[str] = []
    seen = set()

    def take(item) -> None:
        key = str(item or "").lower()
        if not key or key in seen:
            return
        if exclude is not None and exclude(item):
            return
        seen.add(key)
        out.append(item)

    for item in primary:
        if len(out) >= n:
            break
        take(item)

    for pool in pools:
        for item in pool:
            if len(out) >= n:
                return out
            take(item)

    return out[:n]
