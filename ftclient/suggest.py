from typing import Iterable


def _levenstein(s1: str, s2: str) -> int:
    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, 1):
        current = [i]
        for j, c2 in enumerate(s2, 1):
            insert = current[j - 1] + 1
            deleted = previous[j] + 1
            change = previous[j - 1] + (c1 != c2)
            current.append(min(insert, deleted, change))
        previous = current
    return previous[-1]


def get_suggestion(token: str, choices: Iterable[str], max_distance: int = 2) -> str:
    """Closest entry of `choices` to `token`, or "" when nothing is close enough."""
    dis = float('inf')
    suggestion = ""
    for choice in choices:
        d = _levenstein(token.lower(), choice.lower())
        if d < dis:
            dis = d
            suggestion = choice
    return suggestion if dis <= max_distance else ""
