"""Fuzzy ranking of repository names against a typed query.

Substring hits always win over scattered subsequence hits.
Results are ordered best-first with ties kept in input label order.
"""

from __future__ import annotations

SUBSTRING_BASE_SCORE = 10_000
WORD_BOUNDARY_CHARS = "/_- ."


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``candidate`` as a case-insensitive subsequence match of ``query``.

    Returns ``None`` when some query character cannot be matched in order.
    Contiguous runs and matches at word boundaries raise the score, gaps and
    long candidates lower it.
    """
    if not query:
        return 0
    query_folded = query.casefold()
    candidate_folded = candidate.casefold()

    score = 0
    prev_idx = -1
    run = 0
    for needle in query_folded:
        idx = candidate_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, gap * 2)
        if idx == 0 or candidate_folded[idx - 1] in WORD_BOUNDARY_CHARS:
            score += 35
        prev_idx = idx

    score -= len(candidate_folded) // 5
    return score


def substring_index(query: str, candidate: str) -> int | None:
    if not query:
        return 0
    idx = candidate.casefold().find(query.casefold())
    if idx < 0:
        return None
    return idx


def fuzzy_match_labels(query: str, labels: list[str]) -> list[tuple[int, int]]:
    """Rank ``labels`` against ``query`` and return ``(index, score)`` pairs.

    An empty query keeps every label in its input order. Otherwise, when
    any label contains the query as a substring only those labels are
    returned, earliest hit and shortest label first. Without substring hits the
    subsequence score decides. Equal keys fall back to the input index.
    """
    if not query:
        return [(idx, 0) for idx in range(len(labels))]

    substring_scored: list[tuple[int, int, int]] = []
    for idx, label in enumerate(labels):
        substr_idx = substring_index(query, label)
        if substr_idx is None:
            continue
        substring_scored.append((substr_idx, len(label), idx))
    if substring_scored:
        substring_scored.sort()
        return [
            (label_idx, SUBSTRING_BASE_SCORE - (substr_idx * 50) - label_len)
            for substr_idx, label_len, label_idx in substring_scored
        ]

    scored: list[tuple[int, int]] = []
    for idx, label in enumerate(labels):
        score = fuzzy_score(query, label)
        if score is None:
            continue
        scored.append((score, idx))
    scored.sort(key=lambda item: (-item[0], item[1]))
    return [(idx, score) for score, idx in scored]
