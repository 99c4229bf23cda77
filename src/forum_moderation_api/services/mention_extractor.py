"""Pure @mention extraction and target selection."""

import re

from collections.abc import Iterable
from collections.abc import Mapping
from uuid import UUID

# "@" starts a mention only when it is not glued to a preceding word or to
# e-mail/URL punctuation, so "user@example.com" and "a/@b" never match.
MENTION_PATTERN = re.compile(r"(?<![\w.+\-@/])@([A-Za-z0-9_]+)")


def extract_mention_handles(text: str, max_length: int | None = None) -> list[str]:
    """Lower-cased handles in first-occurrence order, without duplicates.

    A handle is the maximal run of username characters after ``@``; trailing
    punctuation is never part of it. Handles longer than ``max_length`` are
    ignored since no username can match them.
    """
    handles: list[str] = []
    seen: set[str] = set()
    for match in MENTION_PATTERN.finditer(text or ""):
        handle = match.group(1).lower()
        if max_length is not None and len(handle) > max_length:
            continue
        if handle not in seen:
            seen.add(handle)
            handles.append(handle)
    return handles


def select_mention_targets(
    handles: Iterable[str],
    resolved: Mapping[str, UUID],
    author_pk: UUID,
    cap: int,
) -> list[UUID]:
    """Map handles to user pks, dropping unknowns, the author and repeats.

    At most ``cap`` users are returned; the rest are silently dropped.
    """
    targets: list[UUID] = []
    if cap <= 0:
        return targets
    for handle in handles:
        user_pk = resolved.get(handle.lower())
        if user_pk is None or user_pk == author_pk or user_pk in targets:
            continue
        targets.append(user_pk)
        if len(targets) >= cap:
            break
    return targets
