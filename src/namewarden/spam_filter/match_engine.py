"""Exact-match comparison of a candidate's normalized names against protected members."""

from __future__ import annotations

from typing import Iterable, List, Optional, Set

from namewarden.datatypes.spam_filter_datatypes import MemberIdentity
from namewarden.spam_filter.name_normalizer import NameNormalizer, default_normalizer


class MatchEngine:
    """Decides whether a candidate impersonates one of the protected members.

    A protected member contributes its nickname when set, otherwise its
    username. The candidate contributes its nickname (when set) and its
    username; either one being in the pool is a match. The pool is rebuilt
    from the members passed in on every call.
    """

    def __init__(self, normalizer: NameNormalizer = default_normalizer) -> None:
        self.normalizer = normalizer

    def build_protected_pool(self, protected_members: Iterable[MemberIdentity]) -> Set[str]:
        return {
            self.normalizer.normalize(member.nickname or member.username)
            for member in protected_members
        }

    def candidate_names(self, candidate: MemberIdentity) -> List[str]:
        names: List[str] = []
        # New members and members resetting their nickname have none
        if candidate.nickname:
            names.append(self.normalizer.normalize(candidate.nickname))
        names.append(self.normalizer.normalize(candidate.username))
        return names

    def find_match(
        self,
        candidate: MemberIdentity,
        protected_members: Iterable[MemberIdentity],
    ) -> Optional[str]:
        """Return the normalized name that matched, or None."""
        pool = self.build_protected_pool(protected_members)
        if not pool:
            return None
        for name in self.candidate_names(candidate):
            if name in pool:
                return name
        return None

    def evaluate(
        self,
        candidate: MemberIdentity,
        protected_members: Iterable[MemberIdentity],
    ) -> bool:
        return self.find_match(candidate, protected_members) is not None
