"""
Candidate bullets for a job.

A job's candidates are its own embedded bullets plus the pool bullets whose
owner id is the job's id. Each candidate carries the oracle's score, or a
default score when the oracle did not rank it.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Set

from quiver.contexts.catalog.models import BulletId, BulletRecord, EntryId, ExperienceEntry
from quiver.contexts.targeting.page_space import PageLayout


@dataclass(frozen=True)
class CandidateBullet:
    bullet_id: BulletId
    content: str
    relevance_score: float
    from_pool: bool = False


class CandidateIndex:
    """
    Pool bullets grouped by owner entry id.

    Built once per allocation so that candidate lookup per job does not rescan
    the whole pool. Records without an owner are never candidates.
    """

    def __init__(self, bullet_pool: Iterable[BulletRecord]):
        self._by_owner: Dict[EntryId, List[BulletRecord]] = defaultdict(list)
        for record in bullet_pool:
            if record.owner_id is not None:
                self._by_owner[record.owner_id].append(record)

    def pool_bullets_for(self, owner: EntryId) -> List[BulletRecord]:
        return list(self._by_owner.get(owner, []))

    def bullet_ids(self) -> Set[BulletId]:
        return {record.id for records in self._by_owner.values() for record in records}


def rank_candidates(
    job: ExperienceEntry,
    index: CandidateIndex,
    scores: Mapping[BulletId, float],
    layout: PageLayout,
) -> List[CandidateBullet]:
    """
    Candidates for a job, best first.

    The sort is stable: equal scores keep native bullets (in their original
    order) ahead of pool bullets (in pool order). A pool record reusing an id
    already seen for this job is skipped.

    Args:
        job: Experience entry
        index: Pool lookup
        scores: Oracle scores by bullet id
        layout: Supplies the default scores for unranked bullets

    Returns:
        Candidates sorted by descending relevance score
    """
    candidates = [
        CandidateBullet(
            bullet_id=bullet_id,
            content=content,
            relevance_score=scores.get(bullet_id, layout.default_native_score),
        )
        for bullet_id, content in zip(job.native_bullet_ids(), job.bullets)
    ]

    seen = {c.bullet_id for c in candidates}
    for record in index.pool_bullets_for(job.id):
        if record.id in seen:
            continue
        seen.add(record.id)
        candidates.append(
            CandidateBullet(
                bullet_id=record.id,
                content=record.content,
                relevance_score=scores.get(record.id, layout.default_pool_score),
                from_pool=True,
            )
        )

    return sorted(candidates, key=lambda c: c.relevance_score, reverse=True)
