"""Union-find clustering of person aggregates into unique individuals."""

import structlog

from records_intel.models import CATEGORY_SPECIFICITY, PersonAggregate
from records_intel.processing.name_matching import NameMatcher

logger = structlog.get_logger(__name__)

UNKNOWN_ROLE = "unknown"


class DisjointSet:
    """Union by size with path compression over indices ``0..n-1``."""

    def __init__(self, size: int) -> None:
        self.parent = list(range(size))
        self.size = [1] * size

    def find(self, item: int) -> int:
        root = item
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[item] != root:
            self.parent[item], item = root, self.parent[item]
        return root

    def union(self, a: int, b: int) -> bool:
        """Join the sets of ``a`` and ``b``. Returns False if already joined."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return False
        if self.size[root_a] < self.size[root_b]:
            root_a, root_b = root_b, root_a
        self.parent[root_b] = root_a
        self.size[root_a] += self.size[root_b]
        return True

    def groups(self) -> list[list[int]]:
        """Members of each set, sets ordered by their smallest member."""
        by_root: dict[int, list[int]] = {}
        for item in range(len(self.parent)):
            by_root.setdefault(self.find(item), []).append(item)
        return list(by_root.values())


def _category_rank(category: str) -> int:
    return CATEGORY_SPECIFICITY.get(category.lower(), len(CATEGORY_SPECIFICITY))


def _collapse_cluster(members: list[PersonAggregate]) -> PersonAggregate:
    by_mentions = sorted(members, key=lambda p: p.total_mentions, reverse=True)
    canonical = by_mentions[0]

    top_role = next(
        (p.top_role for p in by_mentions if p.top_role and p.top_role.lower() != UNKNOWN_ROLE),
        canonical.top_role,
    )
    top_category = min((p.top_category for p in members), key=_category_rank)

    return canonical.model_copy(
        update={
            "total_mentions": sum(p.total_mentions for p in members),
            "doc_count": sum(p.doc_count for p in members),
            "top_role": top_role,
            "top_category": top_category,
        }
    )


def deduplicate(
    aggregates: list[PersonAggregate],
    matcher: NameMatcher | None = None,
) -> list[PersonAggregate]:
    """Cluster name variants and emit one record per individual.

    Every unordered pair is compared, which is fine for the hundreds to
    low thousands of candidate names a roster run sees. Within a cluster
    the highest-mention member supplies the name, mentions and document
    counts are summed, the role comes from the highest-mention member with
    a known role, and the most specific category wins.

    Args:
        aggregates: Person aggregates, one per normalized name.
        matcher: Name matcher. A default one is created if omitted.

    Returns:
        New aggregates sorted by total mentions, descending. Inputs are
        not modified.
    """
    matcher = matcher or NameMatcher()
    names = [a.normalized_name for a in aggregates]
    clusters = DisjointSet(len(aggregates))

    merges = 0
    for i in range(len(names)):
        for j in range(i + 1, len(names)):
            if matcher.should_merge(names[i], names[j]) and clusters.union(i, j):
                merges += 1

    deduplicated = []
    for group in clusters.groups():
        members = [aggregates[i] for i in group]
        if len(members) == 1:
            deduplicated.append(members[0].model_copy())
        else:
            deduplicated.append(_collapse_cluster(members))

    deduplicated.sort(key=lambda p: (-p.total_mentions, p.normalized_name))

    logger.info(
        "deduplication_complete",
        input_names=len(aggregates),
        unique_persons=len(deduplicated),
        merges=merges,
    )
    return deduplicated
