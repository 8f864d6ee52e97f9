"""Merging of chunk-level analysis records into one document record."""

from records_intel.models import AnalysisResult, PersonMention


def _longer_context(current: str, candidate: str) -> str:
    # Longer wins; equal lengths fall back to lexical order so the
    # choice does not depend on chunk order.
    if len(candidate) != len(current):
        return candidate if len(candidate) > len(current) else current
    return min(current, candidate)


def merge_results(results: list[AnalysisResult]) -> AnalysisResult:
    """Combine chunk records for one document.

    Persons are keyed by lower-cased name with mention counts summed.
    Connections, events, locations and key facts are de-duplicated by
    their keys in first-seen order. Summaries are joined with a space.
    Inputs are never modified.

    Args:
        results: Chunk-level records, in chunk order.

    Returns:
        The single input itself, or a new merged record.

    Raises:
        ValueError: If no results are given.
    """
    if not results:
        raise ValueError("merge_results requires at least one result")
    if len(results) == 1:
        return results[0]

    persons: dict[str, PersonMention] = {}
    connections = {}
    events = {}
    locations: dict[str, str] = {}
    key_facts: dict[str, str] = {}

    for result in results:
        for person in result.persons:
            key = person.name.lower()
            existing = persons.get(key)
            if existing is None:
                persons[key] = person.model_copy()
                continue
            existing.mention_count += person.mention_count
            existing.context = _longer_context(existing.context, person.context)

        for connection in result.connections:
            connections.setdefault(connection.dedup_key, connection.model_copy())

        for event in result.events:
            events.setdefault(event.dedup_key, event.model_copy(deep=True))

        for location in result.locations:
            locations.setdefault(location.lower(), location)

        for fact in result.key_facts:
            key_facts.setdefault(fact.lower(), fact)

    return results[0].model_copy(
        update={
            "persons": list(persons.values()),
            "connections": list(connections.values()),
            "events": list(events.values()),
            "locations": list(locations.values()),
            "key_facts": list(key_facts.values()),
            "summary": " ".join(r.summary for r in results if r.summary),
        }
    )
