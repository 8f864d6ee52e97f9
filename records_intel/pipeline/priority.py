"""Priority tiers deciding which documents earn paid analysis first."""

HIGH_PRIORITY = 3
NORMAL_PRIORITY = 2
LOW_PRIORITY = 1


def get_ai_priority(
    data_set: str,
    file_size_bytes: int | None,
    priority_data_sets: list[str] | tuple[str, ...] = (),
    large_file_bytes: int | None = None,
) -> int:
    """Priority of a document for Tier 1 analysis.

    Args:
        data_set: Data-set id of the document.
        file_size_bytes: Size of the source file, if known.
        priority_data_sets: Data sets analyzed first.
        large_file_bytes: Files above this size are deprioritized; they
            are mostly scanned bulk exports with little extractable text.

    Returns:
        3 for priority data sets, 1 for unknown data sets or oversized
        files, 2 otherwise.
    """
    if data_set in priority_data_sets:
        return HIGH_PRIORITY
    if data_set == "unknown":
        return LOW_PRIORITY
    if large_file_bytes is not None and file_size_bytes is not None and file_size_bytes > large_file_bytes:
        return LOW_PRIORITY
    return NORMAL_PRIORITY
