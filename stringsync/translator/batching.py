"""
Batching utilities for splitting translation requests.

Providers cap both the number of texts and the total characters accepted in a
single request. These helpers split an ordered list into batches that respect
both limits without reordering, deduplicating or splitting any text.
"""

from typing import Callable, List, Sequence, TypeVar

T = TypeVar('T')


def _check_limits(max_count: int, max_chars: int) -> None:
    if max_count < 1:
        raise ValueError(f"max_count must be at least 1, got {max_count}")
    if max_chars < 1:
        raise ValueError(f"max_chars must be at least 1, got {max_chars}")


def batch_items(
    items: Sequence[T],
    max_count: int,
    max_chars: int,
    length: Callable[[T], int],
) -> List[List[T]]:
    """
    Split items into batches bounded by count and cumulative length.

    An item joins the current batch while the batch holds fewer than
    ``max_count`` items and the running length plus the item's length stays
    strictly below ``max_chars``. Otherwise the current batch is closed and a
    new one starts with the item. An item that alone reaches ``max_chars``
    still gets a batch of its own.

    Args:
        items: Items to split, in order
        max_count: Maximum items per batch
        max_chars: Exclusive upper bound for the total length of a batch
        length: Function measuring an item

    Returns:
        List of non-empty batches whose concatenation equals ``items``
    """
    _check_limits(max_count, max_chars)

    batches = []
    current_batch = []
    current_length = 0

    for item in items:
        item_length = length(item)
        if len(current_batch) < max_count and current_length + item_length < max_chars:
            current_batch.append(item)
            current_length += item_length
        else:
            if current_batch:
                batches.append(current_batch)
            current_batch = [item]
            current_length = item_length

    # Add the last batch if it has items
    if current_batch:
        batches.append(current_batch)

    return batches


def text_batches(texts: Sequence[str], max_count: int, max_chars: int) -> List[List[str]]:
    """
    Split texts into provider-safe batches.

    Example:
        >>> text_batches(["a", "b", "c"], max_count=2, max_chars=1000)
        [['a', 'b'], ['c']]
    """
    return batch_items(texts, max_count, max_chars, len)


def source_batches(sources: Sequence[T], max_count: int, max_chars: int) -> List[List[T]]:
    """Split TranslationSource objects into batches, measuring their text."""
    return batch_items(sources, max_count, max_chars, lambda source: len(source.text))
