from __future__ import annotations

from shoptranslator.services.batching import DEFAULT_BATCH_SIZE, partition
from shoptranslator.services.fragments import TranslationRequest


def _requests(count: int) -> list[TranslationRequest]:
    return [
        TranslationRequest(source_id=str(i), field="title", original_text=f"Text {i}")
        for i in range(count)
    ]


def test_partition_preserves_order_and_sizes() -> None:
    requests = _requests(25)

    batches = partition(requests, 10)

    assert [len(batch) for batch in batches] == [10, 10, 5]
    assert [batch.index for batch in batches] == [0, 1, 2]
    flattened = [request for batch in batches for request in batch.requests]
    assert flattened == requests


def test_partition_numbers_requests_within_each_batch() -> None:
    batches = partition(_requests(7), 3)

    assert [[r.ordinal for r in batch.requests] for batch in batches] == [
        [0, 1, 2],
        [0, 1, 2],
        [0],
    ]
    assert batches[2].requests[0].original_text == "Text 6"


def test_partition_of_empty_input_yields_no_batches() -> None:
    assert partition([], 10) == []


def test_partition_falls_back_to_default_size_for_invalid_size() -> None:
    batches = partition(_requests(12), 0)

    assert [len(batch) for batch in batches] == [DEFAULT_BATCH_SIZE, 2]


def test_partition_with_size_one_yields_single_item_batches() -> None:
    requests = _requests(3)

    batches = partition(requests, 1)

    assert [batch.requests[0] for batch in batches] == requests
