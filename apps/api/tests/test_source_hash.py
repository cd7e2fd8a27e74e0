"""source_hash gates re-embedding: same text, same digest."""

from apps.api.utils.hashing import source_hash


def test_same_input_same_hash() -> None:
    h1 = source_hash("Company: Acme")
    assert h1 == source_hash("Company: Acme")
    assert len(h1) == 64
    assert all(c in "0123456789abcdef" for c in h1)


def test_any_change_changes_hash() -> None:
    assert source_hash("Company: Acme") != source_hash("Company: Acme ")
