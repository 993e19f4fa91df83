import pytest

from miru_examples import EXAMPLES, get_example, list_examples


def test_catalog_entries_are_complete():
    ids = [example["id"] for example in EXAMPLES]
    assert len(ids) == len(set(ids)) == 10
    for example in EXAMPLES:
        assert set(example) == {"id", "name", "description", "difficulty", "code"}
        assert 1 <= example["difficulty"] <= 4
        assert "print(" in example["code"]


def test_list_returns_copies():
    examples = list_examples()
    examples[0]["code"] = "changed"
    assert get_example("hello")["code"] == "print(42);"


def test_get_unknown_example():
    with pytest.raises(KeyError):
        get_example("missing")
