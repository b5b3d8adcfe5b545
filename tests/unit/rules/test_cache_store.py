import pytest

from rulestudio.core.errors import CacheReadError
from rulestudio.rules.cache_store import RuleCacheStore
from rulestudio.rules.models import Rule, RuleCategory


@pytest.fixture
def store(tmp_path) -> RuleCacheStore:
    return RuleCacheStore(cache_dir=tmp_path / "cache", file_name="rules_cache.json")


def _rules(*ids: str) -> list[Rule]:
    return [Rule(id=rule_id, name=rule_id, category=RuleCategory.LINT) for rule_id in ids]


def test_load_without_snapshot_fails(store):
    with pytest.raises(CacheReadError):
        store.load()


def test_save_then_load(store):
    store.save(_rules("force_cast", "force_try"), tool_version="0.57.0")

    snapshot = store.load_snapshot()

    assert [r.id for r in snapshot.rules] == ["force_cast", "force_try"]
    assert snapshot.tool_version == "0.57.0"
    assert store.load()[0].category is RuleCategory.LINT


def test_save_replaces_previous_snapshot(store):
    store.save(_rules("force_cast", "force_try"))
    store.save(_rules("empty_count"))

    assert [r.id for r in store.load()] == ["empty_count"]


def test_save_leaves_no_temporary_files(store):
    store.save(_rules("force_cast"))

    assert [p.name for p in store.cache_dir.iterdir()] == ["rules_cache.json"]


def test_corrupt_snapshot_fails(store):
    store.cache_dir.mkdir(parents=True)
    store.path.write_text("{ this is not json", encoding="utf-8")

    with pytest.raises(CacheReadError) as exc_info:
        store.load()

    assert "corrupt" in str(exc_info.value)


def test_clear(store):
    store.save(_rules("force_cast"))
    store.clear()
    store.clear()

    with pytest.raises(CacheReadError):
        store.load()
