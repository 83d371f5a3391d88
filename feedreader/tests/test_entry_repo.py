from feedreader.models import Entry
from feedreader.repository import entry_repo


def test_add_and_get(db):
    rid = entry_repo.add_entry(db, "T", "S")
    assert entry_repo.get_entry(db, rid) == Entry(id=rid, title="T", subtitle="S")
    assert entry_repo.get_entry(db, rid + 100) is None


def test_find_by_title_exact_and_pattern(db):
    entry_repo.add_entry(db, "news", "b")
    entry_repo.add_entry(db, "news", "a")
    entry_repo.add_entry(db, "newsletter")
    assert len(entry_repo.find_by_title(db, "news")) == 2
    assert len(entry_repo.find_by_title(db, "news%", pattern=True)) == 3
    ordered = entry_repo.find_by_title(db, "news", order_by="subtitle")
    assert [e.subtitle for e in ordered] == ["a", "b"]


def test_rename_and_remove(db):
    entry_repo.add_entry(db, "My Title", "prueba2")
    assert entry_repo.rename_title(db, "My Title", "MyNewTitle") == 1
    assert entry_repo.find_by_title(db, "My Title") == []
    assert entry_repo.remove_by_title(db, "MyNewTitle") == 1
    assert entry_repo.count_entries(db) == 0


def test_list_entries_in_id_order(db):
    ids = [entry_repo.add_entry(db, t) for t in ("c", "a", "b")]
    assert [e.id for e in entry_repo.list_entries(db)] == ids
    assert entry_repo.list_titles(db) == ["c", "a", "b"]
