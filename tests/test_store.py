"""
Unit tests for the in-memory resume store.
"""

import threading

import pytest

from analyzer import analyze_resume
from store import RecordNotFoundError, ResumeStore


@pytest.fixture
def store():
    return ResumeStore()


class TestResumeStore:
    def test_add_and_get(self, store, scenario_resume):
        record = store.add("john.txt", scenario_resume, analyze_resume(scenario_resume))

        fetched = store.get(record.id)
        assert fetched is record
        assert fetched.file_name == "john.txt"
        assert fetched.original_text == scenario_resume
        assert fetched.uploaded_at == fetched.last_analyzed
        assert len(store) == 1

    def test_missing_record(self, store):
        with pytest.raises(RecordNotFoundError):
            store.get("nope")
        with pytest.raises(RecordNotFoundError):
            store.delete("nope")

    def test_list_newest_first(self, store, scenario_resume):
        outcome = analyze_resume(scenario_resume)
        first = store.add("a.txt", scenario_resume, outcome)
        second = store.add("b.txt", scenario_resume, outcome)

        assert [record.id for record in store.list()] == [second.id, first.id]

    def test_delete(self, store, scenario_resume):
        record = store.add("a.txt", scenario_resume, analyze_resume(scenario_resume))
        store.delete(record.id)

        assert len(store) == 0

    def test_replace_analysis(self, store, scenario_resume, rich_resume):
        record = store.add("a.txt", scenario_resume, analyze_resume(scenario_resume))
        uploaded_at = record.uploaded_at

        updated = store.replace_analysis(record.id, analyze_resume(rich_resume))

        assert updated.parsed_data.name == "Jane Doe"
        assert updated.uploaded_at == uploaded_at
        assert updated.last_analyzed >= uploaded_at

    def test_to_dict(self, store, scenario_resume):
        record = store.add("a.txt", scenario_resume, analyze_resume(scenario_resume))
        payload = record.to_dict()

        assert payload["id"] == record.id
        assert payload["analysis"]["skills_match"] == 6
        assert payload["parsed_data"]["education"][0]["institution"] == "MIT"
        assert isinstance(payload["uploaded_at"], str)

    def test_concurrent_adds(self, store, scenario_resume):
        outcome = analyze_resume(scenario_resume)
        threads = [
            threading.Thread(target=store.add, args=(f"{i}.txt", scenario_resume, outcome))
            for i in range(20)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(store) == 20
