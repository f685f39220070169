import pytest

from portal.exceptions import DocumentNotFound


class TestDocumentStore:
    def test_add_and_get(self, store):
        doc_id = store.add("dsr", {"employeeId": "e1", "description": "Route planning"}, timestamp_field="date")
        doc = store.get("dsr", doc_id)
        assert doc["id"] == doc_id
        assert doc["description"] == "Route planning"
        assert doc["date"].endswith("Z")

    def test_ids_scoped_to_collection(self, store):
        store.set("employees", "same-id", {"name": "A"})
        store.set("tasks", "same-id", {"title": "B"})
        assert store.get("employees", "same-id")["name"] == "A"
        assert store.get("tasks", "same-id")["title"] == "B"

    def test_query_filters_and_orders_newest_first(self, store):
        for n in range(3):
            store.add("callLogs", {"employeeId": "e1", "n": n}, timestamp_field="date")
        store.add("callLogs", {"employeeId": "e2", "n": 99}, timestamp_field="date")

        docs = store.query("callLogs", {"employeeId": "e1"}, order_by="date")
        assert [d["n"] for d in docs] == [2, 1, 0]

    def test_query_limit(self, store):
        for n in range(5):
            store.add("activityLogs", {"n": n}, timestamp_field="timestamp")
        assert len(store.query("activityLogs", order_by="timestamp", limit=2)) == 2

    def test_count_with_multiple_filters(self, store):
        store.add("tasks", {"employeeId": "e1", "status": "pending"})
        store.add("tasks", {"employeeId": "e1", "status": "done"})
        store.add("tasks", {"employeeId": "e2", "status": "pending"})
        assert store.count("tasks", {"employeeId": "e1", "status": "pending"}) == 1
        assert store.count("tasks") == 3

    def test_count_empty_is_zero(self, store):
        assert store.count("dsr", {"employeeId": "nobody"}) == 0

    def test_update_merges_fields(self, store):
        doc_id = store.add("memberships", {"email": "a@gmail.com", "status": "pending"})
        updated = store.update("memberships", doc_id, {"status": "verified"})
        assert updated["status"] == "verified"
        assert store.get("memberships", doc_id)["email"] == "a@gmail.com"

    def test_update_missing_raises(self, store):
        with pytest.raises(DocumentNotFound):
            store.update("memberships", "missing", {"status": "verified"})

    def test_require_missing_raises(self, store):
        with pytest.raises(DocumentNotFound):
            store.require("employees", "missing")
