"""Tests for database.ScheduleStore — the exact MongoDB calls it issues."""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from database import PING_TIMEOUT, ScheduleStore, day_key
from schemas import UserSchedule


@pytest.fixture
def mock_collection():
    return MagicMock()


class TestQueries:
    def test_list_schedules(self, mock_collection):
        mock_collection.find.return_value = iter([
            {"name": "Ann", "tasks": {"1": ["a"]}},
            {"name": "Bob"},
        ])
        result = ScheduleStore(mock_collection).list_schedules()
        mock_collection.find.assert_called_once_with({}, {"_id": 0})
        assert result == [
            UserSchedule(name="Ann", tasks={"1": ["a"]}),
            UserSchedule(name="Bob", tasks={}),
        ]

    def test_get_schedule_missing(self, mock_collection):
        mock_collection.find_one.return_value = None
        assert ScheduleStore(mock_collection).get_schedule("Ghost") is None
        mock_collection.find_one.assert_called_once_with({"name": "Ghost"}, {"_id": 0})

    def test_null_tasks_read_as_empty(self, mock_collection):
        mock_collection.find_one.return_value = {"name": "Ann", "tasks": None}
        schedule = ScheduleStore(mock_collection).get_schedule("Ann")
        assert schedule.tasks == {}
        assert schedule.day_tasks(5) == []

    def test_errors_propagate(self, mock_collection):
        mock_collection.find_one.side_effect = PyMongoError("down")
        with pytest.raises(PyMongoError):
            ScheduleStore(mock_collection).get_schedule("Ann")


class TestUpdates:
    def test_replace_schedule_sets_whole_mapping(self, mock_collection):
        mock_collection.find_one_and_update.return_value = {"name": "Ann", "tasks": {"2": ["x"]}}
        result = ScheduleStore(mock_collection).replace_schedule("Ann", {"2": ["x"]})
        mock_collection.find_one_and_update.assert_called_once_with(
            {"name": "Ann"},
            {"$set": {"tasks": {"2": ["x"]}}},
            projection={"_id": 0},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        assert result.tasks == {"2": ["x"]}

    def test_replace_schedule_without_tasks_only_sets_on_insert(self, mock_collection):
        mock_collection.find_one_and_update.return_value = {"name": "Ann", "tasks": {}}
        ScheduleStore(mock_collection).replace_schedule("Ann")
        args, kwargs = mock_collection.find_one_and_update.call_args
        assert args[1] == {"$setOnInsert": {"tasks": {}}}
        assert kwargs["upsert"] is True

    def test_replace_day_sets_single_key(self, mock_collection):
        mock_collection.find_one_and_update.return_value = {
            "name": "Ann",
            "tasks": {"1": ["keep"], "4": ["new"]},
        }
        result = ScheduleStore(mock_collection).replace_day("Ann", 4, ["new"])
        mock_collection.find_one_and_update.assert_called_once_with(
            {"name": "Ann"},
            {"$set": {"tasks.4": ["new"]}},
            projection={"_id": 0},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        assert result == ["new"]


class TestLifecycle:
    def test_connect_pings_and_binds_collection(self):
        with patch("database.MongoClient") as client_cls:
            client = client_cls.return_value
            store = ScheduleStore.connect("mongodb://db:27017", "scheduler", "users")
        client_cls.assert_called_once_with("mongodb://db:27017")
        client.admin.command.assert_called_once_with("ping")
        assert store.client is client
        assert store.collection is client["scheduler"]["users"]

    def test_ping_failure_reports_false(self):
        client = MagicMock()
        client.admin.command.side_effect = PyMongoError("unreachable")
        assert ScheduleStore(MagicMock(), client=client).ping() is False

    def test_close(self):
        client = MagicMock()
        ScheduleStore(MagicMock(), client=client).close()
        client.close.assert_called_once_with()


def test_day_key():
    assert [day_key(d) for d in range(1, 8)] == ["1", "2", "3", "4", "5", "6", "7"]


class TestStoredShapes:
    def test_null_day_list_reads_as_empty(self, mock_collection):
        mock_collection.find_one.return_value = {"name": "Ann", "tasks": {"3": None, "1": ["a"]}}
        schedule = ScheduleStore(mock_collection).get_schedule("Ann")
        assert schedule.tasks == {"3": [], "1": ["a"]}
        assert schedule.day_tasks(3) == []

    def test_missing_name_fails_validation(self, mock_collection):
        mock_collection.find.return_value = iter([{"tasks": {}}])
        with pytest.raises(ValidationError):
            ScheduleStore(mock_collection).list_schedules()


def test_ping_is_time_bounded():
    client = MagicMock()
    with patch("database.pymongo.timeout") as timeout:
        assert ScheduleStore(MagicMock(), client=client).ping() is True
    timeout.assert_called_once_with(PING_TIMEOUT)
    timeout.return_value.__enter__.assert_called_once_with()
    client.admin.command.assert_called_once_with("ping")
