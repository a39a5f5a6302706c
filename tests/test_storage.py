import pytest

from kvdb.configuration import EngineConfig
from kvdb.in_memory import EmptyKeyError, EmptyValueError, KeyNotFoundError
from kvdb.storage import Storage, UnknownEngineError


@pytest.fixture
def storage():
    return Storage(EngineConfig(type="in_memory"))


def test_set_then_get(storage):
    storage.set("alpha", "one")
    assert storage.get("alpha") == "one"


def test_delete_removes(storage):
    storage.set("alpha", "one")
    storage.delete("alpha")
    with pytest.raises(KeyNotFoundError):
        storage.get("alpha")


def test_engine_errors_propagate(storage):
    with pytest.raises(EmptyKeyError):
        storage.set("", "one")
    with pytest.raises(EmptyValueError):
        storage.set("alpha", "")


@pytest.mark.parametrize("engine_type", ["", "invalid_engine", "IN_MEMORY"])
def test_unknown_engine(engine_type):
    with pytest.raises(UnknownEngineError) as info:
        Storage(EngineConfig(type=engine_type))
    assert str(info.value) == "unknown engine type"


def test_separate_storages_do_not_share_data():
    first = Storage(EngineConfig(type="in_memory"))
    second = Storage(EngineConfig(type="in_memory"))
    first.set("alpha", "one")
    with pytest.raises(KeyNotFoundError):
        second.get("alpha")