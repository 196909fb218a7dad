import dataclasses
import pytest
from creature_feed.errors import MappingError
from creature_feed.models import CreatureRecord, FetchResult, FetchStatus

BULBASAUR = {
    "name": "bulbasaur",
    "stats": [
        {"stat": {"name": "hp"}, "base_stat": 45},
        {"stat": {"name": "attack"}, "base_stat": 49},
        {"stat": {"name": "defense"}, "base_stat": 49},
    ],
    "types": [{"type": {"name": "grass"}}],
    "sprites": {"front_default": "x.png"},
}

def test_bulbasaur_scenario():
    rec = CreatureRecord.from_api(BULBASAUR, 1)
    assert rec == CreatureRecord(id=1, name="Bulbasaur", image_url="x.png", attack=49, defense=49, hp=45, type="Grass")

def test_record_is_immutable():
    rec = CreatureRecord.from_api(BULBASAUR, 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        rec.name = "Ivysaur"

def test_sparse_record_defaults():
    rec = CreatureRecord.from_api({"name": "missingno"}, 0)
    assert (rec.name, rec.image_url, rec.attack, rec.defense, rec.hp, rec.type) == ("Missingno", "", 0, 0, 0, "")

def test_uses_requested_id():
    rec = CreatureRecord.from_api({**BULBASAUR, "id": 999}, 1)
    assert rec.id == 1

@pytest.mark.parametrize("raw", [[], "bulbasaur", None, {"name": 7}, {"name": "x", "types": "grass"}])
def test_unreadable_shapes_raise(raw):
    with pytest.raises(MappingError):
        CreatureRecord.from_api(raw, 1)

def test_fetch_result_helpers():
    rec = CreatureRecord.from_api(BULBASAUR, 1)
    ok = FetchResult.success(rec)
    assert ok.ok and ok.creature_id == 1 and ok.record is rec
    gone = FetchResult.absent(9999, "HTTP 404")
    assert gone.status is FetchStatus.ABSENT and gone.record is None and not gone.ok
    err = FetchResult.failed(3, "ConnectError")
    assert err.status is FetchStatus.ERROR and err.error == "ConnectError"
