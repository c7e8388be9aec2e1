import json

import pytest

from swarmbot.blocks import (
    Block,
    BlockApprox,
    BlockData,
    BlockKind,
    BlockState,
    Enchantment,
    Material,
    SimpleType,
)


@pytest.fixture
def block_data():
    return BlockData(
        [
            Block(id=1, hardness=1.5, material=Material.ROCK),
            Block(id=7, hardness=None),
            Block(id=49, hardness=1000.0),
        ],
        [260, 297],
    )


def test_from_parts_round_trip():
    state = BlockState.from_parts(35, 14)
    assert state.id() == 35
    assert state.metadata() == 14
    assert state.kind() == BlockKind(35)


def test_stone_constant_matches_stone_kind():
    assert BlockState.STONE.kind() == BlockKind.STONE
    assert BlockState.STONE.simple_type() == SimpleType.SOLID


def test_air_is_walk_through():
    assert BlockState.AIR.simple_type() == SimpleType.WALK_THROUGH


@pytest.mark.parametrize("block_id", [1, 7, 95, 165, 255])
def test_full_blocks_are_solid(block_id):
    state = BlockState.from_parts(block_id, 0)
    assert state.full_block()
    assert state.simple_type() == SimpleType.SOLID


@pytest.mark.parametrize("block_id", [8, 9, 65])
def test_water_like(block_id):
    state = BlockState.from_parts(block_id, 3)
    assert state.is_water()
    assert state.walk_through()
    assert state.simple_type() == SimpleType.WATER


@pytest.mark.parametrize("block_id", [6, 50, 90, 176])
def test_no_motion_effect(block_id):
    state = BlockState.from_parts(block_id, 0)
    assert state.no_motion_effect()
    assert state.simple_type() == SimpleType.WALK_THROUGH


def test_avoid_for_unlisted():
    state = BlockState.from_parts(10, 0)
    assert state.simple_type() == SimpleType.AVOID


def test_repr_shows_id_and_metadata():
    state = BlockState.from_parts(35, 14)
    assert repr(state) == f"{state.id()}:{state.metadata()}"


def test_simple_type_ids_round_trip():
    for simple_type in SimpleType:
        assert SimpleType(int(simple_type)) is simple_type
    assert SimpleType.SOLID < SimpleType.WALK_THROUGH


def test_simple_type_invalid_id():
    with pytest.raises(ValueError):
        SimpleType(7)


def test_slip():
    assert BlockKind(266).slip() == 0.989
    assert BlockKind(79).slip() == 0.98
    assert BlockKind(37).slip() == 0.8
    assert BlockKind.STONE.slip() == BlockKind.DEFAULT_SLIP


def test_throw_away_block():
    assert BlockKind(4).throw_away_block()
    assert not BlockKind.DIRT.throw_away_block()


def test_mineable(block_data):
    assert BlockKind(1).mineable(block_data)
    assert not BlockKind(7).mineable(block_data)
    assert not BlockKind(49).mineable(block_data)
    assert not BlockKind(0).mineable(block_data)


def test_hardness_and_data(block_data):
    assert BlockKind(1).hardness(block_data) == 1.5
    assert BlockKind(1).data(block_data).material == Material.ROCK


def test_missing_block_raises(block_data):
    with pytest.raises(KeyError):
        BlockKind(999).hardness(block_data)


def test_is_food(block_data):
    assert block_data.is_food(260)
    assert not block_data.is_food(1)
    assert block_data.by_id(999) is None


def test_from_raw_filters_tools():
    raw = {"id": 1, "hardness": 1.5, "harvestTools": {"257": True, "270": False}}
    block = Block.from_raw(raw)
    assert block.harvest_tools == (257,)
    assert block.material == Material.GENERIC


def test_load(tmp_path):
    blocks_path = tmp_path / "blocks.json"
    foods_path = tmp_path / "foods.json"
    blocks_path.write_text(
        json.dumps([{"id": 3, "hardness": 0.5, "material": "dirt"}, {"id": 7}])
    )
    foods_path.write_text(json.dumps([{"id": 260}]))
    data = BlockData.load(blocks_path, foods_path)
    assert data.by_id(3).material == Material.DIRT
    assert data.by_id(7).hardness is None
    assert data.is_food(260)


def test_block_approx():
    realized = BlockApprox.realized(BlockState.STONE)
    assert realized.is_solid()
    assert realized.as_real() == BlockState.STONE
    assert BlockApprox.AIR.is_walkable()
    assert BlockApprox.AIR.s_type() == SimpleType.WALK_THROUGH


def test_block_approx_estimate_not_real():
    with pytest.raises(ValueError):
        BlockApprox.estimate(SimpleType.WATER).as_real()


def test_enchantment_efficiency():
    assert Enchantment(lvl=5, id=32).efficiency() == 5
    assert Enchantment(lvl=5, id=16).efficiency() is None