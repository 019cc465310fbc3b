"""Tests for Decomposer, decompose() and decompose_with_ids().

Covers the data/relationship split, id assignment order, relation order,
empty nodes and containers, duplicate ids, mixed arrays, and error
propagation.
"""

from __future__ import annotations

import pytest

from tree_surgeon.config import DecomposeConfig, MixedArrayMode
from tree_surgeon.decomposer import (
    Decomposer,
    MixedArrayError,
    decompose,
    decompose_with_ids,
)
from tree_surgeon.identity import SequentialIdResolver
from tree_surgeon.model import Relation

# ---------------------------------------------------------------------------
# Data / relationship split
# ---------------------------------------------------------------------------


class TestSplit:
    def test_scalars_stay_in_node_data(self) -> None:
        model = decompose({"s": "x", "i": 1, "f": 1.5, "b": True, "n": None})
        assert model.root == "id_0"
        assert model.nodes == {
            "id_0": {"s": "x", "i": 1, "f": 1.5, "b": True, "n": None}
        }
        assert model.relations == ()

    def test_nested_object_becomes_child(self) -> None:
        model = decompose({"keep": {"match": "no"}, "size": 3})
        assert model.nodes == {"id_0": {"size": 3}, "id_1": {"match": "no"}}
        assert model.relations == (Relation("id_0", "id_1", "keep"),)

    def test_list_of_objects_becomes_one_relation_per_element(self) -> None:
        model = decompose({"kids": [{"n": 1}, {"n": 2}, {"n": 3}]})
        assert model.relations == (
            Relation("id_0", "id_1", "kids"),
            Relation("id_0", "id_2", "kids"),
            Relation("id_0", "id_3", "kids"),
        )
        assert [model.nodes[r.child]["n"] for r in model.relations] == [1, 2, 3]

    def test_list_of_scalars_stays_in_node_data(self) -> None:
        model = decompose({"d": [1, 2, 3]})
        assert model.nodes == {"id_0": {"d": [1, 2, 3]}}
        assert model.relations == ()

    def test_nested_lists_stay_in_node_data(self) -> None:
        model = decompose({"grid": [[1, 2], [3, 4]]})
        assert model.nodes == {"id_0": {"grid": [[1, 2], [3, 4]]}}

    def test_empty_list_stays_in_node_data(self) -> None:
        model = decompose({"tags": []})
        assert model.nodes == {"id_0": {"tags": []}}
        assert model.relations == ()

    def test_empty_object_becomes_empty_node(self) -> None:
        model = decompose({"meta": {}})
        assert model.nodes == {"id_0": {}, "id_1": {}}
        assert model.relations == (Relation("id_0", "id_1", "meta"),)

    def test_empty_root(self) -> None:
        model = decompose({})
        assert model.root == "id_0"
        assert model.nodes == {"id_0": {}}
        assert model.relations == ()

    def test_data_key_order_preserved(self) -> None:
        model = decompose({"z": 1, "child": {}, "a": 2, "m": 3})
        assert list(model.nodes["id_0"]) == ["z", "a", "m"]

    def test_data_values_kept_verbatim(self) -> None:
        values = [1, 2, 3]
        model = decompose({"d": values})
        assert model.nodes["id_0"]["d"] is values

    def test_non_dict_root_raises(self) -> None:
        with pytest.raises(TypeError, match="dict"):
            decompose([{"a": 1}])  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Traversal order
# ---------------------------------------------------------------------------


class TestTraversalOrder:
    def test_ids_assigned_depth_first_preorder(self) -> None:
        model = decompose({"a": {"x": {}}, "b": {}})
        assert list(model.nodes) == ["id_0", "id_1", "id_2", "id_3"]
        assert model.relations == (
            Relation("id_0", "id_1", "a"),
            Relation("id_1", "id_2", "x"),
            Relation("id_0", "id_3", "b"),
        )

    def test_array_elements_visited_in_index_order(self) -> None:
        model = decompose({"arr": [{"i": 0, "sub": {"s": 0}}, {"i": 1}]})
        assert model.nodes["id_1"] == {"i": 0}
        assert model.nodes["id_2"] == {"s": 0}
        assert model.nodes["id_3"] == {"i": 1}

    def test_each_call_restarts_counter(self) -> None:
        first = decompose({"a": {}})
        second = decompose({"a": {}})
        assert first == second

    def test_custom_prefix(self) -> None:
        model = decompose({"a": {}}, config=DecomposeConfig(id_prefix="n"))
        assert model.root == "n0"
        assert model.relations == (Relation("n0", "n1", "a"),)


# ---------------------------------------------------------------------------
# Caller-supplied ids
# ---------------------------------------------------------------------------


class TestDecomposeWithIds:
    def test_ids_read_from_data(self) -> None:
        tree = {"id": "r", "kid": {"id": "k", "v": 1}}
        model = decompose_with_ids(tree, lambda n: n["id"])
        assert model.root == "r"
        assert model.nodes == {"r": {"id": "r"}, "k": {"id": "k", "v": 1}}
        assert model.relations == (Relation("r", "k", "kid"),)

    def test_id_of_sees_only_data_attributes(self) -> None:
        seen: list[dict] = []

        def id_of(data: dict) -> str:
            seen.append(dict(data))
            return data["id"]

        decompose_with_ids({"id": "r", "kid": {"id": "k"}, "x": 1}, id_of)
        assert seen == [{"id": "r", "x": 1}, {"id": "k"}]

    def test_duplicate_ids_later_node_overwrites(self) -> None:
        tree = {"kids": [{"id": "a", "v": 1}, {"id": "a", "v": 2}]}
        model = decompose_with_ids(tree, lambda n: n.get("id", "root"))
        assert model.nodes == {"root": {}, "a": {"id": "a", "v": 2}}
        assert model.relations == (
            Relation("root", "a", "kids"),
            Relation("root", "a", "kids"),
        )

    def test_id_of_exception_propagates(self) -> None:
        with pytest.raises(KeyError):
            decompose_with_ids({"kid": {}}, lambda n: n["id"])


# ---------------------------------------------------------------------------
# Mixed arrays
# ---------------------------------------------------------------------------


class TestMixedArrays:
    def test_rejected_by_default(self) -> None:
        with pytest.raises(MixedArrayError, match="'items'"):
            decompose({"items": [{"a": 1}, 2]})

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            decompose({"items": [None, {"a": 1}]})

    def test_keep_as_data(self) -> None:
        config = DecomposeConfig(mixed_arrays=MixedArrayMode.KEEP_AS_DATA)
        model = decompose({"items": [{"a": 1}, 2]}, config=config)
        assert model.nodes == {"id_0": {"items": [{"a": 1}, 2]}}
        assert model.relations == ()

    def test_nested_mixed_array_rejected(self) -> None:
        with pytest.raises(MixedArrayError, match="'deep'"):
            decompose({"outer": {"deep": ["x", {"y": 1}]}})


# ---------------------------------------------------------------------------
# Decomposer class
# ---------------------------------------------------------------------------


class TestDecomposer:
    def test_default_config(self) -> None:
        decomposer = Decomposer(SequentialIdResolver())
        assert decomposer.config == DecomposeConfig()

    def test_does_not_mutate_input(self) -> None:
        tree = {"a": {"b": [{"c": 1}, {"c": 2}]}, "d": [1]}
        snapshot = {"a": {"b": [{"c": 1}, {"c": 2}]}, "d": [1]}
        decompose(tree)
        assert tree == snapshot

    def test_second_call_rejected(self) -> None:
        decomposer = Decomposer(SequentialIdResolver())
        first = decomposer.decompose({"a": {}})
        assert first.root == "id_0"
        with pytest.raises(RuntimeError, match="single-use"):
            decomposer.decompose({"a": {}})

    def test_rejected_call_leaves_first_model_intact(self) -> None:
        decomposer = Decomposer(SequentialIdResolver())
        first = decomposer.decompose({"a": {}})
        with pytest.raises(RuntimeError):
            decomposer.decompose({"b": {"c": {}}})
        assert dict(first.nodes) == {"id_0": {}, "id_1": {}}

    def test_custom_resolver(self) -> None:
        class Upper:
            def __init__(self) -> None:
                self.n = 0

            def resolve(self, data: dict) -> str:
                self.n += 1
                return f"N{self.n}"

        model = Decomposer(Upper()).decompose({"k": {}})
        assert model.root == "N1"
        assert model.relations == (Relation("N1", "N2", "k"),)
