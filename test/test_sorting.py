import pyarrow as pa
import pytest

from tablesubset.compute.base import QueryPlanNode
from tablesubset.compute.sorting import SortNode, order, sort


class MockQueryPlanNode(QueryPlanNode):
    def __init__(self, batches):
        self._batches = batches

    def batches(self):
        for batch in self._batches:
            yield batch

    def __str__(self):
        return "MockQueryPlanNode"


def test_order_and_sort():
    values = [100, 2, 8, 2, 0]
    assert order(values).to_pylist() == [4, 1, 3, 2, 0]
    assert sort(values).to_pylist() == [0, 2, 2, 8, 100]


@pytest.mark.parametrize(
    "values",
    [
        [5, 3, 1, 4, 2],
        [1, 1, 1],
        ["K", "B", "Q", "B", "A"],
        [0.5, -1.0, 0.5, 2.0],
    ],
)
def test_order_applied_to_values_is_sort(values):
    array = pa.array(values)
    assert array.take(order(array)).to_pylist() == sort(array).to_pylist()


def test_order_is_stable_on_ties():
    assert order([2, 1, 2, 1]).to_pylist() == [1, 3, 0, 2]


def test_order_descending():
    assert order([2, 1, 3], descending=True).to_pylist() == [2, 0, 1]
    assert sort([2, 1, 3], descending=True).to_pylist() == [3, 2, 1]


def test_order_nulls_at_end():
    assert order(pa.array([3, None, 1])).to_pylist() == [2, 0, 1]
    assert sort(pa.array([3, None, 1])).to_pylist() == [1, 3, None]


def test_order_chunked_array():
    chunked = pa.chunked_array([[3, 1], [2]])
    assert order(chunked).to_pylist() == [1, 2, 0]


def test_sort_node_single_batch():
    data = pa.record_batch({"values": [5, 3, 1, 4, 2]})
    child_node = MockQueryPlanNode([data])
    sort_node = SortNode(["values"], [False], child_node)

    sorted_batch = next(sort_node.batches())
    assert sorted_batch.column(0).to_pylist() == [1, 2, 3, 4, 5]


def test_sort_node_multiple_batches():
    data1 = pa.record_batch({"values": [5, 3]})
    data2 = pa.record_batch({"values": [1, 4, 2]})
    child_node = MockQueryPlanNode([data1, data2])
    sort_node = SortNode(["values"], [False], child_node)

    sorted_batches = list(sort_node.batches())
    sorted_values = [
        val for batch in sorted_batches for val in batch.column(0).to_pylist()
    ]
    assert sorted_values == [1, 2, 3, 4, 5]


def test_sort_node_descending():
    data = pa.record_batch({"values": [1, 2, 3, 4, 5]})
    child_node = MockQueryPlanNode([data])
    sort_node = SortNode(["values"], [True], child_node)

    sorted_batch = next(sort_node.batches())
    assert sorted_batch.column(0).to_pylist() == [5, 4, 3, 2, 1]


def test_sort_node_moves_whole_rows():
    data = pa.record_batch({"legs": [8, 2, 8, 0], "name": ["A", "B", "C", "D"]})
    sort_node = SortNode(["legs"], [False], MockQueryPlanNode([data]))
    sorted_batch = next(sort_node.batches())
    assert sorted_batch.column(1).to_pylist() == ["D", "B", "A", "C"]


def test_sort_node_invalid_keys_and_descending_length():
    data = pa.record_batch({"values": [1, 2, 3, 4, 5]})
    child_node = MockQueryPlanNode([data])
    with pytest.raises(ValueError):
        SortNode(["values"], [True, False], child_node)


def test_sort_node_str():
    sort_node = SortNode(["values"], [True], MockQueryPlanNode([]))
    assert str(sort_node) == "SortNode(sorting=[('values', 'descending')], MockQueryPlanNode)"
