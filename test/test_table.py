import pyarrow as pa
import pyarrow.compute as pc
import pytest

from tablesubset import (
    LengthMismatchError,
    ParseError,
    RangeError,
    ShapeError,
    Table,
    UnknownNameError,
)
from tablesubset.compute import (
    ExcludeSelector,
    FunctionCallExpression,
    NameSelector,
    PyArrowTableDataSource,
    abs_exceeds,
    col,
    grep,
    is_in,
    order,
    row_any,
)


@pytest.fixture
def creatures():
    return Table.from_pydict({
        "name": ["K", "B", "Q", "Z", "A"],
        "legs": [2, 8, 100, 6, 8],
        "type": ["bird", "spider", "centipede", "bug", "spider"],
        "X1": [0.5, -1.2, 1.8, 0.1, -0.4],
        "X2": [-0.3, 0.7, -1.1, 1.6, 0.2],
    })


def test_init_from_node():
    table = Table(PyArrowTableDataSource(pa.table({"a": [1, 2]})))
    assert table.shape == (2, 1)


def test_init_from_record_batch():
    table = Table(pa.record_batch({"a": [1, 2]}))
    assert table.column_names == ["a"]


def test_init_invalid():
    with pytest.raises(ValueError):
        Table({"a": [1, 2]})


def test_init_duplicate_column_names():
    data = pa.table([pa.array([1]), pa.array([2])], names=["a", "a"])
    with pytest.raises(ValueError):
        Table(data)


def test_row_labels_must_match_rows():
    with pytest.raises(LengthMismatchError):
        Table.from_pydict({"a": [1, 2]}, row_labels=["x"])


def test_row_labels_must_be_unique():
    with pytest.raises(ValueError):
        Table.from_pydict({"a": [1, 2]}, row_labels=["x", "x"])


def test_properties(creatures):
    assert creatures.num_rows == 5
    assert len(creatures) == 5
    assert creatures.num_columns == 5
    assert creatures.column_names == ["name", "legs", "type", "X1", "X2"]
    assert creatures.row_labels is None


def test_one_element(creatures):
    assert creatures[1, 2].to_pydict() == {"type": ["spider"]}


def test_one_row_all_columns(creatures):
    assert creatures[1, :].to_pydict()["name"] == ["B"]
    assert creatures[1].num_columns == 5


def test_one_column_all_rows(creatures):
    assert creatures[:, 2].column_names == ["type"]
    assert creatures[:, 2].num_rows == 5


def test_column(creatures):
    assert creatures.column("legs").to_pylist() == [2, 8, 100, 6, 8]
    assert creatures.column(0).to_pylist() == ["K", "B", "Q", "Z", "A"]
    assert creatures["type"].to_pylist() == creatures.column(2).to_pylist()


def test_column_unknown(creatures):
    with pytest.raises(UnknownNameError, match="eyes"):
        creatures.column("eyes")
    with pytest.raises(RangeError):
        creatures.column(5)


@pytest.mark.parametrize(
    "rows, expected",
    [
        ([1, 2], ["B", "Q"]),
        (slice(0, 4), ["K", "B", "Q", "Z"]),
        (slice(3, None, -1), ["Z", "Q", "B", "K"]),
        (slice(1, None, 2), ["B", "Z"]),
        ([0, 0, 0, 1, 1, 2], ["K", "K", "K", "B", "B", "Q"]),
        (ExcludeSelector([0]), ["B", "Q", "Z", "A"]),
        (ExcludeSelector([4]), ["K", "B", "Q", "Z"]),
        (ExcludeSelector([0, 1, 2]), ["Z", "A"]),
        ([True, False, True, False, False], ["K", "Q"]),
    ],
)
def test_select_rows(creatures, rows, expected):
    result = creatures[rows, 0:3]
    assert result["name"].to_pylist() == expected
    assert result.column_names == ["name", "legs", "type"]


def test_select_row_count_matches_indices(creatures):
    indices = [4, 4, 0, 3]
    result = creatures.select(indices)
    assert result.num_rows == len(indices)
    assert result["name"].to_pylist() == ["A", "A", "K", "Z"]


def test_select_does_not_modify_source(creatures):
    before = creatures.to_pydict()
    creatures.select([0], ["name"])
    creatures.exclude_rows([0])
    creatures.filter([True] * 5)
    assert creatures.to_pydict() == before


def test_select_out_of_range(creatures):
    with pytest.raises(RangeError):
        creatures[[0, 5], :]
    with pytest.raises(RangeError):
        creatures[:, [7]]


def test_select_mask_length_mismatch(creatures):
    with pytest.raises(LengthMismatchError):
        creatures[[True, False], :]
    with pytest.raises(LengthMismatchError):
        creatures[:, [True, False, True]]


def test_select_columns_by_name(creatures):
    assert creatures[0:2, "name"].to_pydict() == {"name": ["K", "B"]}
    assert creatures[0:2, ["legs", "name"]].column_names == ["legs", "name"]


def test_select_columns_unknown_name(creatures):
    with pytest.raises(UnknownNameError, match="eyes"):
        creatures[0:2, "eyes"]


def test_select_columns_by_pattern(creatures):
    result = creatures[0:3, grep("^X", creatures.column_names)]
    assert result.column_names == ["X1", "X2"]


def test_select_by_name_is_idempotent(creatures):
    once = creatures.select(columns=["legs"])
    twice = once.select(columns=["legs"])
    assert once.equals(twice)


def test_select_of_selection(creatures):
    reversed_first = creatures[4::-1, 0:2]
    assert reversed_first.exclude_rows([2])["name"].to_pylist() == ["A", "Z", "B", "K"]


def test_select_repeated_columns(creatures):
    result = creatures[0:1, ["name", "name"]]
    assert result.column_names == ["name", "name.1"]


def test_exclude_rows(creatures):
    result = creatures.exclude_rows([2])
    assert result.num_rows == creatures.num_rows - 1
    assert result["name"].to_pylist() == ["K", "B", "Z", "A"]


def test_head_and_tail(creatures):
    assert creatures.head(2)["name"].to_pylist() == ["K", "B"]
    assert creatures.tail(2)["name"].to_pylist() == ["Z", "A"]
    assert creatures.tail(10).num_rows == 5
    assert creatures.head().num_rows == 5


def test_sort_by_permutation(creatures):
    result = creatures[order(creatures["legs"]), 0:3]
    assert result["legs"].to_pylist() == [2, 6, 8, 8, 100]
    assert result["name"].to_pylist() == ["K", "Z", "B", "A", "Q"]


def test_sort_by_name_permutation(creatures):
    result = creatures[order(creatures["name"]), 0:1]
    assert result["name"].to_pylist() == ["A", "B", "K", "Q", "Z"]


def test_sort_by(creatures):
    result = creatures.sort_by("legs")
    assert result["name"].to_pylist() == ["K", "Z", "B", "A", "Q"]
    result = creatures.sort_by(["legs", "name"], [True, False])
    assert result["name"].to_pylist() == ["Q", "A", "B", "Z", "K"]


def test_sort_by_unknown_column(creatures):
    with pytest.raises(UnknownNameError):
        creatures.sort_by("eyes")


def test_sort_by_carries_row_labels(creatures):
    labelled = creatures.with_row_labels(["r1", "r2", "r3", "r4", "r5"])
    result = labelled.sort_by("legs")
    assert result.row_labels == ["r1", "r4", "r2", "r5", "r3"]
    assert result.column_names == creatures.column_names


def test_filter_expression(creatures):
    result = creatures.filter(FunctionCallExpression(pc.greater, col("legs"), 4))
    assert result["name"].to_pylist() == ["B", "Q", "Z", "A"]


def test_filter_combined_expression(creatures):
    predicate = FunctionCallExpression(
        pc.and_,
        FunctionCallExpression(pc.greater, col("X1"), 0),
        FunctionCallExpression(pc.less, col("X2"), 0),
    )
    assert creatures.filter(predicate)["name"].to_pylist() == ["K", "Q"]


def test_filter_rowwise(creatures):
    result = creatures.filter(row_any(lambda x: x > 1.5, ["X1", "X2"]))
    assert result["name"].to_pylist() == ["Q", "Z"]


def test_filter_membership(creatures):
    result = creatures.filter(is_in(col("type"), ["spider", "centipede"]))
    assert result["name"].to_pylist() == ["B", "Q", "A"]


def test_filter_mask_length_mismatch(creatures):
    with pytest.raises(LengthMismatchError):
        creatures.filter([True, False])


def test_filter_with_row_labels(creatures):
    labelled = creatures.with_row_labels(range(1, 6))
    result = labelled.filter(pa.array([False, True, False, True, False]))
    assert result.row_labels == ["2", "4"]


def test_evaluate(creatures):
    mask = creatures.evaluate(FunctionCallExpression(pc.greater, col("legs"), 4))
    assert isinstance(mask, pa.Array)
    assert mask.to_pylist() == [False, True, True, True, True]


def test_select_rows_by_label(creatures):
    labelled = creatures.with_row_labels(["k", "b", "q", "z", "a"])
    result = labelled[["q", "k"], "name"]
    assert result["name"].to_pylist() == ["Q", "K"]
    assert result.row_labels == ["q", "k"]


def test_select_rows_by_unknown_label(creatures):
    labelled = creatures.with_row_labels(["k", "b", "q", "z", "a"])
    with pytest.raises(UnknownNameError):
        labelled[["x"], :]


def test_select_rows_by_label_without_labels(creatures):
    with pytest.raises(UnknownNameError):
        creatures[NameSelector(["1"]), :]


def test_row_labels_follow_selection(creatures):
    labelled = creatures.with_row_labels(range(1, 6))
    assert labelled[[1, 1, 0], :].row_labels == ["2", "2.1", "1"]
    assert labelled.exclude_rows([0]).row_labels == ["2", "3", "4", "5"]
    assert labelled.with_row_labels(None).row_labels is None


def test_rename(creatures):
    renamed = creatures.rename({"X1": "first", "X2": "second"})
    assert renamed.column_names == ["name", "legs", "type", "first", "second"]
    renamed = creatures[:, 0:2].rename(["a", "b"])
    assert renamed.column_names == ["a", "b"]


def test_rename_invalid(creatures):
    with pytest.raises(LengthMismatchError):
        creatures.rename(["a"])
    with pytest.raises(UnknownNameError):
        creatures.rename({"eyes": "ears"})


def test_with_columns(creatures):
    result = creatures.with_columns({
        "diff": FunctionCallExpression(pc.subtract, col("X1"), col("X2")),
        "legs": FunctionCallExpression(pc.multiply, col("legs"), 2),
    })
    assert result.column_names == ["name", "legs", "type", "X1", "X2", "diff"]
    assert result["legs"].to_pylist() == [4, 16, 200, 12, 16]
    assert result["diff"].to_pylist() == pytest.approx([0.8, -1.9, 2.9, -1.5, -0.6])


def test_parse_numeric():
    table = Table.from_pydict({"genes": ["Il1b", "Tnf"], "B.ctrl": ["1.5", "2"]})
    parsed = table.parse_numeric(["B.ctrl"])
    assert parsed["B.ctrl"].to_pylist() == [1.5, 2.0]
    assert parsed["genes"].to_pylist() == ["Il1b", "Tnf"]
    assert pa.types.is_string(table["B.ctrl"].type)


def test_parse_numeric_failure():
    table = Table.from_pydict({"genes": ["Il1b", "Tnf"]})
    with pytest.raises(ParseError, match="genes"):
        table.parse_numeric("genes")


def test_parse_numeric_allow_missing():
    table = Table.from_pydict({"v": ["1", ""]})
    with pytest.raises(ParseError):
        table.parse_numeric("v")
    assert table.parse_numeric("v", allow_missing=True)["v"].to_pylist() == [1.0, None]


def test_difference_matrix():
    table = Table.from_pydict({"G.ctrl": [1, 2, 5, 0], "G.LPS": [3, 2, 1, 0]})
    diff = table.difference_matrix(["G"])
    assert diff["G"].to_pylist() == [2, 0, -4, 0]
    assert diff.filter(abs_exceeds(2)).num_rows == 1
    assert diff.filter(abs_exceeds(2, inclusive=True)).num_rows == 2
    assert table.filter(diff.evaluate(abs_exceeds(2, inclusive=True)))["G.ctrl"].to_pylist() == [1, 5]


def test_difference_matrix_column_subset(creatures):
    diff = creatures.difference_matrix(["X"], columns=["X1", "X2"], layout="treatment_first")
    assert diff.column_names == ["X"]
    assert diff["X"].to_pylist() == pytest.approx([0.8, -1.9, 2.9, -1.5, -0.6])


def test_difference_matrix_shape_error(creatures):
    with pytest.raises(ShapeError):
        creatures.difference_matrix(["X"], columns=["X1"])
    with pytest.raises(ShapeError):
        creatures.difference_matrix(["A"], columns=["name", "type"])


def test_difference_matrix_keeps_row_labels():
    table = Table.from_pydict({"c": [1.0, 2.0], "t": [2.0, 2.0]}, row_labels=["g1", "g2"])
    assert table.difference_matrix(["G"]).row_labels == ["g1", "g2"]


def test_str(creatures):
    text = str(creatures[0:2, 0:2])
    assert text.splitlines() == [
        "name | legs",
        "---- | ----",
        "K    | 2",
        "B    | 8",
    ]


def test_repr(creatures):
    assert repr(creatures[:, 0:2]) == "<Table rows=5 columns=['name', 'legs']>"


def test_getitem_invalid(creatures):
    with pytest.raises(TypeError):
        creatures[0, 0, 0]
