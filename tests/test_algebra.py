"""Tests for the reshaping algebra: operation nodes, logical plans and eager execution."""

from __future__ import annotations

import pandas as pd
import pytest

from tidyshape import ColumnTypeError, ReshapeConfig, Table
from tidyshape.algebra import (
    Gather,
    LogicalPlan,
    Operation,
    Source,
    Spread,
    execute,
)
from tidyshape.core.reshape import gather
from tidyshape.selectors import ColumnRange, Everything, ExplicitExclude, ExplicitInclude


# ======================================================================
# Helpers
# ======================================================================


def _src(table: Table, name: str = "test") -> Source:
    return Source(data=table, name=name)


# ======================================================================
# 1. Operation nodes
# ======================================================================


class TestSource:
    def test_name_alias(self):
        source = Source(name="mpg")
        assert source.source_id == "mpg"

    def test_schema_from_data(self, cars: Table):
        assert _src(cars).schema == ["id", "city", "hwy"]

    def test_dataframe_data_converted(self, cars_df: pd.DataFrame, cars: Table):
        assert Source(data=cars_df).data == cars

    def test_mapping_data_converted(self, cars: Table):
        assert Source(data=cars.to_dict()).data == cars

    def test_rejects_inputs(self):
        with pytest.raises(ValueError, match="cannot have inputs"):
            Source(source_id="a", inputs=[Source(source_id="b")])

    def test_rejects_other_data(self):
        with pytest.raises(TypeError):
            Source(data=[1, 2, 3])

    def test_to_dict_omits_data(self, cars: Table):
        data = _src(cars, "mpg").to_dict()
        assert data == {
            "type": "source",
            "source_id": "mpg",
            "schema": ["id", "city", "hwy"],
            "inputs": [],
        }


class TestGather:
    def test_construction_succeeds(self):
        source = Source(source_id="mpg")
        op = Gather(key="roadtype", value="mpg", exclude=["id"], inputs=[source])
        assert op.selector == ExplicitExclude(("id",))
        assert op.inputs == [source]

    def test_columns_alias(self):
        op = Gather(columns=["city", "hwy"], input=Source(source_id="mpg"))
        assert op.selector == ExplicitInclude(("city", "hwy"))

    def test_default_selector_is_everything(self):
        op = Gather(input=Source(source_id="mpg"))
        assert op.selector == Everything()

    def test_selector_coerced_from_list(self):
        op = Gather(selector=["city"], input=Source(source_id="mpg"))
        assert op.selector == ExplicitInclude(("city",))

    def test_columns_and_exclude_conflict(self):
        with pytest.raises(ValueError, match="not both"):
            Gather(columns=["a"], exclude=["b"], input=Source(source_id="x"))

    def test_construction_without_input_fails(self):
        with pytest.raises(ValueError, match="must have exactly one input"):
            Gather(key="k", value="v")

    def test_empty_name_fails(self):
        with pytest.raises(ValueError, match="non-empty"):
            Gather(key="", value="v", input=Source(source_id="x"))

    def test_same_key_and_value_fails(self):
        with pytest.raises(ValueError, match="must differ"):
            Gather(key="k", value="k", input=Source(source_id="x"))

    def test_to_dict(self):
        op = Gather(
            key="roadtype", value="mpg", selector=ColumnRange("city", "hwy"),
            na_rm=True, input=Source(source_id="mpg"),
        )
        data = op.to_dict()
        assert data["type"] == "gather"
        assert data["key"] == "roadtype"
        assert data["value"] == "mpg"
        assert data["selector"] == {"kind": "range", "start": "city", "stop": "hwy"}
        assert data["na_rm"] is True
        assert data["convert"] is None
        assert data["strict_types"] is None
        assert data["input"]["type"] == "source"

    def test_round_trip(self):
        op = Gather(key="roadtype", value="mpg", exclude=["id"], input=Source(source_id="mpg"))
        restored = Operation.from_dict(op.to_dict())
        assert isinstance(restored, Gather)
        assert restored.key == op.key
        assert restored.value == op.value
        assert restored.selector == op.selector
        assert isinstance(restored.inputs[0], Source)


class TestSpread:
    def test_construction_succeeds(self):
        op = Spread(key="metric", value="value", input=Source(source_id="long"))
        assert op.fill is None

    def test_construction_without_key_fails(self):
        with pytest.raises(ValueError, match="key"):
            Spread(value="value", input=Source(source_id="long"))

    def test_construction_without_value_fails(self):
        with pytest.raises(ValueError, match="value"):
            Spread(key="metric", input=Source(source_id="long"))

    def test_round_trip(self):
        op = Spread(key="metric", value="value", fill=0, input=Source(source_id="long"))
        restored = Operation.from_dict(op.to_dict())
        assert isinstance(restored, Spread)
        assert (restored.key, restored.value, restored.fill) == ("metric", "value", 0)


class TestFromDict:
    def test_missing_type(self):
        with pytest.raises(ValueError, match="'type' field"):
            Operation.from_dict({"key": "k"})

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown operation type"):
            Operation.from_dict({"type": "melt", "inputs": []})


# ======================================================================
# 2. Eager execution
# ======================================================================


class TestExecute:
    def test_source_returns_data(self, cars: Table):
        assert execute(_src(cars)) is cars

    def test_source_without_data(self):
        with pytest.raises(ValueError, match="no data"):
            execute(Source(source_id="mpg"))

    def test_gather(self, cars: Table):
        op = Gather(key="roadtype", value="mpg", exclude=["id"], input=_src(cars))
        assert execute(op) == gather(cars, "roadtype", "mpg", ExplicitExclude(("id",)))

    def test_gather_then_spread(self, wide_format: Table):
        gathered = Gather(key="quarter", value="sales", exclude=["name", "dept"], input=_src(wide_format))
        spread = Spread(key="quarter", value="sales", input=gathered)
        assert execute(spread) == wide_format

    def test_config_fills_unset_options(self, cars: Table):
        op = Gather(exclude=["id"], input=_src(cars))
        config = ReshapeConfig(key_name="roadtype", value_name="mpg")
        assert execute(op, config).column_names == ("id", "roadtype", "mpg")
        assert execute(op).column_names == ("id", "key", "value")

    def test_gather_strict_types(self, cars: Table):
        op = Gather(key="roadtype", value="mpg", strict_types=True, input=_src(cars))
        with pytest.raises(ColumnTypeError):
            execute(op)

        restored = Operation.from_dict(op.to_dict())
        assert restored.strict_types is True

    def test_unknown_operation(self):
        with pytest.raises(TypeError, match="Unknown operation type"):
            execute(Operation())


# ======================================================================
# 3. LogicalPlan
# ======================================================================


class TestLogicalPlan:
    def test_root(self):
        source = Source(source_id="mpg")
        assert LogicalPlan(source).root is source

    def test_rejects_non_operation(self):
        with pytest.raises(TypeError):
            LogicalPlan("gather")

    def test_explain_lists_leaves_first(self):
        source = Source(source_id="mpg", schema=["id", "city", "hwy"])
        plan = LogicalPlan(Gather(key="roadtype", value="mpg", exclude=["id"], input=source))
        text = plan.explain()
        assert text.startswith("Logical Plan:")
        assert text.index("Source(source_id='mpg'") < text.index("Gather(key='roadtype'")
        assert "na_rm" not in text
        assert "na_rm=None" in plan.explain(verbose=True)

    def test_explain_spread_fill(self):
        plan = LogicalPlan(Spread(key="k", value="v", fill=0, input=Source(source_id="s")))
        assert "fill=0" in plan.explain()

    def test_to_dict_from_dict(self):
        plan = LogicalPlan(Gather(key="k", value="v", input=Source(source_id="s")))
        restored = LogicalPlan.from_dict(plan.to_dict())
        assert restored.to_dict() == plan.to_dict()
        assert LogicalPlan.from_dict({"root": plan.to_dict()}).to_dict() == plan.to_dict()

    def test_from_dict_requires_root_or_type(self):
        with pytest.raises(ValueError):
            LogicalPlan.from_dict({})

    def test_execute(self, cars: Table):
        plan = LogicalPlan(Gather(key="roadtype", value="mpg", exclude=["id"], input=_src(cars)))
        assert plan.execute().num_rows == 6

    def test_copy_and_repr(self):
        plan = LogicalPlan(Source(source_id="s"))
        assert plan.copy().root is plan.root
        assert repr(plan) == "LogicalPlan(root=Source)"
