"""Shared pytest configuration and fixtures for tidyshape tests."""

import pandas as pd
import pytest

from tidyshape import Table


@pytest.fixture
def cars() -> Table:
    return Table.from_dict({
        "id": ["car1", "car2", "car3"],
        "city": [19, 20, 29],
        "hwy": [24, 30, 35],
    })


@pytest.fixture
def cars_df() -> pd.DataFrame:
    return pd.DataFrame({
        "id": ["car1", "car2", "car3"],
        "city": [19, 20, 29],
        "hwy": [24, 30, 35],
    })


@pytest.fixture
def wide_format() -> Table:
    return Table.from_dict({
        "name": ["Alice", "Bob"],
        "dept": ["eng", "sales"],
        "q1": [10, 40],
        "q2": [20, 50],
        "q3": [30, 60],
    })


@pytest.fixture
def long_format() -> Table:
    return Table.from_dict({
        "name": ["Alice", "Alice", "Alice", "Bob", "Bob", "Bob"],
        "metric": ["q1", "q2", "q3", "q1", "q2", "q3"],
        "value": [10, 20, 30, 40, 50, 60],
    })


@pytest.fixture
def sparse() -> Table:
    return Table.from_dict({
        "station": ["a", "b", "c"],
        "2019": [1.5, None, 3.0],
        "2020": [None, 2.5, 4.0],
    })
