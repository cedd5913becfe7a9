"""
Demo script walking through gather and spread on a small fuel-economy table.

This script demonstrates:
1. Gathering city/hwy mileage into roadtype/mpg pairs
2. What happens when the identity column is gathered too
3. Spreading the long table back to its wide form
4. Plan tracking with tidyshape.DataFrame
"""

import logging

import tidyshape as ts
from tidyshape import DataFrame
from tidyshape.utils import to_json, visualize

logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

cars = ts.Table.from_dict({
    "id": ["car1", "car2", "car3"],
    "city": [19, 20, 29],
    "hwy": [24, 30, 35],
})

# Example 1: keep id, gather the mileage columns
print("=" * 60)
print("Example 1: gather city and hwy")
print("=" * 60)

long = ts.gather(cars, "roadtype", "mpg", ts.exclude("id"))
print(long.to_pandas())

# Example 2: forgetting to exclude id
print("\n" + "=" * 60)
print("Example 2: gathering every column")
print("=" * 60)

everything = ts.gather(cars, "roadtype", "mpg")
print(everything.to_pandas())
print(f"\nValue column type: {everything.column('mpg').dtype.value}")

# Example 3: back to wide
print("\n" + "=" * 60)
print("Example 3: spread")
print("=" * 60)

wide = ts.spread(long, "roadtype", "mpg")
print(wide.to_pandas())
print(f"\nRound trip reproduces the input: {wide == cars}")

# Example 4: errors
print("\n" + "=" * 60)
print("Example 4: errors")
print("=" * 60)

try:
    ts.gather(cars, "id", "mpg", ts.exclude("id"))
except ts.NameCollisionError as exc:
    print(f"NameCollisionError: {exc}")

try:
    ts.gather(cars, "roadtype", "mpg", ts.include("city", "displ"))
except ts.UnknownColumnError as exc:
    print(f"UnknownColumnError: {exc}")

# Example 5: plan tracking
print("\n" + "=" * 60)
print("Example 5: plan tracking")
print("=" * 60)

frame = DataFrame.from_table(cars, source_id="mpg")
result = frame.gather("roadtype", "mpg", exclude=["id"]).spread("roadtype", "mpg")
print(visualize(result._plan))
print()
print(to_json(result._plan, indent=2))
