"""Basic usage of cherries.

Builds (a + b) * (c - d), prints its JSON trace, and validates the result.
"""

import math

import cherries as ch

a = ch.Leaf().name("a").value(2).build()
b = ch.Leaf().name("b").value(3).build()
c = ch.Leaf().name("c").value(4).build()
d = ch.Leaf().name("d").value(1).build()

res = (a + b) * (c - d)
print(res.to_json(indent=2))

# map records the original node as the only child
floored = ch.leaf(2.1, "x").map(math.floor).labeled("floor")
print(floored.to_json())

validated = res.validate("must be even", lambda v: v % 2 == 0).validate("must be less than 20", lambda v: v < 20)
result = validated.into_result()
if not result.ok:
    print(f"Validation failed: {result.failure}")
