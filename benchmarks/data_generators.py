"""
Benchmark documents for strict decoding.

Every generator produces a document the strict decoder accepts under its
default limits: no exponent-form numbers, at most 10 container levels, at
most 10,000 elements per array. A fixed seed keeps runs comparable.
"""

import json
import random
from typing import Any

_SEED = 8259
_WORDS = (
    "amber", "basalt", "cedar", "delta", "ember", "fjord", "garnet", "harbor",
    "indigo", "juniper", "kelp", "lumen", "meadow", "nickel", "onyx", "pewter",
)
_TAGS = ("gift", "priority", "bulk", "fragile", "return", "international")

# Values on either side of the Integer32 and Integer64 ranges.
_INTEGER_EDGES = (
    0,
    -1,
    2**31 - 1,
    -(2**31),
    2**31,
    2**53 + 1,
    2**63 - 1,
    -(2**63),
)

# Characters json.dumps escapes: quotes, backslash, controls, non-ASCII and
# astral code points (written as surrogate pairs).
_ESCAPED_CHARS = ('"', "\\", "\n", "\t", "\b", "\x0c", "é", "日", "\U0001f600")


def generate_test_data(data_type: str) -> str:
    """Returns the JSON text for one named benchmark document."""
    generators = {
        "small_object": _single_order,
        "large_object": _customer_account,
        "mixed_array": _strict_numbers,
        "nested_structure": _depth_limit_tree,
        "string_heavy": _escaped_strings,
        "order_batch": _order_batch,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return json.dumps(generators[data_type](random.Random(_SEED)))


def _word(rng: random.Random) -> str:
    return rng.choice(_WORDS)


def _timestamp(rng: random.Random) -> str:
    return (
        f"2024-{rng.randint(1, 12):02d}-{rng.randint(1, 28):02d}"
        f"T{rng.randint(0, 23):02d}:{rng.randint(0, 59):02d}"
        f":{rng.randint(0, 59):02d}.{rng.randint(0, 999):03d}Z"
    )


def _price(rng: random.Random) -> float:
    """Two-decimal price between 1 and 500."""
    return rng.randint(100, 50_000) / 100


def _order(rng: random.Random, order_id: int) -> dict[str, Any]:
    return {
        "id": order_id,
        "customer": {
            "name": f"{_word(rng).title()} {_word(rng).title()}",
            "email": rng.choice([None, f"{_word(rng)}@example.com"]),
        },
        "items": [
            {
                "sku": f"SKU-{rng.randint(0, 99_999):05d}",
                "quantity": rng.randint(1, 20),
                "price": _price(rng),
            }
            for _ in range(rng.randint(1, 8))
        ],
        # duplicates exercise SetOf de-duplication
        "tags": rng.choices(_TAGS, k=3),
        "placed_at": _timestamp(rng),
        "paid": rng.random() < 0.8,
    }


def _single_order(rng: random.Random) -> dict[str, Any]:
    """One order, well under 1KB."""
    return _order(rng, 2**53 + 1)


def _order_batch(rng: random.Random) -> list[dict[str, Any]]:
    """100 orders matching the Order schema used by the decoding benchmarks."""
    return [_order(rng, rng.randint(1, 2**62)) for _ in range(100)]


def _customer_account(rng: random.Random) -> dict[str, Any]:
    """A customer with addresses and order history, well over 10KB."""
    return {
        "customer_id": rng.randint(1, 2**31 - 1),
        "name": f"{_word(rng).title()} {_word(rng).title()}",
        "addresses": [
            {
                "street": f"{rng.randint(1, 9999)} {_word(rng).title()} Road",
                "city": _word(rng).title(),
                "zip": None if rng.random() < 0.3 else f"{rng.randint(0, 99_999):05d}",
            }
            for _ in range(3)
        ],
        "orders": [_order(rng, rng.randint(1, 2**62)) for _ in range(40)],
        "preferences": {tag: rng.random() < 0.5 for tag in _TAGS},
    }


def _strict_numbers(rng: random.Random) -> list[Any]:
    """
    Numbers in every form the strict lexer accepts.

    Integer range edges, negative zero and decimals down to 0.0001, mixed
    with other scalars.
    """
    values: list[Any] = []
    for i in range(500):
        pick = i % 5
        if pick == 0:
            values.append(rng.choice(_INTEGER_EDGES))
        elif pick == 1:
            magnitude = rng.randint(1_000_000, 999_999_999) / 1_000_000
            values.append(rng.choice((1, -1)) * magnitude)
        elif pick == 2:
            values.append(rng.randint(1, 9999) / 10_000)
        elif pick == 3:
            values.append(rng.choice([True, False, None, _word(rng)]))
        else:
            values.append({"index": i, "score": _price(rng)})
    values.append(-0.0)
    return values


def _depth_limit_tree(rng: random.Random) -> dict[str, Any]:
    """An object tree exactly as deep as the default nesting ceiling."""

    def node(levels: int) -> dict[str, Any]:
        result: dict[str, Any] = {"levels": levels, "label": _word(rng)}
        if levels >= 2:
            result["child"] = node(levels - 1)
        if levels >= 3:
            # the array is one level, its objects the rest
            result["branches"] = [node(levels - 2) for _ in range(2)]
        return result

    return node(10)


def _escaped_strings(rng: random.Random) -> dict[str, Any]:
    """Strings where roughly a third of the characters need escaping."""

    def text(length: int) -> str:
        return "".join(
            rng.choice(_ESCAPED_CHARS) if rng.random() < 0.3 else _word(rng)[0]
            for _ in range(length)
        )

    return {
        "notes": [text(60) for _ in range(100)],
        "labels": {f"{_word(rng)}_{i}": text(20) for i in range(50)},
        "paths": [
            f"C:\\Users\\{_word(rng)}\\Documents\\order_{i}.json" for i in range(20)
        ],
    }
