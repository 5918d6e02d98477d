"""
Test data generators for JSON scanning benchmarks.

Creates JSON objects in a few shapes for performance testing:
- Different sizes (small/large)
- Different complexity levels (flat/nested/mixed)
- String-heavy content with escape sequences

Every document is an object at the top level, since that is all the
scanner accepts.
"""

import json
import random
import string
from typing import Any

DATA_TYPES = [
    "small_object",
    "large_object",
    "mixed_array",
    "nested_structure",
    "string_heavy",
]

# Constants for random data generation
_INT_TYPE = 1
_FLOAT_TYPE = 2
_STRING_TYPE = 3
_BOOL_TYPE = 4
_NULL_TYPE = 5
_ESCAPE_PROBABILITY = 0.3


def generate_test_data(data_type: str) -> str:
    """Generates a JSON object document of the specified shape."""
    generators = {
        "small_object": _generate_small_object,
        "large_object": _generate_large_object,
        "mixed_array": _generate_mixed_array,
        "nested_structure": _generate_nested_structure,
        "string_heavy": _generate_string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type]()


def _generate_small_object() -> str:
    """Generates a small JSON object (< 1KB) with basic key-value pairs."""
    data = {
        "id": 12345,
        "name": "Alice Johnson",
        "email": "alice@example.com",
        "active": True,
        "balance": 1234.56,
        "metadata": {"created": "2024-01-15T10:30:00Z", "source": "api"},
    }
    return json.dumps(data)


def _generate_large_object() -> str:
    """Generates a large JSON object (> 10KB) of records with many fields."""
    data = {
        "account_id": random.randint(1000000, 9999999),
        "records": [
            {
                "id": f"rec_{i:06d}",
                "amount": round(random.uniform(-1000.0, 1000.0), 2),
                "ratio": random.uniform(0, 1) * 10 ** random.randint(-12, 12),
                "label": _random_string(20),
                "flags": [random.choice([True, False]) for _ in range(4)],
                "parent": None if i % 3 else f"rec_{i - 1:06d}",
            }
            for i in range(120)
        ],
    }
    return json.dumps(data)


def _generate_mixed_array() -> str:
    """Generates an object holding a large array of mixed value kinds."""
    array: list[Any] = []

    for i in range(200):
        choice = random.randint(1, 6)
        if choice == _INT_TYPE:
            array.append(random.randint(-1000, 1000))
        elif choice == _FLOAT_TYPE:
            array.append(round(random.uniform(-100.0, 100.0), 3))
        elif choice == _STRING_TYPE:
            array.append(_random_string(random.randint(5, 30)))
        elif choice == _BOOL_TYPE:
            array.append(random.choice([True, False]))
        elif choice == _NULL_TYPE:
            array.append(None)
        else:
            array.append({"index": i, "value": _random_string(10)})

    return json.dumps({"items": array})


def _generate_nested_structure() -> str:
    """Generates a deeply nested JSON object."""

    def create_nested_dict(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _random_string(10)}

        return {
            "level": depth,
            "items": [create_nested_dict(depth - 1) for _ in range(2)],
            "nested": create_nested_dict(depth - 1),
        }

    return json.dumps(create_nested_dict(7))


def _generate_string_heavy() -> str:
    """Generates a JSON object with many string escape sequences."""

    def create_escaped_string() -> str:
        chars = []
        for _ in range(50):
            if random.random() < _ESCAPE_PROBABILITY:
                chars.append(random.choice(['"', "\\", "/", "\b", "\n", "\t"]))
            else:
                chars.append(random.choice(string.ascii_letters + string.digits + " "))
        return "".join(chars)

    data = {
        "strings": [create_escaped_string() for _ in range(100)],
        "paths": {
            f"key_{i}": f"C:\\Users\\{_random_string(8)}\\file_{i}.txt\\"
            for i in range(20)
        },
    }
    return json.dumps(data)


def _random_string(length: int) -> str:
    """Generates a random string of specified length."""
    return "".join(random.choices(string.ascii_letters, k=length))
