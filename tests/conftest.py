"""
Pytest configuration and shared fixtures for jsonscan tests.

Provides immutable test documents, most of them adapted from the json.org
JSON_checker suite, plus a recording sink for structural assertions.
"""

from dataclasses import dataclass

import pytest

from jsonscan import RecordingSink


@dataclass(frozen=True)
class JsonTestCase:
    """
    Immutable container for JSON test case data.

    Holds a document and whether the scanner should accept it; ``reason``
    explains cases where the scanner's verdict differs from strict JSON.
    """

    description: str
    input_data: str
    should_fail: bool = False
    reason: str = ""


# from https://json.org/JSON_checker/test/pass1.json, wrapped in an object
PASS1 = r"""{"pass1": [
    "JSON Test Pattern pass1",
    {"object with 1 member":["array with 1 element"]},
    {},
    [],
    -42,
    true,
    false,
    null,
    {
        "integer": 1234567890,
        "real": -9876.543210,
        "e": 0.123456789e-12,
        "E": 1.234567890E+34,
        "":  23456789012E66,
        "zero": 0,
        "one": 1,
        "space": " ",
        "quote": "\"",
        "backslash": "\\",
        "controls": "\b\f\n\r\t",
        "slash": "/ & \/",
        "alpha": "abcdefghijklmnopqrstuvwyz",
        "ALPHA": "ABCDEFGHIJKLMNOPQRSTUVWYZ",
        "digit": "0123456789",
        "0123456789": "digit",
        "special": "`1~!@#$%^&*()_+-={':[,]}|;.</>?",
        "hex": "\u0123\u4567\u89AB\uCDEF\uabcd\uef4A",
        "true": true,
        "false": false,
        "null": null,
        "array":[  ],
        "object":{  },
        "address": "50 St. James Street",
        "url": "http://www.JSON.org/",
        "comment": "// /* <!-- --",
        "# -- --> */": " ",
        " s p a c e d " :[1,2 , 3

,

4 , 5        ,          6           ,7        ],"compact":[1,2,3,4,5,6,7],
        "jsontext": "{\"object with 1 member\":[\"array with 1 element\"]}",
        "quotes": "&#34; \u0022 %22 0x22 034 &#x22;",
        "\/\\\"\uCAFE\uBABE\uAB98\uFCDE\ubcda\uef4A\b\f\n\r\t`1~!@#$%^&*()_+-=[]{}|;:',./<>?"
: "A key can be any string"
    },
    0.5 ,98.6
,
99.44
,

1066,
1e1,
0.1e1,
1e-1,
1e00,2e+00,2e-00
,"rosebud"]}
"""

# from https://json.org/JSON_checker/test/pass2.json, wrapped in an object
PASS2 = r"""{"pass2": [[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]}"""

# from https://json.org/JSON_checker/test/pass3.json
PASS3 = r"""
{
    "JSON Test Pattern pass3": {
        "The outermost value": "must be an object or array.",
        "In this test": "It is an object."
    }
}
"""

# The document used throughout the structural tests.
SCENARIO = '{"x": [1, 2.5e3, true, null], "y": "hi"}'


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def json_fail_cases() -> list[JsonTestCase]:
    """
    Provides documents the scanner must reject.

    Taken from json.org JSON_checker. Every document whose root is not an
    object is rejected outright; the object-rooted ones are rejected for a
    missing colon, a missing member name or a bad literal.
    """
    fail_docs = [
        # https://json.org/JSON_checker/test/fail1.json
        '"A JSON payload should be an object or array, not a string."',
        # https://json.org/JSON_checker/test/fail2.json
        '["Unclosed array"',
        # https://json.org/JSON_checker/test/fail3.json
        '{unquoted_key: "keys must be quoted"}',
        # https://json.org/JSON_checker/test/fail4.json
        '["extra comma",]',
        # https://json.org/JSON_checker/test/fail5.json
        '["double extra comma",,]',
        # https://json.org/JSON_checker/test/fail6.json
        '[   , "<-- missing value"]',
        # https://json.org/JSON_checker/test/fail7.json
        '["Comma after the close"],',
        # https://json.org/JSON_checker/test/fail8.json
        '["Extra close"]]',
        # https://json.org/JSON_checker/test/fail9.json
        '{"Extra comma": true,}',
        # https://json.org/JSON_checker/test/fail12.json
        '{"Illegal invocation": alert()}',
        # https://json.org/JSON_checker/test/fail15.json
        '["Illegal backslash escape: \\x15"]',
        # https://json.org/JSON_checker/test/fail16.json
        "[\\naked]",
        # https://json.org/JSON_checker/test/fail17.json
        '["Illegal backslash escape: \\017"]',
        # https://json.org/JSON_checker/test/fail18.json
        '[[[[[[[[[[[[[[[[[[[["Too deep"]]]]]]]]]]]]]]]]]]]]',
        # https://json.org/JSON_checker/test/fail19.json
        '{"Missing colon" null}',
        # https://json.org/JSON_checker/test/fail21.json
        '{"Comma instead of colon", null}',
        # https://json.org/JSON_checker/test/fail22.json
        '["Colon instead of comma": false]',
        # https://json.org/JSON_checker/test/fail23.json
        '["Bad value", truth]',
        # https://json.org/JSON_checker/test/fail24.json
        "['single quote']",
        # https://json.org/JSON_checker/test/fail29.json
        "[0e]",
        # https://json.org/JSON_checker/test/fail30.json
        "[0e+]",
        # https://json.org/JSON_checker/test/fail31.json
        "[0e+-1]",
        # https://json.org/JSON_checker/test/fail32.json
        '{"Comma instead if closing brace": true,',
        # https://json.org/JSON_checker/test/fail33.json
        '["mismatch"}',
    ]

    return [
        JsonTestCase(description=f"fail case {idx}", input_data=doc, should_fail=True)
        for idx, doc in enumerate(fail_docs)
    ]


@pytest.fixture
def json_tolerated_cases() -> list[JsonTestCase]:
    """
    Provides invalid JSON objects the scanner accepts anyway.

    Characters between a value and the next separator are skipped, and so
    is anything after the top-level object.
    """
    return [
        JsonTestCase(
            "fail10.json",
            '{"Extra value after close": true} "misplaced quoted value"',
            reason="trailing data after the object is ignored",
        ),
        JsonTestCase(
            "fail11.json",
            '{"Illegal expression": 1 + 2}',
            reason="'+ 2' sits between the number and the closing brace",
        ),
        JsonTestCase(
            "fail13.json",
            '{"Numbers cannot have leading zeroes": 013}',
            reason="the number ends after the leading zero",
        ),
        JsonTestCase(
            "fail14.json",
            '{"Numbers cannot be hex": 0x14}',
            reason="the number ends after the zero",
        ),
        JsonTestCase(
            "fail20.json",
            '{"Double colon":: null}',
            reason="the classifier skips the second colon",
        ),
    ]


@pytest.fixture
def json_pass_cases() -> list[JsonTestCase]:
    """Provides JSON objects that must validate."""
    return [
        JsonTestCase("pass1.json - complex nested structure", PASS1),
        JsonTestCase("pass2.json - deep nesting", PASS2),
        JsonTestCase("pass3.json - simple object", PASS3),
    ]


@pytest.fixture
def basic_json_objects() -> list[JsonTestCase]:
    """
    Provides small objects covering every value kind.
    """
    return [
        JsonTestCase("empty object", "{}"),
        JsonTestCase("empty object with whitespace", "{ \n\t }"),
        JsonTestCase("string member", '{"key": "value"}'),
        JsonTestCase("empty string member", '{"key": ""}'),
        JsonTestCase("empty key", '{"": 1}'),
        JsonTestCase("integer member", '{"n": 42}'),
        JsonTestCase("negative member", '{"n": -17}'),
        JsonTestCase("float member", '{"n": 3.14}'),
        JsonTestCase("exponent member", '{"n": 6.02e23}'),
        JsonTestCase("literal members", '{"a": true, "b": false, "c": null}'),
        JsonTestCase("compact members", '{"a":1,"b":[2,3],"c":{"d":4}}'),
        JsonTestCase("empty containers", '{"a": [], "b": {}, "c": [{}]}'),
        JsonTestCase("escaped quote", '{"q": "say \\"hi\\""}'),
        JsonTestCase("leading whitespace", '\n\t {"a": 1}'),
    ]
