"""
JSON_checker pass3: a struct nested in a struct.
"""

import wjp
from wjp import Fields

# from https://json.org/JSON_checker/test/pass3.json
JSON = r"""
{
    "JSON Test Pattern pass3": {
        "The outermost value": "must be an object or array.",
        "In this test": "It is an object."
    }
}
"""


def test_parse() -> None:
    """
    Validates member extraction and the compact text round trip.
    """
    tree = wjp.parse(JSON)

    outer = Fields.of(tree)
    inner = outer.take_as("JSON Test Pattern pass3", dict[str, str])
    outer.ensure_consumed()
    assert inner == {
        "The outermost value": "must be an object or array.",
        "In this test": "It is an object.",
    }

    out = tree.to_text()
    assert "\n" not in out
    assert wjp.parse(out) == tree
