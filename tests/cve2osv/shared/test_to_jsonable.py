from pathlib import Path

from cve2osv.core.domain.models import AffectedCommit, CommitKind, ConversionOutcome
from cve2osv.shared.to_jsonable import to_jsonable


def test_basic_types_pass_through():
    assert to_jsonable(None) is None
    assert to_jsonable("x") == "x"
    assert to_jsonable(3) == 3
    assert to_jsonable(True) is True


def test_enums_use_their_value():
    assert to_jsonable(CommitKind.FIXED) == "fixed"
    assert to_jsonable(ConversionOutcome.NO_RANGES) == 5


def test_dataclasses_and_collections():
    commit = AffectedCommit("https://github.com/v/p", CommitKind.INTRODUCED, "abc")
    assert to_jsonable({"commits": (commit,), "path": Path("/tmp/x"), "tags": {"b", "a"}}) == {
        "commits": [{"repo": "https://github.com/v/p", "kind": "introduced", "commit": "abc"}],
        "path": "/tmp/x",
        "tags": ["a", "b"],
    }


def test_unknown_objects_become_strings():
    class Thing:
        def __str__(self):
            return "thing"

    assert to_jsonable(Thing()) == "thing"
