import json
import subprocess

import pytest

from dotkit.onepassword import OnePassword, onepassword_args
from dotkit.util import TemplateError


class FakeRunner:
    def __init__(self, output):
        self.output = output
        self.calls = []

    def __call__(self, args, stdin, stderr):
        self.calls.append(list(args))
        return self.output


ITEM = {
    "details": {
        "fields": [{"designation": "username", "value": "user"}, {"value": "x"}],
        "sections": [{"fields": [{"t": "pin", "v": "1"}]}, {}],
    }
}


def test_args():
    assert onepassword_args(["get", "item"], ["name"]) == ["get", "item", "name"]
    assert onepassword_args(["get", "item"], ["name", "vault", "acct"]) == [
        "get", "item", "name", "--vault", "vault", "--account", "acct",
    ]


@pytest.mark.parametrize("args", [[], ["a", "b", "c", "d"]])
def test_args_count_error(args):
    with pytest.raises(TemplateError, match="expected 1, 2, or 3 arguments"):
        onepassword_args(["get", "item"], args)


def test_get_is_cached():
    runner = FakeRunner(json.dumps(ITEM).encode())
    op = OnePassword(runner=runner)
    assert op.get("name") == ITEM
    assert op.get("name") == ITEM
    assert runner.calls == [["op", "get", "item", "name"]]


def test_details_fields():
    op = OnePassword(runner=FakeRunner(json.dumps(ITEM).encode()))
    assert op.details_fields("name") == {"username": ITEM["details"]["fields"][0]}


def test_item_fields():
    op = OnePassword(runner=FakeRunner(json.dumps(ITEM).encode()))
    assert op.item_fields("name", "vault") == {"pin": {"t": "pin", "v": "1"}}


def test_document():
    runner = FakeRunner(b"doc contents")
    op = OnePassword(runner=runner)
    assert op.document("doc") == "doc contents"
    assert runner.calls == [["op", "get", "document", "doc"]]


def test_invalid_json():
    op = OnePassword(runner=FakeRunner(b"not json"))
    with pytest.raises(TemplateError, match="not json"):
        op.get("name")


def test_failure_includes_stderr():
    def runner(args, stdin, stderr):
        stderr.write(b"  boom \n")
        raise subprocess.CalledProcessError(1, args)

    op = OnePassword(runner=runner)
    with pytest.raises(TemplateError, match=r"op get item name: .*: boom$"):
        op.get("name")