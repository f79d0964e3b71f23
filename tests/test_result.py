"""Unit tests for the lightweight Result utilities."""

from __future__ import annotations

import pytest

from snapcore.core.result import Err, Ok, Result, err, ok


def test_ok_variant() -> None:
    r: Result[int, str] = ok(10)
    assert isinstance(r, Ok)
    assert r.is_ok() and not r.is_err()
    assert r.unwrap() == 10


def test_err_variant() -> None:
    r: Result[int, str] = err("boom")
    assert isinstance(r, Err)
    assert r.is_err() and not r.is_ok()
    assert r.unwrap_err() == "boom"


def test_unwrap_on_wrong_variant_raises() -> None:
    with pytest.raises(RuntimeError):
        err("e").unwrap()
    with pytest.raises(RuntimeError):
        ok("x").unwrap_err()


def test_variants_compare_by_value() -> None:
    assert ok(None) == ok(None)
    assert err("a") != err("b")
