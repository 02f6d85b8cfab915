"""Tests for the Ok/Err result values and combinators."""

from common.result import Err, ErrorKind, Ok, bind, first_success


class TestResult:
    """Basic Ok/Err behavior."""

    def test_ok(self):
        result = Ok(3)
        assert result.ok
        assert result.value == 3

    def test_err_describe(self):
        err = Err(ErrorKind.NOT_FOUND, {"library": "acme/foo", "dir": "/w/foo"})
        assert not err.ok
        assert err.describe() == "not-found (dir=/w/foo, library=acme/foo)"

    def test_err_without_context(self):
        assert Err(ErrorKind.IO).describe() == "io"

    def test_bind(self):
        assert bind(Ok(2), lambda v: Ok(v * 2)) == Ok(4)
        err = Err(ErrorKind.IO)
        assert bind(err, lambda v: Ok(v * 2)) is err


class TestFirstSuccess:
    """Ordered fallback chains."""

    def test_first_decisive_step_wins(self):
        calls = []

        def step(name, outcome):
            def _run():
                calls.append(name)
                return outcome
            return _run

        result = first_success(
            [step("a", None), step("b", Ok("b")), step("c", Ok("c"))],
            default=Err(ErrorKind.NOT_FOUND),
        )
        assert result == Ok("b")
        assert calls == ["a", "b"]

    def test_err_is_decisive(self):
        err = Err(ErrorKind.NO_SEMVER_TAGS)
        result = first_success([lambda: err, lambda: Ok("later")], default=Err(ErrorKind.NOT_FOUND))
        assert result is err

    def test_default_when_all_defer(self):
        default = Err(ErrorKind.NOT_FOUND, {"library": "x"})
        assert first_success([lambda: None, lambda: None], default=default) is default
        assert first_success([], default=default) is default
