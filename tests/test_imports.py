"""Tests for verifying import styles work correctly."""


class TestFlatImports:
    """Verify flat imports from kanzen work."""

    def test_outcome_types(self) -> None:
        from kanzen import Failure, Outcome, Success, UnwrapError, collect

        assert Success(42).unwrap() == 42
        assert Failure('error').is_failure()
        outcome: Outcome[int, str] = Success(1)
        assert outcome.is_success()
        assert collect([Success(1), Success(2)]).unwrap() == [1, 2]
        assert issubclass(UnwrapError, RuntimeError)

    def test_async_types(self) -> None:
        from kanzen import AsyncOutcome, async_failure, async_success, infer, to_async

        assert isinstance(async_success(1), AsyncOutcome)
        assert isinstance(async_failure('e'), AsyncOutcome)
        assert callable(infer)
        assert callable(to_async)

    def test_decorators(self) -> None:
        from kanzen import safe, safe_async

        assert callable(safe)
        assert callable(safe_async)


class TestSubpackageImports:
    """Verify imports from subpackages work."""

    def test_async_subpackage(self) -> None:
        from kanzen.async_ import AsyncOutcome, async_failure, async_success, infer, to_async

        assert all(callable(obj) for obj in (AsyncOutcome, async_failure, async_success, infer, to_async))

    def test_decorators_subpackage(self) -> None:
        from kanzen.decorators import safe, safe_async

        assert callable(safe)
        assert callable(safe_async)

    def test_http_subpackage(self) -> None:
        from kanzen.http import (
            AbortError,
            Endpoint,
            EndpointSchema,
            FetchError,
            SafeResponse,
            init,
            safe_fetch,
            service,
            validate_schema,
        )

        assert issubclass(AbortError, FetchError)
        assert Endpoint('/items').schema == EndpointSchema()
        assert all(callable(obj) for obj in (SafeResponse, init, safe_fetch, service, validate_schema))

    def test_root_exports_match_all(self) -> None:
        import kanzen
        import kanzen.http

        for module in (kanzen, kanzen.http):
            for name in module.__all__:
                assert hasattr(module, name), f'{module.__name__}.{name}'
