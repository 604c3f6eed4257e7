"""Tests for SafeResponse metadata and its body readers."""

from __future__ import annotations

import msgspec
import pytest
from web_helpers import BASE_URL, ClosedEarly, make_response

from kanzen import AsyncOutcome, Failure, Success
from kanzen.http import (
    AbortError,
    Blob,
    BodyRangeError,
    BodySyntaxError,
    FetchTypeError,
    SafeResponse,
    init,
)


class Item(msgspec.Struct):
    id: int
    name: str


class TestMetadata:
    def test_status_and_headers(self) -> None:
        response = SafeResponse(make_response(404, headers={'x-request-id': 'abc'}))

        assert response.status == 404
        assert response.status_text == 'Not Found'
        assert not response.ok
        assert response.headers['x-request-id'] == 'abc'
        assert response.url == f'{BASE_URL}/resource'
        assert not response.redirected
        assert not response.body_used

    def test_ok_range(self) -> None:
        assert SafeResponse(make_response(204)).ok
        assert not SafeResponse(make_response(302)).ok

    def test_repr(self) -> None:
        assert repr(SafeResponse(make_response(200))) == f"SafeResponse(status=200, url='{BASE_URL}/resource')"

    def test_max_body_size_from_config(self) -> None:
        init(max_body_size=3)
        assert SafeResponse(make_response(200, content=b'abcd'))._max_body_size == 3


class TestReaders:
    @pytest.mark.asyncio
    async def test_readers_return_async_outcomes(self) -> None:
        response = SafeResponse(make_response(200, text='hi'))
        outcome = response.text()
        assert isinstance(outcome, AsyncOutcome)
        assert await outcome == Success('hi')

    @pytest.mark.asyncio
    async def test_text_uses_charset(self) -> None:
        response = SafeResponse(
            make_response(200, content='café'.encode('latin-1'), headers={'content-type': 'text/plain; charset=latin-1'})
        )
        assert await response.text().unwrap() == 'café'

    @pytest.mark.asyncio
    async def test_json(self) -> None:
        response = SafeResponse(make_response(200, json={'id': 1, 'name': 'widget'}))
        assert await response.json().unwrap() == {'id': 1, 'name': 'widget'}

    @pytest.mark.asyncio
    async def test_json_typed(self) -> None:
        response = SafeResponse(make_response(200, json={'id': 1, 'name': 'widget'}))
        assert await response.json(Item).unwrap() == Item(id=1, name='widget')

    @pytest.mark.asyncio
    async def test_json_wrong_shape_is_type_error(self) -> None:
        response = SafeResponse(make_response(200, json={'id': 'one'}))
        outcome = await response.json(Item)
        assert isinstance(outcome.error, FetchTypeError)

    @pytest.mark.asyncio
    async def test_json_malformed_is_syntax_error(self) -> None:
        response = SafeResponse(make_response(200, content=b'{"id": 1,'))
        outcome = await response.json()
        assert isinstance(outcome.error, BodySyntaxError)
        assert outcome.error.kind == 'syntax'
        assert isinstance(outcome.error.__cause__, msgspec.DecodeError)

    @pytest.mark.asyncio
    async def test_form_data(self) -> None:
        response = SafeResponse(
            make_response(
                200,
                content=b'tag=a&name=widget&tag=b&empty=',
                headers={'content-type': 'application/x-www-form-urlencoded; charset=utf-8'},
            )
        )
        assert await response.form_data().unwrap() == {'tag': ['a', 'b'], 'name': ['widget'], 'empty': ['']}

    @pytest.mark.asyncio
    async def test_form_data_wrong_content_type(self) -> None:
        response = SafeResponse(make_response(200, json={'tag': 'a'}))

        outcome = await response.form_data()

        assert isinstance(outcome.error, FetchTypeError)
        assert not response.body_used

    @pytest.mark.asyncio
    async def test_blob(self) -> None:
        response = SafeResponse(make_response(200, content=b'\x89PNG', headers={'content-type': 'image/png'}))

        blob = await response.blob().unwrap()

        assert blob == Blob(b'\x89PNG', 'image/png')
        assert blob.size == 4

    @pytest.mark.asyncio
    async def test_bytes_and_array_buffer(self) -> None:
        assert await SafeResponse(make_response(200, content=b'raw')).bytes() == Success(b'raw')
        buffer = await SafeResponse(make_response(200, content=b'raw')).array_buffer().unwrap()
        assert isinstance(buffer, memoryview)
        assert buffer.tobytes() == b'raw'

    @pytest.mark.asyncio
    async def test_bytes_over_limit_is_range_error(self) -> None:
        response = SafeResponse(make_response(200, content=b'12345'), max_body_size=4)

        outcome = await response.bytes()

        assert isinstance(outcome.error, BodyRangeError)
        assert outcome.error.kind == 'range'

    @pytest.mark.asyncio
    async def test_array_buffer_over_limit_is_range_error(self) -> None:
        response = SafeResponse(make_response(200, content=b'12345'), max_body_size=4)
        assert isinstance((await response.array_buffer()).error, BodyRangeError)

    @pytest.mark.asyncio
    async def test_limit_applies_to_raw_readers_only(self) -> None:
        """max_body_size caps bytes()/array_buffer(); decoders read the buffered body."""
        response = SafeResponse(make_response(200, text='12345'), max_body_size=4)
        assert await response.text() == Success('12345')

    @pytest.mark.asyncio
    async def test_closed_stream_aborts(self) -> None:
        raw = make_response(200, stream=ClosedEarly())
        await raw.aclose()

        outcome = await SafeResponse(raw).text()

        assert isinstance(outcome.error, AbortError)


class TestBodyUse:
    @pytest.mark.asyncio
    async def test_body_read_once(self) -> None:
        response = SafeResponse(make_response(200, json=[1]))

        assert await response.json() == Success([1])
        assert response.body_used

        second = await response.text()
        assert isinstance(second, Failure)
        assert isinstance(second.error, FetchTypeError)

    @pytest.mark.asyncio
    async def test_failed_read_still_uses_body(self) -> None:
        response = SafeResponse(make_response(200, content=b'not json'))
        await response.json()
        assert response.body_used

    @pytest.mark.asyncio
    async def test_clone_reads_again(self) -> None:
        response = SafeResponse(make_response(200, text='twice'))
        copy = response.clone()

        assert await response.text() == Success('twice')
        assert await copy.text() == Success('twice')

    def test_clone_after_use_raises(self) -> None:
        response = SafeResponse(make_response(200))
        response._body_used = True
        with pytest.raises(FetchTypeError):
            response.clone()
