"""
Unit tests for upstream response normalization.
"""
import pytest

from exposure.errors import UpstreamError
from exposure.outcome import Success, Failure, normalize_response, unwrap


class TestNormalizeResponse:
    """Tests for normalize_response."""

    def test_json_success(self, make_response):
        outcome = normalize_response(make_response(200, {'Events': []}))
        assert outcome == Success(body={'Events': []})

    def test_json_with_charset(self, make_response):
        resp = make_response(200, {'a': 1}, content_type='application/json; charset=utf-8')
        assert normalize_response(resp) == Success(body={'a': 1})

    def test_vendor_json_type(self, make_response):
        resp = make_response(200, {'a': 1}, content_type='application/problem+json')
        assert normalize_response(resp) == Success(body={'a': 1})

    def test_non_json_passes_through_as_text(self, make_response):
        resp = make_response(200, {'a': 1}, content_type='text/plain')
        outcome = normalize_response(resp)
        assert outcome == Success(body='{"a": 1}')
        resp.json.assert_not_called()

    def test_missing_content_type_is_text(self, make_response):
        resp = make_response(204, None, content_type=None)
        assert normalize_response(resp) == Success(body='')

    def test_mislabelled_json_falls_back_to_text(self, make_response):
        resp = make_response(200, None, text='<html>oops</html>')
        assert normalize_response(resp) == Success(body='<html>oops</html>')

    def test_failure_captures_status_and_text(self, make_response):
        resp = make_response(404, None, content_type='text/plain', text='Team not found')
        assert normalize_response(resp) == Failure(http_status=404, message='Team not found')

    def test_failure_with_json_body_is_not_parsed(self, make_response):
        resp = make_response(400, {'Message': 'bad'})
        outcome = normalize_response(resp)
        assert isinstance(outcome, Failure)
        assert outcome.message == '{"Message": "bad"}'

    def test_failure_with_empty_body_gets_generic_message(self, make_response):
        resp = make_response(500, None, text='')
        outcome = normalize_response(resp)
        assert outcome == Failure(
            http_status=500,
            message='Upstream request failed with status 500'
        )


class TestUnwrap:

    def test_success_returns_body(self):
        assert unwrap(Success(body=[1, 2])) == [1, 2]

    def test_failure_raises(self):
        with pytest.raises(UpstreamError) as exc_info:
            unwrap(Failure(http_status=403, message='Forbidden'))

        error = exc_info.value
        assert error.http_status == 403
        assert error.message == 'Exposure API Error: 403 - Forbidden'
        assert error.to_dict() == {
            'error': 'Upstream request failed',
            'message': 'Exposure API Error: 403 - Forbidden',
            'upstream_status': 403,
        }
