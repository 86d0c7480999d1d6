import io

import pytest

from httpfile.core.model import (
    BadResponseError, ConnectedAt, ContentRange, Disconnected, HTTPFileError,
    InvalidArgumentError, LengthUnknownError, NotFoundError, StatusError,
)
from httpfile.core.util import (
    UNKNOWN_LENGTH, check_read_response, instance_length, parse_content_range,
    range_header, resolve_seek,
)


class TestContentRange:
    """Test Content-Range parsing."""

    def test_full_form(self):
        assert parse_content_range("bytes 50-149/500") == ContentRange(first=50, last=149, length=500)

    def test_unknown_total(self):
        cr = parse_content_range("bytes 0-9/*")
        assert cr.first == 0
        assert cr.length == UNKNOWN_LENGTH

    @pytest.mark.parametrize("value", [
        None,
        "",
        "garbage",
        "bytes 10-5/100",          # last before first
        "items 0-9/10",            # not a byte range
        "bytes */100",             # unsatisfied range carries no start
        "bytes 0-9",
    ])
    def test_unparseable(self, value):
        assert parse_content_range(value) is None

    def test_range_header(self):
        assert range_header(0) == "bytes=0-"
        assert range_header(1234) == "bytes=1234-"


class TestCheckReadResponse:
    """Test validation of GET responses against the requested offset."""

    def test_partial_content_at_offset(self):
        headers = {"Content-Range": "bytes 50-149/500"}
        assert check_read_response(206, "Partial Content", headers, 50) == 500

    def test_partial_content_wrong_start(self):
        headers = {"Content-Range": "bytes 50-149/500"}
        with pytest.raises(BadResponseError):
            check_read_response(206, "Partial Content", headers, 49)

    def test_partial_content_missing_header(self):
        with pytest.raises(BadResponseError):
            check_read_response(206, "Partial Content", {}, 0)

    def test_ok_with_content_length(self):
        assert check_read_response(200, "OK", {"Content-Length": "100"}, 0) == 100

    def test_ok_without_content_length(self):
        assert check_read_response(200, "OK", {}, 0) is None

    def test_ok_with_bad_content_length(self):
        with pytest.raises(BadResponseError):
            check_read_response(200, "OK", {"Content-Length": "lots"}, 0)

    def test_ok_at_nonzero_offset(self):
        """A full response starts at byte 0, so it cannot serve offset 10."""
        with pytest.raises(BadResponseError):
            check_read_response(200, "OK", {"Content-Length": "100"}, 10)

    def test_other_status(self):
        with pytest.raises(StatusError) as excinfo:
            check_read_response(416, "Range Not Satisfiable", {}, 2000)
        assert excinfo.value.status_code == 416
        assert str(excinfo.value) == "416 Range Not Satisfiable"


class TestInstanceLength:
    """Test length derivation used by length discovery."""

    def test_ok(self):
        assert instance_length(200, "OK", {"Content-Length": "100"}) == 100

    def test_ok_unknown(self):
        assert instance_length(200, "OK", {}) == UNKNOWN_LENGTH

    def test_partial(self):
        assert instance_length(206, "Partial Content", {"Content-Range": "bytes 0-0/77"}) == 77

    def test_bad_partial(self):
        with pytest.raises(BadResponseError):
            instance_length(206, "Partial Content", {"Content-Range": "nonsense"})

    def test_error_status(self):
        with pytest.raises(StatusError, match="500 Internal Server Error"):
            instance_length(500, "Internal Server Error", {})


class TestResolveSeek:
    """Test seek arithmetic."""

    def test_set(self):
        assert resolve_seek(10, -1, 42, io.SEEK_SET) == 42

    def test_cur(self):
        assert resolve_seek(10, -1, 5, io.SEEK_CUR) == 15
        assert resolve_seek(10, -1, -3, io.SEEK_CUR) == 7

    def test_end(self):
        assert resolve_seek(0, 500, -20, io.SEEK_END) == 480

    def test_end_unknown_length(self):
        with pytest.raises(LengthUnknownError):
            resolve_seek(0, UNKNOWN_LENGTH, 0, io.SEEK_END)

    def test_bad_whence(self):
        with pytest.raises(InvalidArgumentError):
            resolve_seek(0, 100, 0, 7)

    def test_negative_result_not_rejected(self):
        # validated lazily by the next request
        assert resolve_seek(3, 100, -10, io.SEEK_CUR) == -7


class TestModel:
    """Test error types and reader states."""

    def test_error_hierarchy(self):
        for cls in (BadResponseError, StatusError, NotFoundError, LengthUnknownError, InvalidArgumentError):
            assert issubclass(cls, HTTPFileError)
            assert issubclass(cls, OSError)
        assert issubclass(InvalidArgumentError, ValueError)
        assert issubclass(NotFoundError, StatusError)

    def test_not_found(self):
        err = NotFoundError()
        assert err.status_code == 404
        assert str(err) == "404 Not Found"

    def test_status_error_without_reason(self):
        assert str(StatusError(599)) == "599"

    def test_reader_states(self):
        state = ConnectedAt(offset=10, body=object())
        state.offset += 5
        assert state.offset == 15
        assert not isinstance(Disconnected(), ConnectedAt)
