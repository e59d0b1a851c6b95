"""Tests for line-delimited and Content-Length framing."""

import logging

import pytest

from gemini_mcp.transport import (
    ContentLengthFraming,
    FramingError,
    FramingMode,
    LineDelimitedFraming,
    create_framing,
)

RESPONSES = [
    {"jsonrpc": "2.0", "id": 1, "result": {"content": [{"type": "text", "text": "hi"}]}},
    {"jsonrpc": "2.0", "id": "abc", "error": {"code": -32603, "message": "boom", "data": {"errors": ["x"]}}},
    {"jsonrpc": "2.0", "id": None, "result": {"text": "naïve café ☃", "values": [0.5, -1.25, 3]}},
]


class TestCreateFraming:
    def test_line_mode(self):
        assert isinstance(create_framing(FramingMode.LINE), LineDelimitedFraming)

    def test_content_length_mode(self):
        assert isinstance(create_framing(FramingMode.CONTENT_LENGTH), ContentLengthFraming)

    def test_string_aliases(self):
        assert isinstance(create_framing("ndjson"), LineDelimitedFraming)
        assert isinstance(create_framing("length-prefixed"), ContentLengthFraming)

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError, match="Unknown framing"):
            create_framing("carrier-pigeon")


class TestLineDelimitedFraming:
    @pytest.fixture
    def framing(self):
        return LineDelimitedFraming()

    def test_decode_multiple_lines_in_one_chunk(self, framing):
        data = b'{"id": 1, "method": "ping"}\n{"id": 2, "method": "ping"}\n'
        messages = framing.decode(data)
        assert [m["id"] for m in messages] == [1, 2]

    def test_decode_line_split_across_chunks(self, framing):
        assert framing.decode(b'{"id": 1, "met') == []
        assert framing.buffered > 0
        messages = framing.decode(b'hod": "ping"}\n')
        assert messages == [{"id": 1, "method": "ping"}]
        assert framing.buffered == 0

    def test_blank_lines_ignored(self, framing):
        messages = framing.decode(b'\n   \n\t\n{"method": "x"}\n\n')
        assert messages == [{"method": "x"}]

    def test_crlf_line_endings(self, framing):
        assert framing.decode(b'{"id": 3, "method": "ping"}\r\n') == [{"id": 3, "method": "ping"}]

    def test_malformed_line_dropped_and_logged(self, framing, caplog):
        with caplog.at_level(logging.WARNING, logger="gemini_mcp.transport.framing"):
            messages = framing.decode(b'{not json}\n{"id": 9, "method": "ping"}\n')
        assert messages == [{"id": 9, "method": "ping"}]
        assert "unparseable" in caplog.text

    def test_non_object_dropped(self, framing, caplog):
        with caplog.at_level(logging.WARNING, logger="gemini_mcp.transport.framing"):
            messages = framing.decode(b'[1, 2, 3]\n"text"\n')
        assert messages == []
        assert "not a JSON object" in caplog.text

    def test_id_beyond_64_bits_dropped(self, framing, caplog):
        data = b'{"id": 18446744073709551616, "method": "ping"}\n{"id": -18446744073709551616, "method": "ping"}\n'
        with caplog.at_level(logging.WARNING, logger="gemini_mcp.transport.framing"):
            messages = framing.decode(data + b'{"id": 2, "method": "ping"}\n')
        assert messages == [{"id": 2, "method": "ping"}]
        assert caplog.text.count("Dropping") == 2

    @pytest.mark.parametrize("request_id", [18446744073709551615, -9223372036854775808, 1.5, 1e3])
    def test_ids_at_the_64_bit_edges_survive_round_trip(self, framing, request_id):
        (message,) = framing.decode(b'{"id": %s, "method": "ping"}\n' % str(request_id).encode())
        assert message["id"] == request_id
        assert framing.decode(framing.encode({"id": message["id"], "result": {}})) == [
            {"id": request_id, "result": {}}
        ]

    def test_finish_parses_trailing_line(self, framing):
        assert framing.decode(b'{"id": 1, "method": "ping"}') == []
        assert framing.finish() == [{"id": 1, "method": "ping"}]
        assert framing.buffered == 0

    def test_encode_is_one_line(self, framing):
        frame = framing.encode({"id": 1, "result": {"text": "line one\nline two"}})
        assert frame.endswith(b"\n")
        assert frame.count(b"\n") == 1

    def test_encode_rejects_unserializable(self, framing):
        with pytest.raises(FramingError, match="Cannot encode"):
            framing.encode({"id": 1, "result": object()})

    @pytest.mark.parametrize("response", RESPONSES)
    def test_round_trip(self, framing, response):
        assert framing.decode(framing.encode(response)) == [response]


class TestContentLengthFraming:
    @pytest.fixture
    def framing(self):
        return ContentLengthFraming()

    @staticmethod
    def frame(body: bytes) -> bytes:
        return b"Content-Length: %d\r\n\r\n" % len(body) + body

    def test_decode_single_message(self, framing):
        body = b'{"id": 1, "method": "ping"}'
        assert framing.decode(self.frame(body)) == [{"id": 1, "method": "ping"}]

    def test_decode_pipelined_messages(self, framing):
        data = self.frame(b'{"id": 1, "method": "a"}') + self.frame(b'{"id": 2, "method": "b"}')
        messages = framing.decode(data)
        assert [m["method"] for m in messages] == ["a", "b"]
        assert framing.buffered == 0

    def test_remainder_kept_for_next_chunk(self, framing):
        second = self.frame(b'{"id": 2, "method": "b"}')
        data = self.frame(b'{"id": 1, "method": "a"}') + second[:10]

        assert [m["id"] for m in framing.decode(data)] == [1]
        assert framing.buffered == 10
        assert [m["id"] for m in framing.decode(second[10:])] == [2]

    def test_body_split_across_chunks(self, framing):
        data = self.frame(b'{"id": 1, "method": "ping"}')
        header_end = data.index(b"\r\n\r\n") + 4
        assert framing.decode(data[: header_end + 5]) == []
        assert framing.decode(data[header_end + 5 :]) == [{"id": 1, "method": "ping"}]

    def test_length_counts_bytes_not_characters(self, framing):
        body = '{"id": 1, "method": "café"}'.encode()
        assert len(body) != len(body.decode())
        assert framing.decode(self.frame(body)) == [{"id": 1, "method": "café"}]

    def test_header_name_case_insensitive_and_extra_headers(self, framing):
        body = b'{"id": 1}'
        data = b"content-type: application/json\r\nCONTENT-LENGTH: %d\r\n\r\n" % len(body) + body
        assert framing.decode(data) == [{"id": 1}]

    def test_bare_newline_terminator(self, framing):
        body = b'{"id": 5}'
        assert framing.decode(b"Content-Length: %d\n\n" % len(body) + body) == [{"id": 5}]

    def test_header_without_length_resynchronizes(self, framing, caplog):
        good = self.frame(b'{"id": 2}')
        with caplog.at_level(logging.WARNING, logger="gemini_mcp.transport.framing"):
            messages = framing.decode(b"X-Junk: 1\r\n\r\n" + good)
        assert messages == [{"id": 2}]
        assert "without Content-Length" in caplog.text

    def test_malformed_body_dropped(self, framing):
        data = self.frame(b"{oops}") + self.frame(b'{"id": 3}')
        assert framing.decode(data) == [{"id": 3}]

    def test_finish_discards_partial_frame(self, framing, caplog):
        framing.decode(b"Content-Length: 100\r\n\r\n{")
        with caplog.at_level(logging.WARNING, logger="gemini_mcp.transport.framing"):
            assert framing.finish() == []
        assert framing.buffered == 0
        assert "incomplete frame" in caplog.text

    def test_encode_header(self, framing):
        frame = framing.encode({"id": 1, "result": {}})
        header, _, body = frame.partition(b"\r\n\r\n")
        assert header == b"Content-Length: %d" % len(body)

    @pytest.mark.parametrize("response", RESPONSES)
    def test_round_trip(self, framing, response):
        assert framing.decode(framing.encode(response)) == [response]

    def test_round_trip_many_frames_byte_by_byte(self, framing):
        data = b"".join(framing.encode(r) for r in RESPONSES)
        decoded = []
        for i in range(len(data)):
            decoded.extend(framing.decode(data[i : i + 1]))
        assert decoded == RESPONSES
