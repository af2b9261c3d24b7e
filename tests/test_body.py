from http_vcr.body import BinaryBody, TextBody, from_bytes, to_bytes


def test_utf8_bytes_become_text():
    body = from_bytes("héllo wörld".encode("utf-8"))
    assert body == TextBody(text="héllo wörld")


def test_empty_bytes_become_empty_text():
    assert from_bytes(b"") == TextBody(text="")


def test_invalid_utf8_is_kept_as_binary():
    data = b"\x89PNG\r\n\x1a\n\x00\xff"
    body = from_bytes(data)
    assert body == BinaryBody(data=data)
    assert to_bytes(body) == data


def test_truncated_multibyte_sequence_is_binary():
    # first byte of a two-byte UTF-8 sequence with the continuation byte missing
    data = "é".encode("utf-8")[:1]
    assert isinstance(from_bytes(data), BinaryBody)


def test_text_round_trips_to_original_bytes():
    data = "line one\r\nline two\n\ttabbed ✓".encode("utf-8")
    assert to_bytes(from_bytes(data)) == data
