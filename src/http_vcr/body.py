from dataclasses import dataclass


@dataclass(frozen=True)
class TextBody:
    text: str


@dataclass(frozen=True)
class BinaryBody:
    data: bytes


# If the body is valid UTF-8 it's much nicer to store it as text (easier to read and edit in a cassette),
# otherwise we keep the exact bytes
Body = TextBody | BinaryBody


def from_bytes(data: bytes) -> Body:
    try:
        return TextBody(text=data.decode("utf-8"))
    except UnicodeDecodeError:
        return BinaryBody(data=bytes(data))


def to_bytes(body: Body) -> bytes:
    if isinstance(body, TextBody):
        return body.text.encode("utf-8")
    return body.data
