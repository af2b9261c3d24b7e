"""
Converts request/response pairs to and from the cassette YAML format.

Each pair is a single YAML document holding a two-item list: a mapping tagged "Request"
followed by a mapping tagged "Response". Bodies are tagged too ("Text" or "Binary") so that
decoding never has to guess from the shape of the value.
Documents in a cassette are separated by a "---" line.
"""

from http import HTTPMethod
from typing import Any, Iterable

import yaml

from http_vcr.body import BinaryBody, Body, TextBody
from http_vcr.errors import CassetteParseError
from http_vcr.models import VcrRequest, VcrResponse

DOCUMENT_SEPARATOR = "\n---\n"

REQUEST_TAG = "Request"
RESPONSE_TAG = "Response"
TEXT_TAG = "Text"
BINARY_TAG = "Binary"


def _encode_body(body: Body) -> dict[str, Any]:
    if isinstance(body, TextBody):
        return {TEXT_TAG: body.text}
    return {BINARY_TAG: body.data}


def _encode_headers(headers: dict[str, list[str]]) -> dict[str, list[str]]:
    return {name: list(values) for name, values in headers.items()}


def encode(request: VcrRequest, response: VcrResponse) -> list[dict[str, Any]]:
    encoded_request = {
        "method": request.method.value,
        "url": request.url,
        "headers": _encode_headers(request.headers),
        "body": _encode_body(request.body),
    }
    encoded_response: dict[str, Any] = {"status": response.status}
    if response.version is not None:
        encoded_response["version"] = response.version
    encoded_response["headers"] = _encode_headers(response.headers)
    encoded_response["body"] = _encode_body(response.body)

    return [{REQUEST_TAG: encoded_request}, {RESPONSE_TAG: encoded_response}]


# PyYAML folds these to plain line breaks when reading plain or single-quoted scalars
_UNICODE_LINE_BREAKS = ("\x85", "\u2028", "\u2029")


class _CassetteDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if any(ch in data for ch in _UNICODE_LINE_BREAKS):
        # double quoted scalars write them as escapes
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style='"')
    return dumper.represent_str(data)


_CassetteDumper.add_representer(str, _represent_str)


def dump_document(request: VcrRequest, response: VcrResponse) -> str:
    return yaml.dump(encode(request, response), Dumper=_CassetteDumper, sort_keys=False, allow_unicode=True)


def encode_stream(pairs: Iterable[tuple[VcrRequest, VcrResponse]]) -> str:
    return DOCUMENT_SEPARATOR.join(dump_document(request, response) for request, response in pairs)


def _untag(item: Any, tag: str) -> dict[str, Any]:
    if not isinstance(item, dict) or list(item.keys()) != [tag]:
        raise CassetteParseError(f"Expected a mapping tagged '{tag}', found: {item!r}")
    value = item[tag]
    if not isinstance(value, dict):
        raise CassetteParseError(f"'{tag}' must be a mapping, found: {value!r}")
    return value


def _require(mapping: dict[str, Any], key: str, expected_type: type, owner: str) -> Any:
    if key not in mapping:
        raise CassetteParseError(f"{owner} is missing '{key}'")
    value = mapping[key]
    # bool is a subclass of int but never a valid status code
    if not isinstance(value, expected_type) or isinstance(value, bool):
        raise CassetteParseError(f"{owner} '{key}' must be of type {expected_type.__name__}, found: {value!r}")
    return value


def _decode_headers(value: Any, owner: str) -> dict[str, list[str]]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise CassetteParseError(f"{owner} headers must be a mapping, found: {value!r}")
    headers = {}
    for name, values in value.items():
        if not isinstance(name, str) or not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise CassetteParseError(f"{owner} header {name!r} must map to a list of strings, found: {values!r}")
        headers[name] = list(values)
    return headers


def _decode_body(value: Any, owner: str) -> Body:
    if isinstance(value, dict) and len(value) == 1:
        if TEXT_TAG in value and isinstance(value[TEXT_TAG], str):
            return TextBody(text=value[TEXT_TAG])
        if BINARY_TAG in value and isinstance(value[BINARY_TAG], bytes):
            return BinaryBody(data=value[BINARY_TAG])
    raise CassetteParseError(f"{owner} body must be tagged '{TEXT_TAG}' or '{BINARY_TAG}', found: {value!r}")


def _decode_request(value: dict[str, Any]) -> VcrRequest:
    method = _require(value, "method", str, REQUEST_TAG)
    try:
        http_method = HTTPMethod(method)
    except ValueError as e:
        raise CassetteParseError(f"Unknown HTTP method: {method!r}") from e

    return VcrRequest(
        method=http_method,
        url=_require(value, "url", str, REQUEST_TAG),
        headers=_decode_headers(value.get("headers"), REQUEST_TAG),
        body=_decode_body(value.get("body"), REQUEST_TAG),
    )


def _decode_response(value: dict[str, Any]) -> VcrResponse:
    version = value.get("version")
    if version is not None and not isinstance(version, str):
        raise CassetteParseError(f"{RESPONSE_TAG} 'version' must be a string, found: {version!r}")

    return VcrResponse(
        status=_require(value, "status", int, RESPONSE_TAG),
        version=version,
        headers=_decode_headers(value.get("headers"), RESPONSE_TAG),
        body=_decode_body(value.get("body"), RESPONSE_TAG),
    )


def decode(document: Any) -> tuple[VcrRequest, VcrResponse]:
    if not isinstance(document, list) or len(document) != 2:
        raise CassetteParseError(f"Expected a [{REQUEST_TAG}, {RESPONSE_TAG}] pair, found: {document!r}")

    request = _decode_request(_untag(document[0], REQUEST_TAG))
    response = _decode_response(_untag(document[1], RESPONSE_TAG))
    return request, response


def decode_stream(text: str) -> list[tuple[VcrRequest, VcrResponse]]:
    pairs = []
    for index, chunk in enumerate(text.split(DOCUMENT_SEPARATOR)):
        if not chunk.strip():
            continue
        try:
            document = yaml.safe_load(chunk)
        except yaml.YAMLError as e:
            raise CassetteParseError(f"Invalid YAML: {e}", index=index, document=chunk) from e

        # a lone "---" line (e.g. a cassette holding only the leading separator)
        if document is None:
            continue

        try:
            pairs.append(decode(document))
        except CassetteParseError as e:
            raise CassetteParseError(e.reason, index=index, document=chunk) from e
    return pairs
