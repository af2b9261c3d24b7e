"""
Redactors transform a captured request or response before it is matched (replay) or stored (record).

Use them to scrub values that are sensitive (session keys, cookies) or that change between runs
(timestamps, request ids) so that recordings stay stable and comparable.
"""

import copy
import dataclasses
from typing import Callable, Iterable, Protocol, TypeVar

from http_vcr.models import VcrRequest, VcrResponse

RecordT = TypeVar("RecordT", VcrRequest, VcrResponse)


class Redactor(Protocol):
    def transform(self, record: RecordT) -> RecordT: ...


class HeaderRedactor:
    """
    Replaces the values of the named headers with a single placeholder value.
    Header names are compared case-insensitively; headers that aren't present are left out.
    """

    def __init__(self, names: Iterable[str], placeholder: str = "(redacted)"):
        self._names = {name.lower() for name in names}
        self._placeholder = placeholder

    def transform(self, record: RecordT) -> RecordT:
        headers = {
            name: [self._placeholder] if name.lower() in self._names else list(values)
            for name, values in record.headers.items()
        }
        return dataclasses.replace(record, headers=headers)


class CallableRedactor:
    """
    Wraps a plain function as a redactor.

    The function receives a copy of the record and can either return a new record
    or modify the copy in place and return None.
    """

    def __init__(self, func: Callable[[RecordT], RecordT | None]):
        self._func = func

    def transform(self, record: RecordT) -> RecordT:
        record_copy = copy.deepcopy(record)
        result = self._func(record_copy)
        return record_copy if result is None else result
