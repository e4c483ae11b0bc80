import json

import pytest

from src.attendease.core.envelope import classify_envelope, extract_payload, extract_record
from src.attendease.core.records import AttendanceReport


def test_double_encoded_result_is_unwrapped():
    inner = {"subject": "DBMS", "attendance_percentage": 86.7}
    envelope = {"response": json.dumps({"result": json.dumps(inner)})}

    assert extract_payload(envelope) == inner
    assert classify_envelope(envelope).kind == "nested_result"


def test_response_encoded_twice_is_unwrapped():
    inner = {"subject": "OS"}
    envelope = {"response": json.dumps(json.dumps({"result": inner}))}

    assert extract_payload(envelope) == inner


def test_object_result_without_encoding():
    inner = {"student_name": "Rahul Sharma"}
    assert extract_payload({"response": {"result": inner}}) == inner


def test_response_without_result_falls_back_to_response():
    payload = {"alert_date": "2025-02-21", "alerts": []}
    shape = classify_envelope({"response": payload})

    assert shape.kind == "bare_payload"
    assert shape.payload == payload
    assert extract_payload({"response": payload}) is payload


def test_undecodable_result_text_falls_back_to_response_mapping():
    envelope = {"response": {"result": "The agent said hello", "status": "done"}}

    assert extract_payload(envelope) == {"result": "The agent said hello", "status": "done"}


def test_list_result_is_not_a_payload():
    envelope = {"response": {"result": [1, 2, 3]}}

    shape = classify_envelope(envelope)
    assert shape.kind == "bare_payload"
    assert shape.payload == {"result": [1, 2, 3]}


@pytest.mark.parametrize(
    "envelope",
    [
        None,
        {},
        {"response": None},
        {"response": ""},
        [],
        "response",
        42,
    ],
)
def test_missing_envelope_or_response_is_absent(envelope):
    assert extract_payload(envelope) is None
    assert classify_envelope(envelope).kind == "missing"


@pytest.mark.parametrize(
    "text",
    ["not json", "{", "{'single': 'quotes'}", "[1, 2", "\x00\x01", "]]]"],
)
def test_malformed_response_text_returns_absent(text):
    assert extract_payload({"response": text}) is None
    assert classify_envelope({"response": text}).kind == "undecodable"


@pytest.mark.parametrize("response", ["[1, 2, 3]", "42", "null", "true", [1, 2], 3.5, False])
def test_non_mapping_response_is_unusable(response):
    assert extract_payload({"response": response}) is None


def test_deeply_nested_text_does_not_raise():
    deep = "[" * 100000 + "]" * 100000
    assert extract_payload({"response": deep}) is None
    assert extract_payload({"response": json.dumps({"result": deep})}) == {"result": deep}


def test_extract_record_builds_typed_record():
    envelope = {
        "response": '{"result": "{\\"subject\\":\\"DBMS\\",\\"attendance_percentage\\":86.7}"}'
    }
    report = extract_record(envelope, AttendanceReport)

    assert isinstance(report, AttendanceReport)
    assert report.subject == "DBMS"
    assert report.attendance_percentage == 86.7
    assert report.total_students is None
    assert report.absentee_list is None
    assert report.report_summary is None


def test_extract_record_absent_for_bad_envelope():
    assert extract_record({"response": "nope"}, AttendanceReport) is None
