from __future__ import annotations

import pytest

from twism.errors import InvalidRequestError
from twism.parameters import TranscriptionStatus, TwilioParameters


def test_call_fields_use_wire_names():
    call = TwilioParameters({"CallSid": "CA1", "From": "+4179", "To": "+4144", "CallStatus": "ringing"}).call()

    assert call.call_sid == "CA1"
    assert call.from_number == "+4179"
    assert call.to_number == "+4144"
    assert call.call_status == "ringing"


def test_transcription_status_is_parsed_to_enum():
    transcription = TwilioParameters(
        {
            "TranscriptionSid": "TR1",
            "TranscriptionText": "hello there",
            "TranscriptionStatus": "completed",
            "RecordingUrl": "http://rec/1",
        }
    ).transcription()

    assert transcription.transcription_sid == "TR1"
    assert transcription.transcription_text == "hello there"
    assert transcription.transcription_status is TranscriptionStatus.COMPLETED
    assert transcription.recording_url == "http://rec/1"


def test_dial_duration_is_coerced_to_int():
    dial = TwilioParameters({"DialCallStatus": "completed", "DialCallSid": "CA2", "DialCallDuration": "12"}).dial()

    assert dial.dial_call_status == "completed"
    assert dial.dial_call_sid == "CA2"
    assert dial.dial_call_duration == 12


def test_sms_fields():
    sms = TwilioParameters({"SmsSid": "SM1", "SmsStatus": "sent"}).sms()

    assert (sms.sms_sid, sms.sms_status) == ("SM1", "sent")


def test_enqueue_result_and_wait_views():
    params = TwilioParameters(
        {"QueueResult": "bridged", "QueueSid": "QU1", "QueueTime": "30", "QueuePosition": "2", "MaxQueueSize": "100"}
    )

    result = params.enqueue_result()
    wait = params.enqueue_wait()

    assert (result.queue_result, result.queue_sid, result.queue_time) == ("bridged", "QU1", 30)
    assert wait.queue_position == 2
    assert wait.max_queue_size == 100


def test_dequeue_view():
    queue = TwilioParameters(
        {"QueueSid": "QU1", "CallSid": "CA3", "QueueTime": "7", "DequeueingCallSid": "CA4"}
    ).queue()

    assert queue.queue_sid == "QU1"
    assert queue.call_sid == "CA3"
    assert queue.queue_time == 7
    assert queue.dequeueing_call_sid == "CA4"


def test_record_view_reports_hangup():
    record = TwilioParameters({"Digits": "hangup", "RecordingDuration": "4"}).record()

    assert record.is_hangup
    assert record.recording_duration == 4


def test_absent_fields_are_none():
    assert TwilioParameters().transcription().transcription_status is None


def test_non_numeric_field_is_a_bad_request():
    params = TwilioParameters({"QueuePosition": "unknown"})

    with pytest.raises(InvalidRequestError) as excinfo:
        params.enqueue_wait()

    assert excinfo.value.status_code == 400


def test_unknown_transcription_status_is_a_bad_request():
    with pytest.raises(InvalidRequestError):
        TwilioParameters({"TranscriptionStatus": "maybe"}).transcription()
