"""Request parameters handed to state handlers and callbacks."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from twism.errors import InvalidRequestError

ModelT = TypeVar("ModelT", bound=BaseModel)


class TranscriptionStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"


class _TwilioModel(BaseModel):
    """Parsed from Twilio's form fields, keyed by their wire names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class CallParameters(_TwilioModel):
    call_sid: str | None = Field(default=None, alias="CallSid")
    account_sid: str | None = Field(default=None, alias="AccountSid")
    from_number: str | None = Field(default=None, alias="From")
    to_number: str | None = Field(default=None, alias="To")
    call_status: str | None = Field(default=None, alias="CallStatus")
    api_version: str | None = Field(default=None, alias="ApiVersion")
    direction: str | None = Field(default=None, alias="Direction")
    forwarded_from: str | None = Field(default=None, alias="ForwardedFrom")
    caller_name: str | None = Field(default=None, alias="CallerName")


class GatherParameters(_TwilioModel):
    digits: str | None = Field(default=None, alias="Digits")


class RecordParameters(_TwilioModel):
    recording_url: str | None = Field(default=None, alias="RecordingUrl")
    recording_duration: int | None = Field(default=None, alias="RecordingDuration")
    digits: str | None = Field(default=None, alias="Digits")

    @property
    def is_hangup(self) -> bool:
        """Twilio reports ``Digits=hangup`` when the caller hung up while recording."""

        return self.digits == "hangup"


class TranscriptionParameters(_TwilioModel):
    transcription_sid: str | None = Field(default=None, alias="TranscriptionSid")
    transcription_text: str | None = Field(default=None, alias="TranscriptionText")
    transcription_status: TranscriptionStatus | None = Field(default=None, alias="TranscriptionStatus")
    transcription_url: str | None = Field(default=None, alias="TranscriptionUrl")
    recording_sid: str | None = Field(default=None, alias="RecordingSid")
    recording_url: str | None = Field(default=None, alias="RecordingUrl")


class DialParameters(_TwilioModel):
    dial_call_status: str | None = Field(default=None, alias="DialCallStatus")
    dial_call_sid: str | None = Field(default=None, alias="DialCallSid")
    dial_call_duration: int | None = Field(default=None, alias="DialCallDuration")
    recording_url: str | None = Field(default=None, alias="RecordingUrl")


class SmsParameters(_TwilioModel):
    sms_sid: str | None = Field(default=None, alias="SmsSid")
    sms_status: str | None = Field(default=None, alias="SmsStatus")


class EnqueueResultParameters(_TwilioModel):
    queue_result: str | None = Field(default=None, alias="QueueResult")
    queue_sid: str | None = Field(default=None, alias="QueueSid")
    queue_time: int | None = Field(default=None, alias="QueueTime")


class EnqueueWaitParameters(_TwilioModel):
    queue_position: int | None = Field(default=None, alias="QueuePosition")
    queue_sid: str | None = Field(default=None, alias="QueueSid")
    queue_time: int | None = Field(default=None, alias="QueueTime")
    avg_queue_time: int | None = Field(default=None, alias="AvgQueueTime")
    current_queue_size: int | None = Field(default=None, alias="CurrentQueueSize")
    max_queue_size: int | None = Field(default=None, alias="MaxQueueSize")


class QueueParameters(_TwilioModel):
    """Sent to a Queue noun's ``url`` when a caller is dequeued."""

    queue_sid: str | None = Field(default=None, alias="QueueSid")
    call_sid: str | None = Field(default=None, alias="CallSid")
    queue_time: int | None = Field(default=None, alias="QueueTime")
    dequeueing_call_sid: str | None = Field(default=None, alias="DequeueingCallSid")


class TwilioParameters:
    """Everything a handler sees for one webhook request.

    ``session`` is the mutable per-call parameter map; whatever it holds when
    the handler returns is signed into the outgoing cookie.
    """

    def __init__(
        self,
        request_params: Mapping[str, Any] | None = None,
        session: dict[str, str] | None = None,
    ) -> None:
        self.request_params: dict[str, Any] = dict(request_params or {})
        self.session: dict[str, str] = session if session is not None else {}
        self._views: dict[type[BaseModel], BaseModel] = {}

    def _view(self, model: type[ModelT]) -> ModelT:
        view = self._views.get(model)
        if view is None:
            try:
                view = model.model_validate(self.request_params)
            except ValidationError as exc:
                raise InvalidRequestError(
                    f"Invalid {model.__name__}: {exc.error_count()} bad field(s)."
                ) from exc
            self._views[model] = view
        return view  # type: ignore[return-value]

    def get(self, name: str, default: Any = None) -> Any:
        return self.request_params.get(name, default)

    def call(self) -> CallParameters:
        return self._view(CallParameters)

    def gather(self) -> GatherParameters:
        return self._view(GatherParameters)

    def record(self) -> RecordParameters:
        return self._view(RecordParameters)

    def transcription(self) -> TranscriptionParameters:
        return self._view(TranscriptionParameters)

    def dial(self) -> DialParameters:
        return self._view(DialParameters)

    def sms(self) -> SmsParameters:
        return self._view(SmsParameters)

    def enqueue_result(self) -> EnqueueResultParameters:
        return self._view(EnqueueResultParameters)

    def enqueue_wait(self) -> EnqueueWaitParameters:
        return self._view(EnqueueWaitParameters)

    def queue(self) -> QueueParameters:
        return self._view(QueueParameters)
