"""Unit tests for domain events."""

from uuid import uuid4

import pydantic
import pytest

from warden.domain.model import build_event, parse_event
from warden.domain.model.event import AuthLocalCreatedEvent, EVENT_REGISTRY
from warden.domain.value import EventName, UserId


class TestBuildEvent:
    """Tests for build_event."""

    def test_every_name_has_a_variant(self):
        assert set(EVENT_REGISTRY) == set(EventName)

    def test_builds_the_variant_matching_the_name(self):
        user_id = UserId(uuid4())
        model_id = uuid4()

        event = build_event(
            EventName.AUTH_LOCAL_CREATED, user_id, model_id, {"email": "a@b.co", "username": "ab"}
        )

        assert isinstance(event, AuthLocalCreatedEvent)
        assert event.event_name == EventName.AUTH_LOCAL_CREATED
        assert event.metadata.email == "a@b.co"
        assert event.model_id == model_id

    def test_events_without_payload_accept_no_metadata(self):
        event = build_event(EventName.AUTH_LOCAL_PASSWORD_RESETED, UserId(uuid4()), uuid4())

        assert event.event_name == EventName.AUTH_LOCAL_PASSWORD_RESETED

    def test_rejects_payload_of_another_variant(self):
        with pytest.raises(TypeError):
            build_event(EventName.AUTH_LOCAL_CREATED, UserId(uuid4()), uuid4(), {"unexpected": 1})

    def test_rejects_missing_required_payload(self):
        with pytest.raises(TypeError):
            build_event(EventName.AUTH_LOCAL_PASSWORD_RESET_SENT, UserId(uuid4()), uuid4())

    def test_rejects_unknown_names(self):
        with pytest.raises(TypeError):
            build_event("auth.unknown", UserId(uuid4()), uuid4())  # type: ignore[arg-type]


class TestParseEvent:
    """Tests for parse_event."""

    def test_parses_a_queue_payload_back_into_its_variant(self):
        event = build_event(
            EventName.AUTH_LOCAL_PASSWORD_RESET,
            UserId(uuid4()),
            uuid4(),
            {"email": "a@b.co"},
        )

        parsed = parse_event(event.model_dump(mode="json"))

        assert parsed == event

    def test_rejects_unknown_names(self):
        with pytest.raises(pydantic.ValidationError):
            parse_event({"name": "auth.unknown", "user_id": str(uuid4()), "model_id": str(uuid4())})
