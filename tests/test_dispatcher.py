import logging

import pytest

from messenger.protocol import MessageType
from messenger.routing import CommandDispatcher, DispatchEventType, TypeDispatcher, do_nothing
from messenger.routing.dispatcher import _HeaderDispatcher


def test_known_type_invokes_only_its_handler(recorder, make_envelope):
    h1, h2, hd, non_typed = recorder("h1"), recorder("h2"), recorder("hd"), recorder("non_typed")
    dispatcher = TypeDispatcher({"A": h1, "B": h2}, default_handler=hd, non_typed_handler=non_typed)

    envelope = make_envelope(headers={"Message-Type": "A"})
    dispatcher.dispatch(envelope)

    assert h1.received == [envelope]
    assert (h2.calls, hd.calls, non_typed.calls) == (0, 0, 0)


def test_unknown_type_invokes_only_the_default(recorder, make_envelope):
    h1, hd, non_typed = recorder("h1"), recorder("hd"), recorder("non_typed")
    dispatcher = TypeDispatcher({"A": h1}, default_handler=hd, non_typed_handler=non_typed)

    envelope = make_envelope(headers={"Message-Type": "C"})
    dispatcher(envelope)

    assert hd.received == [envelope]
    assert (h1.calls, non_typed.calls) == (0, 0)


def test_missing_type_invokes_the_non_typed_handler(recorder, make_envelope):
    h1, hd, non_typed = recorder("h1"), recorder("hd"), recorder("non_typed")
    dispatcher = TypeDispatcher({"A": h1}, default_handler=hd, non_typed_handler=non_typed)

    envelope = make_envelope(headers={"Trace": "t-1"})
    dispatcher(envelope)

    assert non_typed.received == [envelope]
    assert (h1.calls, hd.calls) == (0, 0)


def test_lookup_is_exact(recorder, make_envelope):
    simple, hd = recorder("simple"), recorder("hd")
    dispatcher = TypeDispatcher(simple=simple, default_handler=hd)

    dispatcher(make_envelope(headers={"Message-Type": "simple"}))
    dispatcher(make_envelope(headers={"Message-Type": "Simple "}))

    assert simple.calls == 0
    assert hd.calls == 2


def test_shortcuts_and_enum_keys(recorder, make_envelope):
    simple, reply, command, custom = recorder(), recorder(), recorder(), recorder()
    dispatcher = TypeDispatcher(
        {MessageType.SIMPLE: custom, "Event": custom},
        simple=simple,
        reply=reply,
        command=command,
    )

    assert set(dispatcher.handlers) == {"Simple", "Reply", "Command", "Event"}
    for message_type in ("Simple", "Reply", "Command", "Event"):
        dispatcher(make_envelope(headers={"Message-Type": message_type}))

    assert (simple.calls, reply.calls, command.calls, custom.calls) == (1, 1, 1, 1)


def test_defaults_do_nothing(make_envelope):
    dispatcher = TypeDispatcher()
    assert dispatcher.default_handler is do_nothing
    assert dispatcher.non_typed_handler is do_nothing
    dispatcher(make_envelope())
    dispatcher(make_envelope(headers={"Message-Type": "Simple"}))


def test_table_is_frozen_at_construction(recorder, make_envelope):
    h1, h2, hd = recorder(), recorder(), recorder()
    table = {"A": h1}
    dispatcher = TypeDispatcher(table, default_handler=hd)
    table["A"] = h2
    table["B"] = h2

    dispatcher(make_envelope(headers={"Message-Type": "A"}))
    dispatcher(make_envelope(headers={"Message-Type": "B"}))

    assert (h1.calls, h2.calls, hd.calls) == (1, 0, 1)
    with pytest.raises(TypeError):
        dispatcher.handlers["C"] = h2


def test_handler_exceptions_propagate(make_envelope):
    def explode(envelope):
        raise RuntimeError("handler failed")

    dispatcher = TypeDispatcher(simple=explode)
    with pytest.raises(RuntimeError, match="handler failed"):
        dispatcher(make_envelope(headers={"Message-Type": "Simple"}))


def test_null_envelope_is_skipped(recorder):
    hd, non_typed = recorder(), recorder()
    TypeDispatcher(default_handler=hd, non_typed_handler=non_typed)(None)
    CommandDispatcher(default_handler=hd)(None)
    assert (hd.calls, non_typed.calls) == (0, 0)


def test_command_dispatch(recorder, make_envelope):
    reboot, hd = recorder("reboot"), recorder("hd")
    commands = CommandDispatcher({"reboot": reboot}, default_handler=hd)

    known = make_envelope(headers={"Message-Type": "Command", "Command": "reboot"})
    unknown = make_envelope(headers={"Message-Type": "Command", "Command": "halt"})
    commands(known)
    commands(unknown)

    assert reboot.received == [known]
    assert hd.received == [unknown]


def test_missing_command_goes_to_the_command_level_default(recorder, make_envelope, events):
    reboot, command_default = recorder(), recorder()
    type_default, non_typed = recorder(), recorder()
    dispatcher = TypeDispatcher(
        command=CommandDispatcher(
            {"reboot": reboot},
            default_handler=command_default,
            observer=events.append,
        ),
        default_handler=type_default,
        non_typed_handler=non_typed,
    )

    envelope = make_envelope(id="m9", headers={"Message-Type": "Command"})
    dispatcher(envelope)

    assert command_default.received == [envelope]
    assert (reboot.calls, type_default.calls, non_typed.calls) == (0, 0, 0)
    assert [event.event_type for event in events] == [DispatchEventType.MISSING_COMMAND]
    assert events[0].envelope_id == "m9"
    assert events[0].header == "Command"


def test_nested_dispatch(recorder, make_envelope):
    reboot, simple = recorder(), recorder()
    dispatcher = TypeDispatcher(simple=simple, command=CommandDispatcher({"reboot": reboot}))

    dispatcher(make_envelope(headers={"Message-Type": "Command", "Command": "reboot"}))
    dispatcher(make_envelope(headers={"Message-Type": "Simple", "Command": "reboot"}))

    assert (reboot.calls, simple.calls) == (1, 1)


def test_observer_receives_type_anomalies(make_envelope, events):
    dispatcher = TypeDispatcher(simple=do_nothing, observer=events.append, name="inbox")

    dispatcher(make_envelope(id="m1"))
    dispatcher(make_envelope(id="m2", headers={"Message-Type": "Event"}))
    dispatcher(make_envelope(id="m3", headers={"Message-Type": "Simple"}))

    assert [(e.event_type, e.envelope_id, e.value) for e in events] == [
        (DispatchEventType.NON_TYPED, "m1", None),
        (DispatchEventType.UNKNOWN_TYPE, "m2", "Event"),
    ]
    assert {e.component for e in events} == {"inbox"}
    assert {e.header for e in events} == {"Message-Type"}


def test_unknown_command_event(make_envelope, events):
    commands = CommandDispatcher(observer=events.append)
    commands(make_envelope(headers={"Message-Type": "Command", "Command": "halt"}))
    assert events[0].event_type == DispatchEventType.UNKNOWN_COMMAND
    assert events[0].value == "halt"
    assert events[0].component == "CommandDispatcher"


def test_anomalies_are_logged_as_warnings(make_envelope, caplog):
    dispatcher = TypeDispatcher(name="inbox")
    with caplog.at_level(logging.WARNING, logger="messenger.routing.dispatcher"):
        dispatcher(make_envelope(id="m1"))
    assert "inbox" in caplog.text
    assert "m1" in caplog.text
    assert "dispatch.non_typed" in caplog.text


def test_header_dispatcher_base_is_abstract():
    with pytest.raises(TypeError):
        _HeaderDispatcher({}, do_nothing, None, None)


def test_handler_for(recorder):
    h1, hd = recorder(), recorder()
    dispatcher = CommandDispatcher({"reboot": h1}, default_handler=hd)
    assert dispatcher.handler_for("reboot") is h1
    assert dispatcher.handler_for("halt") is hd
