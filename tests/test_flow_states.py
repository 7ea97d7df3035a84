import pytest

from states import (
    CustomId,
    FlowAction,
    FlowEffect,
    FlowStateMachine,
    FlowStep,
    parse_action,
)
from utils.errors import UnrecognizedAction

TABLE = [
    (FlowStep.IDLE, FlowAction.OPEN_TICKET, FlowStep.AWAITING_FAQ_CONFIRMATION, FlowEffect.RENDER_FAQ_PROMPT),
    (FlowStep.AWAITING_FAQ_CONFIRMATION, FlowAction.FAQ_NOT_READ, FlowStep.ABORTED, FlowEffect.RENDER_READ_FAQ_FIRST),
    (FlowStep.AWAITING_FAQ_CONFIRMATION, FlowAction.FAQ_READ, FlowStep.AWAITING_SUPPORT_CATEGORY,
     FlowEffect.RENDER_CATEGORY_CHOOSER),
    (FlowStep.AWAITING_SUPPORT_CATEGORY, FlowAction.CATEGORY_OTHER, FlowStep.TICKET_CREATED,
     FlowEffect.CREATE_TICKET_CHANNEL),
    (FlowStep.AWAITING_SUPPORT_CATEGORY, FlowAction.CATEGORY_INGAME, FlowStep.AWAITING_INGAME_REPORT_CONFIRMATION,
     FlowEffect.RENDER_INGAME_REPORT_PROMPT),
    (FlowStep.AWAITING_INGAME_REPORT_CONFIRMATION, FlowAction.REPORT_NOT_FILED, FlowStep.ABORTED,
     FlowEffect.RENDER_FILE_REPORT_FIRST),
    (FlowStep.AWAITING_INGAME_REPORT_CONFIRMATION, FlowAction.REPORT_FILED, FlowStep.TICKET_CREATED,
     FlowEffect.CREATE_TICKET_CHANNEL),
]


@pytest.mark.parametrize("current, action, next_step, effect", TABLE)
def test_transition_table(current, action, next_step, effect):
    transition = FlowStateMachine.transition(current, action)
    assert transition.next_step == next_step
    assert transition.effect == effect


@pytest.mark.parametrize("current", list(FlowStep))
def test_open_ticket_restarts_from_any_step(current):
    transition = FlowStateMachine.transition(current, FlowAction.OPEN_TICKET)
    assert transition.current == FlowStep.IDLE
    assert transition.next_step == FlowStep.AWAITING_FAQ_CONFIRMATION


@pytest.mark.parametrize(
    "current, action",
    [
        (FlowStep.IDLE, FlowAction.FAQ_READ),
        (FlowStep.AWAITING_FAQ_CONFIRMATION, FlowAction.REPORT_FILED),
        (FlowStep.AWAITING_SUPPORT_CATEGORY, FlowAction.FAQ_NOT_READ),
        (FlowStep.AWAITING_INGAME_REPORT_CONFIRMATION, FlowAction.CATEGORY_OTHER),
        (FlowStep.TICKET_CREATED, FlowAction.REPORT_FILED),
        (FlowStep.ABORTED, FlowAction.FAQ_READ),
    ],
)
def test_unexpected_action_is_unrecognized(current, action):
    with pytest.raises(UnrecognizedAction):
        FlowStateMachine.transition(current, action)


def test_terminal_steps():
    assert FlowStateMachine.transition(FlowStep.AWAITING_FAQ_CONFIRMATION, FlowAction.FAQ_NOT_READ).is_terminal
    assert FlowStateMachine.transition(FlowStep.AWAITING_SUPPORT_CATEGORY, FlowAction.CATEGORY_OTHER).is_terminal
    assert not FlowStateMachine.transition(FlowStep.IDLE, FlowAction.OPEN_TICKET).is_terminal


def test_expected_actions_always_include_open_ticket():
    assert FlowStateMachine.expected_actions(FlowStep.AWAITING_SUPPORT_CATEGORY) == {
        FlowAction.OPEN_TICKET,
        FlowAction.CATEGORY_INGAME,
        FlowAction.CATEGORY_OTHER,
    }
    assert FlowStateMachine.expected_actions(FlowStep.ABORTED) == {FlowAction.OPEN_TICKET}


@pytest.mark.parametrize(
    "actions",
    [
        [FlowAction.OPEN_TICKET, FlowAction.FAQ_READ, FlowAction.CATEGORY_OTHER],
        [FlowAction.OPEN_TICKET, FlowAction.FAQ_READ, FlowAction.CATEGORY_INGAME, FlowAction.REPORT_FILED],
    ],
)
def test_both_paths_create_exactly_one_channel(actions):
    step = FlowStateMachine.initial_step()
    effects = []
    for action in actions:
        transition = FlowStateMachine.transition(step, action)
        effects.append(transition.effect)
        step = transition.next_step
    assert step == FlowStep.TICKET_CREATED
    assert effects.count(FlowEffect.CREATE_TICKET_CHANNEL) == 1


def test_parse_buttons_and_select():
    assert parse_action(CustomId.OPEN_TICKET_BTN.value) == FlowAction.OPEN_TICKET
    assert parse_action(CustomId.STEP_FAQ_YES.value) == FlowAction.FAQ_READ
    assert parse_action(CustomId.STEP_FAQ_NO.value) == FlowAction.FAQ_NOT_READ
    assert parse_action(CustomId.STEP_INGAME_REPORT_YES.value) == FlowAction.REPORT_FILED
    assert parse_action(CustomId.STEP_INGAME_REPORT_NO.value) == FlowAction.REPORT_NOT_FILED
    assert parse_action(CustomId.STEP_SUPPORT_SELECT.value, ["ingame"]) == FlowAction.CATEGORY_INGAME
    assert parse_action(CustomId.STEP_SUPPORT_SELECT.value, ["other"]) == FlowAction.CATEGORY_OTHER


@pytest.mark.parametrize(
    "custom_id, values",
    [
        (CustomId.STEP_SUPPORT_SELECT.value, []),
        (CustomId.STEP_SUPPORT_SELECT.value, ["billing"]),
        (CustomId.CLOSE_TICKET.value, []),
        ("someone_elses_button", []),
        (None, []),
    ],
)
def test_parse_rejects_unknown_controls(custom_id, values):
    with pytest.raises(UnrecognizedAction):
        parse_action(custom_id, values)
