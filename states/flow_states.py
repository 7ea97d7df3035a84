"""
Ticket-opening flow
Pure decision logic: current step + action -> next step + effect. No I/O.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from utils.errors import UnrecognizedAction


class CustomId(str, Enum):
    """Component ids delivered back by the platform"""
    OPEN_TICKET_BTN = "open_ticket_btn"
    STEP_FAQ_YES = "step_faq_yes"
    STEP_FAQ_NO = "step_faq_no"
    STEP_SUPPORT_SELECT = "step_support_select"  # values: ingame / other
    STEP_INGAME_REPORT_YES = "step_ingame_report_yes"
    STEP_INGAME_REPORT_NO = "step_ingame_report_no"
    CLOSE_TICKET = "close_ticket_btn"


class SupportCategory(str, Enum):
    INGAME = "ingame"
    OTHER = "other"


class FlowStep(str, Enum):
    """
    Flow steps

    IDLE → AWAITING_FAQ_CONFIRMATION → AWAITING_SUPPORT_CATEGORY
        → [AWAITING_INGAME_REPORT_CONFIRMATION] → TICKET_CREATED
    Any "no" answer ends in ABORTED.
    """
    IDLE = "idle"
    AWAITING_FAQ_CONFIRMATION = "awaiting_faq_confirmation"
    AWAITING_SUPPORT_CATEGORY = "awaiting_support_category"
    AWAITING_INGAME_REPORT_CONFIRMATION = "awaiting_ingame_report_confirmation"
    TICKET_CREATED = "ticket_created"
    ABORTED = "aborted"


class FlowAction(str, Enum):
    OPEN_TICKET = "open_ticket"
    FAQ_READ = "faq_read"
    FAQ_NOT_READ = "faq_not_read"
    CATEGORY_INGAME = "category_ingame"
    CATEGORY_OTHER = "category_other"
    REPORT_FILED = "report_filed"
    REPORT_NOT_FILED = "report_not_filed"


class FlowEffect(str, Enum):
    RENDER_FAQ_PROMPT = "render_faq_prompt"
    RENDER_READ_FAQ_FIRST = "render_read_faq_first"
    RENDER_CATEGORY_CHOOSER = "render_category_chooser"
    RENDER_INGAME_REPORT_PROMPT = "render_ingame_report_prompt"
    RENDER_FILE_REPORT_FIRST = "render_file_report_first"
    CREATE_TICKET_CHANNEL = "create_ticket_channel"


TERMINAL_STEPS = frozenset({FlowStep.TICKET_CREATED, FlowStep.ABORTED})


@dataclass(frozen=True)
class Transition:
    current: FlowStep
    action: FlowAction
    next_step: FlowStep
    effect: FlowEffect

    @property
    def is_terminal(self) -> bool:
        return self.next_step in TERMINAL_STEPS


_BUTTON_ACTIONS: dict[str, FlowAction] = {
    CustomId.OPEN_TICKET_BTN.value: FlowAction.OPEN_TICKET,
    CustomId.STEP_FAQ_YES.value: FlowAction.FAQ_READ,
    CustomId.STEP_FAQ_NO.value: FlowAction.FAQ_NOT_READ,
    CustomId.STEP_INGAME_REPORT_YES.value: FlowAction.REPORT_FILED,
    CustomId.STEP_INGAME_REPORT_NO.value: FlowAction.REPORT_NOT_FILED,
}

_CATEGORY_ACTIONS: dict[str, FlowAction] = {
    SupportCategory.INGAME.value: FlowAction.CATEGORY_INGAME,
    SupportCategory.OTHER.value: FlowAction.CATEGORY_OTHER,
}


def parse_action(custom_id: Optional[str], values: Sequence[str] = ()) -> FlowAction:
    """Map a component id (and select values) to a flow action"""
    if custom_id in _BUTTON_ACTIONS:
        return _BUTTON_ACTIONS[custom_id]
    if custom_id == CustomId.STEP_SUPPORT_SELECT.value:
        choice = values[0] if values else None
        if choice in _CATEGORY_ACTIONS:
            return _CATEGORY_ACTIONS[choice]
        raise UnrecognizedAction(custom_id, f"unknown support category {choice!r}")
    raise UnrecognizedAction(custom_id, "not a flow control")


class FlowStateMachine:
    """Validate and resolve flow transitions"""

    _TRANSITIONS: dict[tuple[FlowStep, FlowAction], tuple[FlowStep, FlowEffect]] = {
        (FlowStep.IDLE, FlowAction.OPEN_TICKET):
            (FlowStep.AWAITING_FAQ_CONFIRMATION, FlowEffect.RENDER_FAQ_PROMPT),
        (FlowStep.AWAITING_FAQ_CONFIRMATION, FlowAction.FAQ_NOT_READ):
            (FlowStep.ABORTED, FlowEffect.RENDER_READ_FAQ_FIRST),
        (FlowStep.AWAITING_FAQ_CONFIRMATION, FlowAction.FAQ_READ):
            (FlowStep.AWAITING_SUPPORT_CATEGORY, FlowEffect.RENDER_CATEGORY_CHOOSER),
        (FlowStep.AWAITING_SUPPORT_CATEGORY, FlowAction.CATEGORY_OTHER):
            (FlowStep.TICKET_CREATED, FlowEffect.CREATE_TICKET_CHANNEL),
        (FlowStep.AWAITING_SUPPORT_CATEGORY, FlowAction.CATEGORY_INGAME):
            (FlowStep.AWAITING_INGAME_REPORT_CONFIRMATION, FlowEffect.RENDER_INGAME_REPORT_PROMPT),
        (FlowStep.AWAITING_INGAME_REPORT_CONFIRMATION, FlowAction.REPORT_NOT_FILED):
            (FlowStep.ABORTED, FlowEffect.RENDER_FILE_REPORT_FIRST),
        (FlowStep.AWAITING_INGAME_REPORT_CONFIRMATION, FlowAction.REPORT_FILED):
            (FlowStep.TICKET_CREATED, FlowEffect.CREATE_TICKET_CHANNEL),
    }

    @classmethod
    def initial_step(cls) -> FlowStep:
        return FlowStep.IDLE

    @classmethod
    def expected_actions(cls, current: FlowStep) -> set[FlowAction]:
        actions = {action for step, action in cls._TRANSITIONS if step == current}
        actions.add(FlowAction.OPEN_TICKET)
        return actions

    @classmethod
    def transition(cls, current: FlowStep, action: FlowAction) -> Transition:
        """
        Resolve the next step for an action

        open-ticket restarts the flow from IDLE whatever the current step is.
        Anything else must match the transition table or UnrecognizedAction is raised.
        """
        if action is FlowAction.OPEN_TICKET:
            current = FlowStep.IDLE
        resolved = cls._TRANSITIONS.get((current, action))
        if resolved is None:
            raise UnrecognizedAction(action.value, f"not expected in step {current.value}")
        next_step, effect = resolved
        return Transition(current=current, action=action, next_step=next_step, effect=effect)
