from states.flow_states import (
    CustomId,
    FlowAction,
    FlowEffect,
    FlowStateMachine,
    FlowStep,
    SupportCategory,
    TERMINAL_STEPS,
    Transition,
    parse_action,
)

__all__ = [
    "CustomId",
    "FlowAction",
    "FlowEffect",
    "FlowStateMachine",
    "FlowStep",
    "SupportCategory",
    "TERMINAL_STEPS",
    "Transition",
    "parse_action",
]
