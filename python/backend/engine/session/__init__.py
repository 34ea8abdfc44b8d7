from backend.engine.session.controller import HELP_TEXT, SessionController
from backend.engine.session.outcomes import (
    DecisionKind,
    DecisionRequest,
    IntentResult,
    Outcome,
    ProtocolState,
    SessionView,
)

__all__ = [
    "HELP_TEXT",
    "DecisionKind",
    "DecisionRequest",
    "IntentResult",
    "Outcome",
    "ProtocolState",
    "SessionController",
    "SessionView",
]
