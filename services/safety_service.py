"""
Safety rules for the recovery assistant.

Every chat message passes through classify() before anything answers it.
Rules are evaluated top-down and the first matching phrase wins:
blocked request > pain warning > doctor referral > safe.
Matching is a plain substring check on the lower-cased message.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SafetyFlag(str, Enum):
    SAFE = "safe"
    REDIRECT_TO_DOCTOR = "redirect_to_doctor"
    PAIN_WARNING = "pain_warning"
    BLOCKED_REQUEST = "blocked_request"


@dataclass(frozen=True)
class ClassificationResult:
    flag: SafetyFlag
    message: str | None = None  # canned reply; None when safe


BLOCKED_MESSAGE = (
    "I cannot provide medical diagnoses or recommend changes to your medications. "
    "Please consult your doctor for any medical decisions. "
    "I am here to help with recovery education, reminders, and emotional support."
)

PAIN_MESSAGE = (
    "⚠️ I am concerned about your pain level. Severe pain should be evaluated by your healthcare provider. "
    "Please consider contacting your doctor or going to urgent care if:\n\n"
    "• Pain is sudden and severe\n"
    "• You have fever with the pain\n"
    "• The pain is different from your usual post-surgery discomfort\n"
    "• Pain is not relieved by your prescribed medications\n\n"
    "In the meantime, I can suggest some general comfort measures. "
    "Would you like some tips for managing discomfort?"
)

DOCTOR_MESSAGE = (
    "🏥 Based on what you are describing, I strongly recommend contacting your healthcare provider "
    "as soon as possible. Signs of infection, fever, or wound complications need professional medical evaluation.\n\n"
    "Please do not delay seeking medical attention. "
    "If you are unable to reach your doctor, consider going to an urgent care center."
)

# Order is part of the contract.
SAFETY_RULES: tuple[tuple[SafetyFlag, tuple[str, ...], str], ...] = (
    (
        SafetyFlag.BLOCKED_REQUEST,
        (
            "what medicine should i take",
            "should i stop taking",
            "change my prescription",
            "diagnose me",
            "what disease do i have",
            "am i sick",
            "prescribe me",
            "do i have cancer",
        ),
        BLOCKED_MESSAGE,
    ),
    (
        SafetyFlag.PAIN_WARNING,
        (
            "severe pain",
            "extreme pain",
            "unbearable pain",
            "can't bear",
            "worst pain",
            "excruciating",
            "pain is 9",
            "pain is 10",
        ),
        PAIN_MESSAGE,
    ),
    (
        SafetyFlag.REDIRECT_TO_DOCTOR,
        (
            "infection",
            "fever",
            "bleeding heavily",
            "stitches open",
            "wound looks bad",
            "dizzy",
            "pus",
        ),
        DOCTOR_MESSAGE,
    ),
)


def classify(message: str) -> ClassificationResult:
    text = (message or "").lower()
    for flag, phrases, canned in SAFETY_RULES:
        if any(p in text for p in phrases):
            return ClassificationResult(flag=flag, message=canned)
    return ClassificationResult(flag=SafetyFlag.SAFE)


@dataclass(frozen=True)
class AuditFields:
    intent_type: str | None  # None => taken from the responder topic
    risk_level: str
    was_blocked: bool
    safety_warning_shown: bool
    blocked_reason: str | None


# Literal mapping used when writing ai_interaction_logs rows.
AUDIT_FIELDS: dict[SafetyFlag, AuditFields] = {
    SafetyFlag.SAFE: AuditFields(None, "low", False, False, None),
    SafetyFlag.PAIN_WARNING: AuditFields("warning", "high", False, True, None),
    SafetyFlag.REDIRECT_TO_DOCTOR: AuditFields("warning", "high", False, True, None),
    SafetyFlag.BLOCKED_REQUEST: AuditFields(
        "blocked", "medium", True, False, "Request for medical diagnosis or prescription advice"
    ),
}


def audit_fields_for(flag: SafetyFlag) -> AuditFields:
    return AUDIT_FIELDS[flag]
