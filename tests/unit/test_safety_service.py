"""
Unit tests for the assistant safety rules.

Tests cover:
- Rule precedence (blocked > pain > doctor > safe)
- Case-insensitive substring matching
- Audit field mapping per flag
"""

import pytest

from services.safety_service import (
    BLOCKED_MESSAGE,
    DOCTOR_MESSAGE,
    PAIN_MESSAGE,
    SAFETY_RULES,
    SafetyFlag,
    audit_fields_for,
    classify,
)


class TestClassify:
    """Tests for classify()."""

    def test_fever_redirects_to_doctor(self):
        result = classify("I have a fever and the wound looks bad")
        assert result.flag is SafetyFlag.REDIRECT_TO_DOCTOR
        assert result.message == DOCTOR_MESSAGE

    def test_blocked_list_wins_over_pain(self):
        result = classify("Can you diagnose me, I have severe pain")
        assert result.flag is SafetyFlag.BLOCKED_REQUEST
        assert result.message == BLOCKED_MESSAGE

    def test_pain_wins_over_doctor_referral(self):
        result = classify("Unbearable pain and a fever since last night")
        assert result.flag is SafetyFlag.PAIN_WARNING
        assert result.message == PAIN_MESSAGE

    def test_matching_ignores_case(self):
        assert classify("SHOULD I STOP TAKING my pills?").flag is SafetyFlag.BLOCKED_REQUEST
        assert classify("My Pain Is 9 today").flag is SafetyFlag.PAIN_WARNING

    def test_phrase_inside_longer_word_matches(self):
        # Plain substring semantics: "infection" matches "infections".
        assert classify("worried about infections").flag is SafetyFlag.REDIRECT_TO_DOCTOR

    def test_safe_message_has_no_canned_reply(self):
        result = classify("How can I sleep better at night?")
        assert result.flag is SafetyFlag.SAFE
        assert result.message is None

    def test_empty_message_is_safe(self):
        assert classify("").flag is SafetyFlag.SAFE

    @pytest.mark.parametrize("flag,phrases,canned", SAFETY_RULES)
    def test_every_phrase_triggers_its_rule(self, flag, phrases, canned):
        for phrase in phrases:
            result = classify(f"hello, {phrase}!")
            assert result.flag is flag, phrase
            assert result.message == canned

    def test_rules_are_ordered_by_precedence(self):
        assert [flag for flag, _, _ in SAFETY_RULES] == [
            SafetyFlag.BLOCKED_REQUEST,
            SafetyFlag.PAIN_WARNING,
            SafetyFlag.REDIRECT_TO_DOCTOR,
        ]


class TestAuditFields:
    """Tests for the audit mapping written to ai_interaction_logs."""

    def test_blocked_request(self):
        audit = audit_fields_for(SafetyFlag.BLOCKED_REQUEST)
        assert audit.intent_type == "blocked"
        assert audit.risk_level == "medium"
        assert audit.was_blocked is True
        assert audit.safety_warning_shown is False
        assert audit.blocked_reason

    @pytest.mark.parametrize("flag", [SafetyFlag.PAIN_WARNING, SafetyFlag.REDIRECT_TO_DOCTOR])
    def test_warnings_are_high_risk(self, flag):
        audit = audit_fields_for(flag)
        assert audit.intent_type == "warning"
        assert audit.risk_level == "high"
        assert audit.was_blocked is False
        assert audit.safety_warning_shown is True
        assert audit.blocked_reason is None

    def test_safe_is_low_risk(self):
        audit = audit_fields_for(SafetyFlag.SAFE)
        assert audit.risk_level == "low"
        assert audit.was_blocked is False
        assert audit.safety_warning_shown is False
