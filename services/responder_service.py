"""
Answers for messages that passed the safety rules.

The local template responder is always available. OpenAI / Groq responders
are plain chat-completion passthroughs; they are wrapped in a
FallbackResponder so any provider failure is answered by the templates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from groq import Groq
from openai import OpenAI

from core.config import Settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a friendly post-surgery recovery companion inside a recovery tracking app.\n"
    "Help the patient with recovery education, motivation, sleep, nutrition, gentle movement "
    "and emotional support.\n\n"
    "Rules:\n"
    "- Never diagnose, never name a disease the patient might have.\n"
    "- Never recommend, start, stop or change any medication or dose.\n"
    "- For severe pain, fever, infection signs or wound problems, tell the patient to contact "
    "their healthcare provider.\n"
    "- Keep answers short, warm and practical. Use simple language."
)


@dataclass(frozen=True)
class AssistantReply:
    text: str
    topic: str  # medicine | exercise | anxiety | sleep | diet | general
    provider: str
    model: str | None = None


class Responder(Protocol):
    def respond(self, message: str) -> AssistantReply: ...


MEDICINE_REPLY = (
    "Great question! Your medications work together to support your recovery:\n\n"
    "• **Pain relievers** (like Paracetamol) help manage discomfort so you can rest and move properly\n"
    "• **Anti-inflammatory drugs** (like Ibuprofen) reduce swelling which speeds healing\n"
    "• **Vitamins and supplements** support your body's natural healing processes\n\n"
    "Taking them as prescribed ensures the right amount is in your system at all times. "
    "Skipping doses can let pain build up and slow recovery. "
    "Is there a specific medication you'd like to know more about?"
)

EXERCISE_REPLY = (
    "Movement and exercises are crucial for your recovery! Here's why:\n\n"
    "• **Prevents stiffness** - Gentle movement keeps your joints flexible\n"
    "• **Improves blood flow** - Better circulation speeds healing\n"
    "• **Reduces swelling** - Movement helps drain excess fluid\n"
    "• **Builds strength** - Prepares your body for normal activities\n\n"
    "**Tips for safe exercising:**\n"
    "1. Start slow and gentle\n"
    "2. Stop if you feel sharp pain\n"
    "3. Follow your prescribed exercises\n"
    "4. Stay consistent - a little daily is better than a lot occasionally\n\n"
    "Would you like me to explain any specific exercise from your routine?"
)

ANXIETY_REPLY = (
    "It's completely normal to feel anxious during recovery. Many patients share these feelings. "
    "Here are some things that might help:\n\n"
    "**Remember:**\n"
    "• Your body knows how to heal\n"
    "• You're following your recovery plan\n"
    "• Each day you're getting stronger\n\n"
    "**Calming techniques:**\n"
    "• Deep breathing - try 4-7-8 breathing\n"
    "• Focus on small daily improvements\n"
    "• Talk to someone about how you feel\n"
    "• Gentle movement can reduce anxiety\n\n"
    "**Track your progress:**\n"
    "Looking back at how far you've come can be reassuring. "
    "Your recovery score shows you're making progress!\n\n"
    "Is there something specific that's worrying you? I'm here to help."
)

SLEEP_REPLY = (
    "Sleep is essential for healing. Here are some tips for better rest during recovery:\n\n"
    "**Before bed:**\n"
    "• Take pain medication if prescribed for nighttime\n"
    "• Avoid screens for 1 hour before sleep\n"
    "• Keep a consistent sleep schedule\n"
    "• Try deep breathing or relaxation exercises\n\n"
    "**Positioning:**\n"
    "• Use pillows to support the surgical area\n"
    "• Find a comfortable position before settling\n"
    "• Have what you need within reach\n\n"
    "**Environment:**\n"
    "• Keep the room cool and dark\n"
    "• Use white noise if needed\n"
    "• Have a glass of water nearby\n\n"
    "If sleep problems persist, mention it to your healthcare team. "
    "Good rest is important for your recovery!"
)

DIET_REPLY = (
    "Nutrition plays a vital role in your recovery! Here's what can help:\n\n"
    "**Recovery-boosting foods:**\n"
    "• **Protein** - chicken, fish, eggs, beans for tissue repair\n"
    "• **Vitamin C** - citrus, berries, peppers for wound healing\n"
    "• **Zinc** - nuts, seeds, whole grains for immune function\n"
    "• **Fiber** - vegetables, fruits to prevent constipation (common with pain meds)\n\n"
    "**Tips:**\n"
    "• Stay hydrated - aim for 8 glasses of water daily\n"
    "• Eat smaller, frequent meals if appetite is low\n"
    "• Avoid alcohol as it can interfere with medications\n"
    "• Take medications with food as instructed\n\n"
    "Would you like more specific suggestions based on your situation?"
)

DEFAULT_REPLY = (
    "I'm here to help with your recovery journey! I can assist with:\n\n"
    "• **Understanding your medications** - why and when to take them\n"
    "• **Exercise guidance** - safe ways to stay active\n"
    "• **Recovery tips** - sleep, nutrition, comfort measures\n"
    "• **Emotional support** - managing anxiety or concerns\n"
    "• **Progress tracking** - understanding your recovery score\n\n"
    "What would you like to know more about?"
)


def _pick_template(text: str) -> tuple[str, str]:
    if "why" in text and "medicine" in text:
        return "medicine", MEDICINE_REPLY
    if "exercise" in text or "movement" in text:
        return "exercise", EXERCISE_REPLY
    if "anxious" in text or "worried" in text or "scared" in text:
        return "anxiety", ANXIETY_REPLY
    if "sleep" in text:
        return "sleep", SLEEP_REPLY
    if "eat" in text or "food" in text or "diet" in text:
        return "diet", DIET_REPLY
    return "general", DEFAULT_REPLY


class TemplateResponder:
    provider = "local"

    def respond(self, message: str) -> AssistantReply:
        topic, text = _pick_template((message or "").lower())
        return AssistantReply(text=text, topic=topic, provider=self.provider)


class _ChatCompletionResponder:
    """Shared chat.completions call for OpenAI-compatible SDK clients."""

    provider = ""

    def __init__(self, client, model: str, temperature: float = 0.7, max_tokens: int = 512):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def respond(self, message: str) -> AssistantReply:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": message},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        text = (response.choices[0].message.content or "").strip()
        if not text:
            raise ValueError(f"{self.provider} returned an empty completion")
        # Topic stays "general": the provider answers free-form.
        return AssistantReply(text=text, topic="general", provider=self.provider, model=self.model)


class OpenAIResponder(_ChatCompletionResponder):
    provider = "openai"

    @classmethod
    def from_settings(cls, s: Settings) -> "OpenAIResponder":
        return cls(
            OpenAI(api_key=s.openai_api_key),
            model=s.openai_model,
            temperature=s.ai_temperature,
            max_tokens=s.ai_max_tokens,
        )


class GroqResponder(_ChatCompletionResponder):
    provider = "groq"

    @classmethod
    def from_settings(cls, s: Settings) -> "GroqResponder":
        return cls(
            Groq(api_key=s.groq_api_key),
            model=s.groq_model,
            temperature=s.ai_temperature,
            max_tokens=s.ai_max_tokens,
        )


class FallbackResponder:
    def __init__(self, primary: Responder, fallback: Responder):
        self.primary = primary
        self.fallback = fallback

    def respond(self, message: str) -> AssistantReply:
        try:
            return self.primary.respond(message)
        except Exception:
            logger.warning(
                "Assistant provider %s failed; answering from templates.",
                getattr(self.primary, "provider", type(self.primary).__name__),
                exc_info=True,
            )
            return self.fallback.respond(message)


def build_responder(s: Settings) -> Responder:
    provider = (s.ai_provider or "local").strip().lower()
    local = TemplateResponder()

    if provider == "openai" and s.openai_api_key:
        return FallbackResponder(OpenAIResponder.from_settings(s), local)
    if provider == "groq" and s.groq_api_key:
        return FallbackResponder(GroqResponder.from_settings(s), local)

    if provider not in ("local", ""):
        logger.info("AI provider %r is not configured; using local templates.", provider)
    return local
