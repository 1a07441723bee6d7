"""
Scripted assistant for the chat widget.

Rules are checked top to bottom and the first rule with a keyword contained in
the lower-cased message wins, so an earlier rule beats a later one even when
the later rule matches more keywords.
"""

from typing import Optional, Tuple

VOLUNTEER_RESPONSE = (
    "We'd love to have you join our team! Please fill out the contact form above and "
    'select "Volunteering" as your inquiry type. Our coordinator will contact you.'
)
HOURS_RESPONSE = "Our support center is open Monday through Friday, from 9:00 AM to 6:00 PM EST."
EMERGENCY_RESPONSE = (
    "CRITICAL: If this is a medical emergency, please call 911 "
    "(or your local emergency services) immediately."
)
APPOINTMENT_RESPONSE = (
    "To schedule an appointment, please use the contact form or call our support line "
    "at +1 (555) 123-4567."
)
HELLO_RESPONSE = (
    "Hello! I'm your virtual health assistant. You can ask me about scheduling "
    "appointments, volunteering, or our hours."
)
HI_RESPONSE = "Hi there! How can I help you with your healthcare needs today?"
THANKS_RESPONSE = "You're very welcome! Is there anything else I can help you with?"
DEFAULT_RESPONSE = (
    "I'm still learning, but I can definitely help with appointments, volunteering, "
    "or our operation hours. What do you need help with?"
)

# (intent, keywords, response)
RULES: Tuple[Tuple[str, Tuple[str, ...], str], ...] = (
    ("volunteer", ("volunteer", "join"), VOLUNTEER_RESPONSE),
    ("hours", ("hour", "open"), HOURS_RESPONSE),
    ("emergency", ("emergency", "help"), EMERGENCY_RESPONSE),
    ("appointment", ("appointment", "schedule"), APPOINTMENT_RESPONSE),
    ("hello", ("hello", "hey"), HELLO_RESPONSE),
    ("hi", ("hi",), HI_RESPONSE),
    ("thanks", ("thank",), THANKS_RESPONSE),
)


def _match(utterance: Optional[str]):
    text = (utterance or "").lower()
    for rule in RULES:
        _, keywords, _ = rule
        if any(keyword in text for keyword in keywords):
            return rule
    return None


def classify(utterance: Optional[str]) -> str:
    """Name of the rule that answers this message, or "default" """
    rule = _match(utterance)
    return rule[0] if rule else "default"


def respond(utterance: Optional[str]) -> str:
    rule = _match(utterance)
    return rule[2] if rule else DEFAULT_RESPONSE
