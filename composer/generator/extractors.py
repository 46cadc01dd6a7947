"""Best-effort extraction of node parameters from clause text.

Every extractor takes the clause text and its descriptor and returns a
(possibly empty) mapping of parameter overrides. Nothing here fails: text
that cannot be understood simply leaves the catalog defaults in place.
"""

import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from composer.catalog import NodeTypeDescriptor
from composer.errors import CatalogError
from composer.generator.segmenter import first_meaningful_word

Extractor = Callable[[str, NodeTypeDescriptor], Dict[str, Any]]

QUOTED = re.compile(r'"([^"]*)"|“([^”]*)”|(?<!\w)\'([^\']*)\'(?!\w)')
WORD = re.compile(r"[A-Za-z][\w'-]*")
URL = re.compile(r"https?://[^\s\"'<>]+")
EMAIL_ADDRESS = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
PHONE_NUMBER = re.compile(r"\+?\d[\d\s().-]{6,}\d")
HASH_CHANNEL = re.compile(r"(?<![\w#])#([\w-]+)")
NAMED_CHANNEL = re.compile(r"\bthe\s+([\w-]+)\s+channel\b", re.IGNORECASE)
URL_PATH = re.compile(r"(?<![\w/:.])/([A-Za-z0-9][\w/-]*)")
HTTP_VERB_UPPER = re.compile(r"\b(GET|POST|PUT|PATCH|DELETE|HEAD)\b")
HTTP_VERB_REQUEST = re.compile(r"\b(get|post|put|patch|delete|head)\s+requests?\b", re.IGNORECASE)
HTTP_WRITE_VERBS = frozenset({"post", "put", "patch", "delete"})
DURATION = re.compile(r"\b(\d+)\s*(second|minute|hour|day|week)s?\b", re.IGNORECASE)
SINGLE_DURATION = re.compile(r"\b(?:an?|one)\s+(second|minute|hour|day|week)\b", re.IGNORECASE)

WEEKDAYS = {
    "sunday": 0, "monday": 1, "tuesday": 2, "wednesday": 3,
    "thursday": 4, "friday": 5, "saturday": 6,
}
WEEKDAY = re.compile(r"\b(sunday|monday|tuesday|wednesday|thursday|friday|saturday)s?\b", re.IGNORECASE)

INTERVAL_FIELDS = {
    "second": "seconds",
    "minute": "minutes",
    "hour": "hours",
    "day": "days",
    "week": "weeks",
    "month": "months",
}

EVERY_N = re.compile(r"\bevery\s+(\d+)\s+(second|minute|hour|day|week|month)s?\b", re.IGNORECASE)
EVERY_UNIT = re.compile(r"\b(?:every|each|once\s+an?|once\s+per|per)\s+(second|minute|hour|day|week|month)\b", re.IGNORECASE)
ADVERB_UNIT = re.compile(r"\b(hourly|daily|nightly|weekly|monthly)\b", re.IGNORECASE)
ADVERB_FIELDS = {"hourly": "hours", "daily": "days", "nightly": "days", "weekly": "weeks", "monthly": "months"}
CRON = re.compile(r"(?<![\w*/,?-])((?:[\d*/,?-]+\s+){4}[\d*/,?A-Za-z-]+(?:\s+[\d*/,?A-Za-z-]+)?)(?![\w*/,?-])")

CLOCK_MERIDIEM = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*([ap])\.?m\b\.?", re.IGNORECASE)
CLOCK_AT = re.compile(r"\bat\s+(\d{1,2})(?::(\d{2}))?\b", re.IGNORECASE)
CLOCK_WORDS = {"noon": (12, 0), "midday": (12, 0), "midnight": (0, 0)}
CLOCK_WORD = re.compile(r"\b(noon|midday|midnight)\b", re.IGNORECASE)
DAYPART_HOURS = {"morning": 9, "evening": 18, "night": 0, "nightly": 0}
DAYPART = re.compile(r"\b(morning|evening|nightly|night)\b", re.IGNORECASE)

EVENT_STOP_WORDS = frozenset({
    "when", "whenever", "every", "each", "time", "as", "soon", "once", "if", "after",
    "upon", "a", "an", "the", "is", "are", "was", "were", "be", "been", "gets", "get",
    "got", "has", "have", "someone", "somebody", "anyone", "there", "new", "our",
    "my", "we", "i", "in", "on", "to", "of", "for", "from", "into", "by", "at", "with",
})
MAX_SLUG_WORDS = 5


def quoted_literals(text: str) -> List[str]:
    """Contents of all quoted literals, in order."""
    return [next(g for g in m.groups() if g is not None) for m in QUOTED.finditer(text)]


def first_quoted(text: str) -> Optional[str]:
    literals = [l.strip() for l in quoted_literals(text) if l.strip()]
    return literals[0] if literals else None


def slugify(text: str) -> str:
    return "-".join(re.findall(r"[a-z0-9]+", text.lower()))


def merge_parameters(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``overrides`` into ``base``; non-mapping values replace."""
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            merge_parameters(base[key], value)
        else:
            base[key] = value
    return base


def extract_operation(text: str, operations: Mapping[str, str]) -> Optional[str]:
    """Operation selected by the first verb of the clause the node knows."""
    if not operations:
        return None
    for match in WORD.finditer(text):
        operation = operations.get(match.group(0).lower())
        if operation:
            return operation
    return None


def _clock_time(text: str) -> Optional[tuple]:
    match = CLOCK_MERIDIEM.search(text)
    if match:
        hour = int(match.group(1)) % 12
        if match.group(3).lower() == "p":
            hour += 12
        minute = int(match.group(2) or 0)
    else:
        match = CLOCK_AT.search(text)
        if match:
            hour, minute = int(match.group(1)), int(match.group(2) or 0)
        else:
            word = CLOCK_WORD.search(text)
            if word:
                return CLOCK_WORDS[word.group(1).lower()]
            daypart = DAYPART.search(text)
            if daypart:
                return DAYPART_HOURS[daypart.group(1).lower()], 0
            return None

    if hour > 23 or minute > 59:
        return None
    return hour, minute


def _weekdays(text: str) -> List[int]:
    lowered = text.lower()
    if re.search(r"\bweekdays?\b", lowered):
        return [1, 2, 3, 4, 5]
    if re.search(r"\bweekends?\b", lowered):
        return [0, 6]
    days = []
    for match in WEEKDAY.finditer(text):
        day = WEEKDAYS[match.group(1).lower()]
        if day not in days:
            days.append(day)
    return days


def extract_schedule(text: str, descriptor: NodeTypeDescriptor) -> Dict[str, Any]:
    """Interval rule of a schedule trigger."""
    if re.search(r"\bcron\b", text, re.IGNORECASE):
        candidates = quoted_literals(text) + [text]
        for candidate in candidates:
            match = CRON.search(candidate)
            if match:
                return {"rule": {"interval": [{"field": "cronExpression", "expression": match.group(1)}]}}

    interval: Dict[str, Any] = {}
    days = _weekdays(text)

    every = EVERY_N.search(text)
    if every:
        field = INTERVAL_FIELDS[every.group(2).lower()]
        interval = {"field": field, f"{field}Interval": int(every.group(1))}
    elif days:
        interval = {"field": "weeks"}
    else:
        unit = EVERY_UNIT.search(text)
        adverb = ADVERB_UNIT.search(text)
        if unit:
            interval = {"field": INTERVAL_FIELDS[unit.group(1).lower()]}
        elif adverb:
            interval = {"field": ADVERB_FIELDS[adverb.group(1).lower()]}

    clock = _clock_time(text)
    if not interval and not clock:
        return {}
    if not interval:
        interval = {"field": "days"}

    field = interval["field"]
    if days and field == "weeks":
        interval["triggerAtDay"] = days
    if clock is not None:
        hour, minute = clock
        if field in ("days", "weeks", "months"):
            interval["triggerAtHour"] = hour
            interval["triggerAtMinute"] = minute
        elif field == "hours":
            interval["triggerAtMinute"] = minute

    return {"rule": {"interval": [interval]}}


def extract_webhook(text: str, descriptor: NodeTypeDescriptor) -> Dict[str, Any]:
    parameters: Dict[str, Any] = {}

    path = URL_PATH.search(text)
    if path:
        parameters["path"] = path.group(1).strip("/")
    else:
        literal = first_quoted(text)
        if literal and slugify(literal):
            parameters["path"] = slugify(literal)

    verb = HTTP_VERB_UPPER.search(text) or HTTP_VERB_REQUEST.search(text)
    if verb:
        parameters["httpMethod"] = verb.group(1).upper()

    return parameters


def extract_event(text: str, descriptor: NodeTypeDescriptor) -> Dict[str, Any]:
    words = [w for w in re.findall(r"[a-z0-9]+", text.lower()) if w not in EVENT_STOP_WORDS]
    if not words:
        return {}
    return {"path": "-".join(words[:MAX_SLUG_WORDS])}


def extract_chat(text: str, descriptor: NodeTypeDescriptor) -> Dict[str, Any]:
    parameters: Dict[str, Any] = {}
    literal = first_quoted(text)

    channel = HASH_CHANNEL.search(text) or NAMED_CHANNEL.search(text)
    if channel:
        parameters["channel"] = f"#{channel.group(1)}"
        if literal:
            parameters["text"] = literal
    elif literal:
        # A single token literal names a channel, anything longer is the message
        if len(literal.split()) == 1:
            parameters["channel"] = literal
        else:
            parameters["text"] = literal

    return parameters


def extract_email(text: str, descriptor: NodeTypeDescriptor) -> Dict[str, Any]:
    parameters: Dict[str, Any] = {}

    addresses = []
    for address in EMAIL_ADDRESS.findall(text):
        if address not in addresses:
            addresses.append(address)
    if addresses:
        parameters["toEmail"] = ", ".join(addresses)

    literal = first_quoted(text)
    if literal:
        parameters["subject"] = literal

    return parameters


def extract_http(text: str, descriptor: NodeTypeDescriptor) -> Dict[str, Any]:
    parameters: Dict[str, Any] = {}

    url = URL.search(text)
    if url:
        parameters["url"] = url.group(0).rstrip(".,;:!?)")

    verb = HTTP_VERB_UPPER.search(text) or HTTP_VERB_REQUEST.search(text)
    if verb:
        parameters["method"] = verb.group(1).upper()
    else:
        # Lowercase verbs only count as the clause's own verb, not as nouns
        first = first_meaningful_word(text)
        if first in HTTP_WRITE_VERBS:
            parameters["method"] = first.upper()

    return parameters


def extract_sms(text: str, descriptor: NodeTypeDescriptor) -> Dict[str, Any]:
    parameters: Dict[str, Any] = {}

    phone = PHONE_NUMBER.search(text)
    if phone:
        parameters["to"] = re.sub(r"[\s().-]", "", phone.group(0))

    literal = first_quoted(text)
    if literal:
        parameters["message"] = literal

    return parameters


def extract_wait(text: str, descriptor: NodeTypeDescriptor) -> Dict[str, Any]:
    duration = DURATION.search(text)
    if duration:
        return {"amount": int(duration.group(1)), "unit": f"{duration.group(2).lower()}s"}

    single = SINGLE_DURATION.search(text)
    if single:
        return {"amount": 1, "unit": f"{single.group(1).lower()}s"}

    return {}


EXTRACTORS: Dict[str, Extractor] = {
    "schedule": extract_schedule,
    "webhook": extract_webhook,
    "event": extract_event,
    "chat": extract_chat,
    "email": extract_email,
    "http": extract_http,
    "sms": extract_sms,
    "wait": extract_wait,
}


def extract_parameters(descriptor: NodeTypeDescriptor, text: str) -> Dict[str, Any]:
    """All parameter overrides for a clause, keyed by the node's field names."""
    overrides: Dict[str, Any] = {}

    if descriptor.extractor:
        extractor = EXTRACTORS.get(descriptor.extractor)
        if extractor is None:
            raise CatalogError(f"Unknown parameter extractor '{descriptor.extractor}' for '{descriptor.key}'")
        overrides.update(extractor(text, descriptor))

    operation = extract_operation(text, descriptor.operations)
    if operation:
        overrides.setdefault("operation", operation)

    if descriptor.quoted_field and descriptor.quoted_field not in overrides:
        literal = first_quoted(text)
        if literal:
            overrides[descriptor.quoted_field] = literal

    return {descriptor.field_map.get(key, key): value for key, value in overrides.items()}
