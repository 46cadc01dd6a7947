"""Split a free-text automation prompt into ordered clauses.

The first clause is always the trigger clause. Action clauses follow in the
order they appear in the prompt. Splitting is purely lexical: sentence
punctuation, the adverb "then", comma lists and "and" before an action verb.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

import structlog

from composer.config import Settings, get_settings
from composer.errors import EmptyPromptError
from composer.workflow.models import Clause, ClauseKind

logger = structlog.get_logger(__name__)

SYNTHESIZED_TRIGGER_TEXT = "Run the workflow manually"

# Imperative verbs that can open an action clause
ACTION_VERBS = frozenset({
    # read
    "fetch", "get", "retrieve", "pull", "download", "call", "request", "query",
    "read", "load", "search", "find", "look", "scrape", "grab", "lookup", "enrich",
    # notify
    "post", "send", "email", "mail", "notify", "message", "alert", "ping", "text",
    "tweet", "share", "publish", "forward", "reply", "remind", "inform",
    # write
    "update", "create", "add", "append", "insert", "write", "save", "store", "log",
    "record", "upsert", "edit", "modify", "change", "sync", "upload", "move", "copy",
    "archive", "delete", "remove", "clear", "close", "open", "file", "raise",
    "assign", "invite",
    # process
    "transform", "format", "parse", "convert", "calculate", "compute", "filter",
    "check", "verify", "validate", "summarize", "summarise", "classify", "categorize",
    "analyze", "analyse", "translate", "generate", "extract", "clean", "normalize",
    "merge", "split", "map", "sort", "deduplicate",
    # flow
    "wait", "delay", "pause", "sleep", "set", "prepare", "run", "execute", "start",
})

# Words skipped when looking for the verb that opens a clause
FILLER_WORDS = frozenset({
    "and", "or", "then", "also", "please", "finally", "next", "lastly",
    "afterwards", "automatically", "immediately", "just", "i", "we", "should",
    "will", "want", "to", "would", "like", "need",
})

# A verb right after one of these is part of the trigger's own phrasing
SUBJECT_WORDS = frozenset({
    "i", "we", "you", "they", "he", "she", "it", "someone", "somebody", "anyone",
    "everyone", "user", "users", "a", "an", "the", "this", "that", "any", "new",
    "each", "every", "my", "our", "your", "their", "is", "are", "was", "gets",
})

_TIME_UNIT = (
    r"(?:\d+\s+)?(?:second|minute|hour|day|morning|afternoon|evening|night|week|weekday|"
    r"weekend|month|year|monday|tuesday|wednesday|thursday|friday|saturday|sunday)s?"
)

LEADING_CUE = re.compile(
    r"^(?:(?:when(?:ever)?|every|each|daily|hourly|weekly|monthly|nightly|on\s+(?:a\s+)?schedule|"
    r"manually|on\s+demand|as\s+soon\s+as|once|if|after|upon)\b|at\s+\d)",
    re.IGNORECASE,
)

MID_CUE = re.compile(
    r"\b(?:when(?:ever)?\b|(?:every|each)\s+" + _TIME_UNIT + r"\b|on\s+(?:a\s+)?schedule\b|"
    r"manually\b|as\s+soon\s+as\b|(?:daily|hourly|weekly|monthly|nightly)$)",
    re.IGNORECASE,
)

# Words that end a schedule phrase, e.g. "8am", "Monday", "morning"
TIME_WORD = re.compile(
    r"^(?:\d\w*|" + _TIME_UNIT + r"|noon|midday|midnight|daily|hourly|weekly|monthly|nightly)$",
    re.IGNORECASE,
)

QUOTED_LITERAL = re.compile(r'"[^"]*"|“[^”]*”|(?<!\w)\'[^\']*\'(?!\w)')
SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?;])\s+")
THEN_BOUNDARY = re.compile(r"\s*,?\s*\b(?:and\s+)?then\b\s*,?\s*", re.IGNORECASE)
COMMA_BOUNDARY = re.compile(r"\s*(?:(?<!\d),|,(?!\d))\s*")
AND_BOUNDARY = re.compile(r"\s+and\s+", re.IGNORECASE)
LEADING_CONJUNCTION = re.compile(r"^(?:and|or)\b\s*", re.IGNORECASE)
WORD = re.compile(r"[\w']+")
PLACEHOLDER = re.compile(r"\x00(\d+)\x00")

_STRIP_CHARS = " \t,.;:!?"


@dataclass
class _Piece:
    text: str
    group: int


def _normalize(prompt: str) -> str:
    return " ".join((prompt or "").split())


def _mask_literals(text: str) -> Tuple[str, List[str]]:
    literals: List[str] = []

    def replace(match):
        literals.append(match.group(0))
        return f"\x00{len(literals) - 1}\x00"

    return QUOTED_LITERAL.sub(replace, text), literals


def _unmask(text: str, literals: List[str]) -> str:
    return PLACEHOLDER.sub(lambda m: literals[int(m.group(1))], text)


def first_meaningful_word(text: str) -> Optional[str]:
    for match in WORD.finditer(text):
        word = match.group(0).lower()
        if word not in FILLER_WORDS:
            return word
    return None


def starts_with_action(text: str) -> bool:
    """True if the first non-filler word of ``text`` is an action verb."""
    return first_meaningful_word(text) in ACTION_VERBS


def _split_on_and(item: str) -> List[str]:
    pieces = []
    start = 0
    for match in AND_BOUNDARY.finditer(item):
        if starts_with_action(item[match.end():]):
            pieces.append(item[start:match.start()])
            start = match.end()
    pieces.append(item[start:])
    return pieces


def _split_trigger_phrase(text: str, after_time_only: bool = False) -> Tuple[str, str]:
    """Split "When X happens do Y" into ("When X happens", "do Y").

    With ``after_time_only`` the verb must follow a time word ("Every Monday
    at 8am pull ..."), so nouns such as "message" in "When a customer message
    arrives" stay inside the trigger.
    """
    words = list(WORD.finditer(text))
    for previous, current in zip(words, words[1:]):
        if current.group(0).lower() not in ACTION_VERBS:
            continue
        if previous.group(0).lower() in SUBJECT_WORDS or "\x00" in text[previous.start():current.start()]:
            continue
        if after_time_only and not TIME_WORD.match(previous.group(0)):
            continue
        return text[:current.start()], text[current.start():]
    return text, ""


def _clean(text: str) -> str:
    return LEADING_CONJUNCTION.sub("", text.strip(_STRIP_CHARS)).strip(_STRIP_CHARS)


def _has_content(text: str) -> bool:
    return bool(WORD.search(text.replace("\x00", " ")) or PLACEHOLDER.search(text))


class ClauseSegmenter:
    """Turns a prompt into an ordered list of clauses."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def check_length(self, prompt: str) -> str:
        normalized = _normalize(prompt)
        minimum = self.settings.min_prompt_length
        if len(normalized) < minimum:
            raise EmptyPromptError(
                f"Describe the workflow in at least {minimum} characters."
            )
        return normalized

    def segment(self, prompt: str) -> List[Clause]:
        """Segment a prompt into clauses, trigger clause first."""
        normalized = self.check_length(prompt)
        masked, literals = _mask_literals(normalized)

        pieces = self._split(masked)
        if not pieces:
            logger.info("prompt_segmented", clauses=0)
            return []

        trigger_text, synthesized, pieces = self._extract_trigger(pieces)

        clauses = [Clause(
            text=_unmask(trigger_text, literals),
            order=0,
            kind=ClauseKind.TRIGGER,
            group=0 if synthesized else -1,
            synthesized=synthesized,
        )]
        for piece in pieces:
            clauses.append(Clause(
                text=_unmask(piece.text, literals),
                order=len(clauses),
                kind=ClauseKind.ACTION,
                group=piece.group,
            ))

        logger.info(
            "prompt_segmented",
            clauses=len(clauses),
            synthesized_trigger=synthesized,
        )
        return clauses

    def _split(self, masked: str) -> List[_Piece]:
        pieces: List[_Piece] = []
        group = 0

        for sentence in SENTENCE_BOUNDARY.split(masked):
            for step in THEN_BOUNDARY.split(sentence.strip(_STRIP_CHARS)):
                step_pieces: List[_Piece] = []
                for item in COMMA_BOUNDARY.split(step):
                    item = _clean(item)
                    if not _has_content(item):
                        continue
                    if step_pieces and not starts_with_action(item):
                        # Continuation of the previous clause, e.g. a list of nouns
                        step_pieces[-1].text = f"{step_pieces[-1].text}, {item}"
                        continue
                    group += 1
                    for part in _split_on_and(item):
                        part = _clean(part)
                        if _has_content(part):
                            step_pieces.append(_Piece(part, group))
                pieces.extend(step_pieces)

        return pieces

    def _extract_trigger(self, pieces: List[_Piece]) -> Tuple[str, bool, List[_Piece]]:
        first, rest = pieces[0], pieces[1:]

        if LEADING_CUE.match(first.text):
            # A comma or sentence boundary already closed the trigger phrase
            closed = bool(rest) and rest[0].group != first.group
            trigger_text, action_text = _split_trigger_phrase(first.text, after_time_only=closed)
            action_text = _clean(action_text)
            if action_text:
                rest = [_Piece(action_text, first.group)] + rest
            return _clean(trigger_text), False, rest

        # "Post the report to Slack every morning": the cue trails an action
        for index, piece in enumerate(pieces):
            match = MID_CUE.search(piece.text)
            if not match or match.start() == 0:
                continue
            head = _clean(piece.text[:match.start()])
            tail = _clean(piece.text[match.start():])
            remaining = list(pieces)
            if head:
                remaining[index] = _Piece(head, piece.group)
            else:
                del remaining[index]
            return tail, False, remaining

        return SYNTHESIZED_TRIGGER_TEXT, True, pieces


def segment(prompt: str, settings: Optional[Settings] = None) -> List[Clause]:
    """Convenience function to segment a prompt"""
    return ClauseSegmenter(settings).segment(prompt)
