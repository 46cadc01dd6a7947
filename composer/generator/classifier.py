"""Map clauses to catalog node types with ordered keyword rules."""

import re
from typing import Callable, List, Optional, Sequence, Tuple

import structlog

from composer.catalog import NodeCatalog, NodeTypeDescriptor, get_catalog
from composer.errors import UnresolvedTriggerError
from composer.workflow.models import Clause, ClauseKind, ResolvedIntent

logger = structlog.get_logger(__name__)

Predicate = Callable[[str], bool]
Rule = Tuple[Predicate, NodeTypeDescriptor]


def keyword_pattern(keyword: str) -> str:
    """Regex for a keyword on word boundaries, tolerant of repeated whitespace."""
    parts = [re.escape(part) for part in keyword.split()]
    return r"(?<!\w)" + r"\s+".join(parts) + r"(?!\w)"


def keyword_predicate(descriptor: NodeTypeDescriptor) -> Predicate:
    """Build the match predicate for one descriptor."""
    alternatives = [keyword_pattern(k) for k in descriptor.match_keywords] + list(descriptor.match_patterns)
    match = re.compile("|".join(f"(?:{a})" for a in alternatives), re.IGNORECASE)
    exclude = None
    if descriptor.exclude_keywords:
        exclude = re.compile("|".join(keyword_pattern(k) for k in descriptor.exclude_keywords), re.IGNORECASE)

    def predicate(text: str) -> bool:
        if exclude is not None and exclude.search(text):
            return False
        return match.search(text) is not None

    return predicate


def build_rules(descriptors: Sequence[NodeTypeDescriptor]) -> List[Rule]:
    """Rules in declaration order; descriptors without keywords never match."""
    return [(keyword_predicate(d), d) for d in descriptors if d.match_keywords or d.match_patterns]


class IntentClassifier:
    """Resolves each clause to a node type.

    Trigger clauses are checked against the trigger rules, action clauses
    against the action rules. Evaluation is top to bottom and the first
    matching rule wins.
    """

    def __init__(self, catalog: Optional[NodeCatalog] = None):
        self.catalog = catalog or get_catalog()
        self.trigger_rules = build_rules(self.catalog.triggers)
        self.action_rules = build_rules(self.catalog.actions)

    def rules_for(self, kind: ClauseKind) -> List[Rule]:
        return self.trigger_rules if kind is ClauseKind.TRIGGER else self.action_rules

    def match(self, clause: Clause) -> Optional[NodeTypeDescriptor]:
        """First descriptor whose predicate accepts the clause text."""
        for predicate, descriptor in self.rules_for(clause.kind):
            if predicate(clause.text):
                return descriptor
        return None

    def classify(self, clause: Clause) -> ResolvedIntent:
        descriptor = self.match(clause)

        if descriptor is None:
            if clause.is_trigger:
                raise UnresolvedTriggerError(
                    f"Could not determine how the workflow starts from: '{clause.text}'"
                )
            descriptor = self.catalog.fallback
            logger.warning("clause_unmatched", clause=clause.text, fallback=descriptor.key)

        logger.debug("clause_classified", order=clause.order, kind=clause.kind.value, node=descriptor.key)
        return ResolvedIntent(
            kind=clause.kind,
            descriptor=descriptor,
            extracted_label=descriptor.label,
            clause=clause,
        )

    def classify_all(self, clauses: Sequence[Clause]) -> List[ResolvedIntent]:
        """Classify a segmented prompt, trigger clause first."""
        if not clauses:
            raise UnresolvedTriggerError("The prompt does not describe anything to automate")
        if not clauses[0].is_trigger:
            raise UnresolvedTriggerError("The first clause of a workflow must be its trigger")

        return [self.classify(clause) for clause in clauses]
