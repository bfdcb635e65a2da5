"""
Keyword rules.

A rule pairs a keyword predicate with an action builder. Matching is a
case-insensitive substring test against the classified (already lower-cased)
text; there is no tokenization or ranking.
"""

from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

from solvook_bot.events.models import ClassifiedEvent
from solvook_bot.policy.actions import OutboundAction

ActionBuilder = Callable[[ClassifiedEvent], List[OutboundAction]]


class Rule(NamedTuple):
    name: str
    keywords: Tuple[str, ...]
    build: ActionBuilder

    def matches(self, classified: ClassifiedEvent) -> bool:
        # An empty keyword tuple matches everything (catch-all rule)
        if not self.keywords:
            return True
        text = classified.text.lower()
        return any(keyword in text for keyword in self.keywords)


def matching_rule(rules: Sequence[Rule], classified: ClassifiedEvent) -> Optional[Rule]:
    """Return the first rule that matches, in declaration order."""
    for rule in rules:
        if rule.matches(classified):
            return rule
    return None


def first_match(rules: Sequence[Rule], classified: ClassifiedEvent) -> List[OutboundAction]:
    """Actions of the first matching rule; for mutually exclusive replies."""
    rule = matching_rule(rules, classified)
    return rule.build(classified) if rule else []


def all_matches(rules: Sequence[Rule], classified: ClassifiedEvent) -> List[OutboundAction]:
    """Actions of every matching rule, in declaration order; for independent rules."""
    actions: List[OutboundAction] = []
    for rule in rules:
        if rule.matches(classified):
            actions.extend(rule.build(classified))
    return actions
