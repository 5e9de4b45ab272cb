"""Selector matching for Accessor label and field rules.

A selector is a list of rule groups. It matches when any group matches
(OR), and a group matches when every item in it holds (AND). An empty
selector matches everything.

Items are permissive by construction:

* an item whose key/field is absent from the target, or whose value list
  is empty, holds vacuously;
* an item with an operator other than ``In``/``NotIn`` holds, so it can
  never veto its group on its own.

Evaluation never raises.
"""

from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple, Union

from storageaccessor.models.accessor import (WILDCARD, FieldExpression,
                                             FieldName, MatchExpression,
                                             Operator, ScopeSelector)
from storageaccessor.models.scope import ScopeObject

# key -> (value, exists)
AttributeLookup = Callable[[str], Tuple[str, bool]]
Item = Union[MatchExpression, FieldExpression]


def label_lookup(labels: Dict[str, str]) -> AttributeLookup:
    """Attribute lookup over a label mapping."""

    def lookup(key: str) -> Tuple[str, bool]:
        if key in labels:
            return labels[key], True
        return "", False

    return lookup


def _field_name(name: str) -> Optional[FieldName]:
    try:
        return FieldName(name.lower())
    except ValueError:
        return None


def field_lookup(target: ScopeObject) -> AttributeLookup:
    """Attribute lookup over the recognized object fields."""

    def lookup(name: str) -> Tuple[str, bool]:
        field = _field_name(name)
        if field is FieldName.NAME:
            return target.name, True
        if field is FieldName.STATUS:
            return target.phase, True
        return "", False

    return lookup


def _item_key(item: Item) -> str:
    if isinstance(item, FieldExpression):
        return item.field
    return item.key


def item_passes(item: Item, lookup: AttributeLookup) -> bool:
    """Check one match item against the target attributes."""
    if not item.values:
        return True

    value, exists = lookup(_item_key(item))
    if not exists:
        return True

    if item.operator == Operator.IN.value:
        return WILDCARD in item.values or value in item.values
    if item.operator == Operator.NOT_IN.value:
        return WILDCARD not in item.values and value not in item.values

    # Unknown operators are inert
    return True


def group_passes(group: Iterable[Item], lookup: AttributeLookup) -> bool:
    return all(item_passes(item, lookup) for item in group)


def evaluate(groups: Sequence[Iterable[Item]], lookup: AttributeLookup) -> bool:
    """OR across groups, AND within a group; no groups means no restriction."""
    if not groups:
        return True
    return any(group_passes(group, lookup) for group in groups)


def evaluate_labels(selector: ScopeSelector, labels: Dict[str, str]) -> bool:
    return evaluate(selector.label_groups, label_lookup(labels))


def evaluate_fields(selector: ScopeSelector, target: ScopeObject) -> bool:
    return evaluate(selector.field_groups, field_lookup(target))


def selector_matches(selector: ScopeSelector, target: ScopeObject) -> bool:
    """Field rules and label rules must both pass."""
    if selector.is_empty():
        return True
    return evaluate_fields(selector, target) and evaluate_labels(
        selector, target.labels
    )
