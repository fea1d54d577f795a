# photo_album/routing.py
"""
Fan-out rules of the NewImageTopic.

Every subscriber of the topic owns exactly one filter policy. A policy is
kept in the same JSON shape SNS stores it in, so `route` can evaluate it
locally and the CDK stack can render it into the subscription unchanged.

Supported conditions per key (OR'ed together, as SNS does):
    "value"                  exact string match
    {"prefix": "..."}        string prefix
    {"suffix": "..."}        string suffix
    {"anything-but": [...]}  deny-list
    {"exists": bool}         key presence
Keys of one policy are AND'ed.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Iterable

METADATA_TYPE_ATTRIBUTE = "metadata_type"
METADATA_TYPES = ("Caption", "Date", "Photographer")
INGESTION_EVENT_NAMES = ("ObjectCreated:Put", "ObjectRemoved:Delete")

PROCESSING_QUEUE = "ImageProcessingQueue"
UPDATE_TABLE_FUNCTION = "UpdateTableFn"

MESSAGE_ATTRIBUTES = "MessageAttributes"
MESSAGE_BODY = "MessageBody"

# Marks a key that is absent from the envelope.
_MISSING = object()


class UnsupportedConditionError(ValueError):
    """Raised for a filter condition this module cannot evaluate."""
    pass


def string_filter(allowlist: Iterable[str] = (), denylist: Iterable[str] = (),
                  match_prefixes: Iterable[str] = (), match_suffixes: Iterable[str] = ()) -> list:
    """Builds the condition list of a string filter, mirroring sns.SubscriptionFilter.string_filter."""
    conditions: list = list(allowlist)
    denylist = list(denylist)
    if denylist:
        conditions.append({"anything-but": denylist})
    conditions.extend({"prefix": prefix} for prefix in match_prefixes)
    conditions.extend({"suffix": suffix} for suffix in match_suffixes)
    return conditions


def exists_filter(exists: bool = True) -> list:
    return [{"exists": exists}]


@dataclass(frozen=True)
class FilterPolicy:
    """
    A subscription filter policy.

    For the message-attributes scope `rules` maps an attribute name to its
    conditions. For the message-body scope `rules` is nested like the JSON
    body, with condition lists at the leaves.
    """
    rules: dict
    scope: str = MESSAGE_ATTRIBUTES

    def matches(self, envelope: "RoutingEnvelope") -> bool:
        if self.scope == MESSAGE_BODY:
            body = envelope.body()
            if body is None:
                return False
            return _body_matches(self.rules, body)
        return all(
            _conditions_match(conditions, _attribute_candidates(envelope.message_attributes, name))
            for name, conditions in self.rules.items()
        )


@dataclass(frozen=True)
class Subscription:
    subscriber: str
    policy: FilterPolicy | None = None

    def accepts(self, envelope: "RoutingEnvelope") -> bool:
        # A subscription without a policy receives every publication.
        return self.policy is None or self.policy.matches(envelope)


@dataclass
class RoutingEnvelope:
    """A single publication on the topic: message text plus its message attributes."""
    message: str
    message_attributes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_s3_event(cls, s3_event: dict) -> "RoutingEnvelope":
        return cls(message=json.dumps(s3_event))

    @classmethod
    def from_sns_record(cls, record: dict) -> "RoutingEnvelope":
        """Rebuilds the envelope from a record delivered to a Lambda subscriber."""
        sns = record["Sns"]
        attributes = {}
        for name, attribute in (sns.get("MessageAttributes") or {}).items():
            value = attribute.get("Value")
            if attribute.get("Type") == "String.Array" and isinstance(value, str):
                value = json.loads(value)
            attributes[name] = value
        return cls(message=sns.get("Message", ""), message_attributes=attributes)

    def body(self) -> Any:
        """The message parsed as JSON, or None when it is not a JSON document."""
        try:
            return json.loads(self.message)
        except (TypeError, ValueError):
            return None


INGESTION_POLICY = FilterPolicy(
    rules={"Records": {"eventName": string_filter(allowlist=INGESTION_EVENT_NAMES)}},
    scope=MESSAGE_BODY,
)

METADATA_UPDATE_POLICY = FilterPolicy(
    rules={METADATA_TYPE_ATTRIBUTE: string_filter(allowlist=METADATA_TYPES)},
)

SUBSCRIPTIONS = (
    Subscription(PROCESSING_QUEUE, INGESTION_POLICY),
    Subscription(UPDATE_TABLE_FUNCTION, METADATA_UPDATE_POLICY),
)


def route(envelope: RoutingEnvelope, subscriptions: Iterable[Subscription] = SUBSCRIPTIONS) -> set[str]:
    """Returns the subscribers that receive a copy of the envelope."""
    return {s.subscriber for s in subscriptions if s.accepts(envelope)}


# Policy evaluation

def _attribute_candidates(attributes: dict, name: str) -> list:
    if name not in attributes:
        return [_MISSING]
    value = attributes[name]
    return list(value) if isinstance(value, list) else [value]


def _children(node: Any, key: str) -> list:
    """Values stored under `key`, with arrays flattened the way SNS flattens them."""
    if isinstance(node, list):
        found = []
        for item in node:
            found.extend(_children(item, key))
        return found
    if isinstance(node, dict) and key in node:
        return [node[key]]
    return []


def _leaves(values: list) -> list:
    flat = []
    for value in values:
        if isinstance(value, list):
            flat.extend(_leaves(value))
        else:
            flat.append(value)
    return flat


def _body_matches(rules: dict, node: Any) -> bool:
    for key, rule in rules.items():
        values = _children(node, key)
        if isinstance(rule, dict):
            if not any(_body_matches(rule, v) for v in values if isinstance(v, (dict, list))):
                return False
        elif not _conditions_match(rule, _leaves(values) or [_MISSING]):
            return False
    return True


def _conditions_match(conditions: list, candidates: list) -> bool:
    return any(_condition_matches(c, value) for c in conditions for value in candidates)


def _condition_matches(condition: Any, value: Any) -> bool:
    if not isinstance(condition, dict):
        return value is not _MISSING and value == condition

    if "exists" in condition:
        return (value is not _MISSING) == bool(condition["exists"])
    if value is _MISSING:
        return False
    if "prefix" in condition:
        return isinstance(value, str) and value.startswith(condition["prefix"])
    if "suffix" in condition:
        return isinstance(value, str) and value.endswith(condition["suffix"])
    if "anything-but" in condition:
        excluded = condition["anything-but"]
        if not isinstance(excluded, list):
            excluded = [excluded]
        return value not in excluded
    raise UnsupportedConditionError(f"Unsupported filter condition: {condition}")
