"""Merging of available payment methods that share a group type."""
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from payment_setup.payment_method import PaymentMethod

logger = logging.getLogger(__name__)

GroupFactory = Callable[[Sequence[PaymentMethod]], PaymentMethod | None]


@dataclass(frozen=True)
class GroupTypeKey:
    """Methods whose group declares this type."""

    type: str


@dataclass(frozen=True)
class UniqueKey:
    """An ungrouped method, keyed by its position in the decoded sequence."""

    index: int


GroupKey = GroupTypeKey | UniqueKey


def group_key(method: PaymentMethod, index: int) -> GroupKey:
    if method.group is None:
        return UniqueKey(index)
    return GroupTypeKey(method.group.type)


def partition(methods: Iterable[PaymentMethod]) -> dict[GroupKey, list[PaymentMethod]]:
    """Partition methods by group key, in first-occurrence order of each key."""
    groups: dict[GroupKey, list[PaymentMethod]] = {}
    for index, method in enumerate(methods):
        groups.setdefault(group_key(method, index), []).append(method)
    return groups


def group_payment_methods(
    methods: Iterable[PaymentMethod],
    merge: GroupFactory = PaymentMethod.from_members,
) -> list[PaymentMethod]:
    """
    Collapse methods sharing a group type into one merged method each.

    Singleton groups are kept as-is. Groups of two or more members are
    replaced by ``merge(members)``; when that yields None the group is
    dropped. The result follows the order in which groups first appear.
    """
    result: list[PaymentMethod] = []
    for key, members in partition(methods).items():
        if len(members) == 1:
            result.append(members[0])
            continue
        merged = merge(members)
        if merged is None:
            logger.debug("Dropping group %s: %d members could not be merged", key, len(members))
            continue
        result.append(merged)
    return result
