from payment_setup.grouping import GroupTypeKey, UniqueKey, group_key, group_payment_methods, partition
from payment_setup.payment_method import PaymentMethod, PaymentMethodGroup


def _method(method_type: str, group: str | None = None) -> PaymentMethod:
    return PaymentMethod(
        type=method_type,
        name=method_type.title(),
        payment_method_data=f"data-{method_type}",
        group=PaymentMethodGroup(type=group, name=group) if group else None,
    )


class TestGroupKey:
    """Tests for the group discriminator."""

    def test_grouped_method_is_keyed_by_group_type(self):
        assert group_key(_method("visa", "card"), 3) == GroupTypeKey("card")

    def test_ungrouped_method_is_keyed_by_position(self):
        assert group_key(_method("ideal"), 3) == UniqueKey(3)

    def test_keys_of_different_kinds_never_collide(self):
        assert GroupTypeKey("0") != UniqueKey(0)


class TestPartition:
    """Tests for first-occurrence partitioning."""

    def test_preserves_first_occurrence_order(self):
        groups = partition([_method("a", "g1"), _method("x"), _method("b", "g1")])
        assert list(groups) == [GroupTypeKey("g1"), UniqueKey(1)]
        assert [m.type for m in groups[GroupTypeKey("g1")]] == ["a", "b"]


class TestGroupPaymentMethods:
    """Tests for merging grouped payment methods."""

    def test_merges_shared_groups_and_keeps_singletons(self):
        result = group_payment_methods([_method("A", "g1"), _method("B", "g1"), _method("C")])
        assert [m.type for m in result] == ["g1", "C"]
        assert [m.type for m in result[0].members] == ["A", "B"]
        assert not result[1].is_group

    def test_singleton_group_is_kept_unmerged(self):
        result = group_payment_methods([_method("ideal", "bank")])
        assert result == [_method("ideal", "bank")]

    def test_merge_receives_every_member(self):
        seen = []

        def merge(members):
            seen.append([m.type for m in members])
            return None

        result = group_payment_methods(
            [_method("A", "g1"), _method("B", "g1"), _method("C", "g1"), _method("D")],
            merge,
        )
        assert seen == [["A", "B", "C"]]
        assert [m.type for m in result] == ["D"]

    def test_empty_input(self):
        assert group_payment_methods([]) == []
