"""Tests for subgroup visibility resolution."""

import modules.digests.visibility as visibility
from modules.digests.visibility import (
    VisibilityCache,
    can_view,
    managed_subgroups,
    visible_subgroups,
)


def test_visible_subgroups_is_union_of_global_and_own(group_factory, membership_factory):
    group = group_factory(visible_subgroup_ids={"sg-public"})
    membership = membership_factory(subgroups={"sg-private": False})

    assert visible_subgroups(membership, group) == {"sg-public", "sg-private"}


def test_explicit_subgroup_membership_grants_visibility(group_factory, membership_factory):
    group = group_factory(visible_subgroup_ids=set())
    membership = membership_factory(subgroups={"sg-private": False})

    assert can_view(membership, group, "sg-private")


def test_globally_visible_subgroup_needs_no_membership(group_factory, membership_factory):
    group = group_factory(visible_subgroup_ids={"sg-public"})
    membership = membership_factory()

    assert can_view(membership, group, "sg-public")
    assert not can_view(membership, group, "sg-private")


def test_unscoped_content_is_always_visible(group_factory, membership_factory):
    assert can_view(membership_factory(), group_factory(), None)


def test_managed_subgroups_follow_subgroup_manager_flag(membership_factory):
    membership = membership_factory(
        manager=False, subgroups={"sg-1": True, "sg-2": False, "sg-3": True}
    )

    assert managed_subgroups(membership) == {"sg-1", "sg-3"}


def test_group_manager_flag_does_not_imply_subgroup_management(membership_factory):
    membership = membership_factory(manager=True, subgroups={"sg-1": False})

    assert managed_subgroups(membership) == frozenset()


class TestVisibilityCache:
    def test_resolves_once_per_membership(
        self, group_factory, membership_factory, monkeypatch
    ):
        calls = []
        original = visibility.visible_subgroups

        def _counting(membership, group):
            calls.append(membership.id)
            return original(membership, group)

        monkeypatch.setattr(visibility, "visible_subgroups", _counting)

        cache = VisibilityCache()
        group = group_factory(visible_subgroup_ids={"sg-public"})
        membership = membership_factory(subgroups={"sg-1": True})

        for subgroup_id in ["sg-public", "sg-1", "sg-2", None, "sg-1"]:
            cache.can_view(membership, group, subgroup_id)

        assert calls == ["m-1"]
        assert len(cache) == 1

    def test_matches_uncached_functions(self, group_factory, membership_factory):
        cache = VisibilityCache()
        group = group_factory(visible_subgroup_ids={"sg-public"})
        membership = membership_factory(subgroups={"sg-1": True, "sg-2": False})

        assert cache.visible_subgroups(membership, group) == visible_subgroups(
            membership, group
        )
        assert cache.managed_subgroups(membership) == managed_subgroups(membership)
        assert cache.can_view(membership, group, "sg-2")
        assert not cache.can_view(membership, group, "sg-3")

    def test_managed_subgroups_without_cached_entry(self, membership_factory):
        cache = VisibilityCache()
        membership = membership_factory(subgroups={"sg-1": True, "sg-2": False})

        assert cache.managed_subgroups(membership) == {"sg-1"}
        assert len(cache) == 0

    def test_clear_drops_entries(self, group_factory, membership_factory):
        cache = VisibilityCache()
        cache.resolve(membership_factory(), group_factory())
        assert len(cache) == 1

        cache.clear()

        assert len(cache) == 0
