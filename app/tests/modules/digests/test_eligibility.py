"""Tests for audit eligibility and categorization."""

from datetime import datetime, timedelta, timezone

import pytest

from modules.digests.eligibility import categorize_eligible, is_eligible

NOW = datetime(2025, 1, 8, tzinfo=timezone.utc)


@pytest.fixture
def group(group_factory):
    return group_factory(visible_subgroup_ids={"sg-public"})


class TestIsEligible:
    def test_plain_audit_is_eligible(self, group, membership_factory, audit_factory):
        assert is_eligible(membership_factory(), group, audit_factory(), NOW)

    def test_deleted_subgroup_is_never_eligible(
        self, group, membership_factory, audit_factory
    ):
        membership = membership_factory(manager=True, subgroups={"sg-1": True})
        audit = audit_factory(subgroup_id="sg-1", deleted_subgroup=True)

        assert not is_eligible(membership, group, audit, NOW)

    def test_manager_only_audit_requires_group_manager(
        self, group, membership_factory, audit_factory
    ):
        audit = audit_factory(only_managers=True)

        assert is_eligible(membership_factory(manager=True), group, audit, NOW)
        assert not is_eligible(membership_factory(manager=False), group, audit, NOW)

    def test_subgroup_manager_is_not_group_manager(
        self, group, membership_factory, audit_factory
    ):
        membership = membership_factory(manager=False, subgroups={"sg-1": True})
        audit = audit_factory(subgroup_id="sg-1", only_managers=True)

        assert not is_eligible(membership, group, audit, NOW)

    def test_future_audit_is_not_eligible(
        self, group, membership_factory, audit_factory
    ):
        audit = audit_factory(created_at=NOW + timedelta(seconds=1))

        assert not is_eligible(membership_factory(), group, audit, NOW)

    def test_audit_created_exactly_now_is_eligible(
        self, group, membership_factory, audit_factory
    ):
        assert is_eligible(
            membership_factory(), group, audit_factory(created_at=NOW), NOW
        )

    def test_watermark_boundary_is_strict(
        self, group, membership_factory, audit_factory
    ):
        watermark = NOW - timedelta(days=7)
        membership = membership_factory(last_notification=watermark)

        assert not is_eligible(
            membership, group, audit_factory(created_at=watermark), NOW
        )
        assert is_eligible(
            membership,
            group,
            audit_factory(created_at=watermark + timedelta(microseconds=1)),
            NOW,
        )

    def test_audit_at_or_before_watermark_never_eligible_later(
        self, group, membership_factory, audit_factory
    ):
        watermark = NOW - timedelta(days=1)
        membership = membership_factory(last_notification=watermark)
        old_audit = audit_factory(created_at=watermark - timedelta(hours=1))

        for days_later in range(0, 30):
            later = NOW + timedelta(days=days_later)
            assert not is_eligible(membership, group, old_audit, later)

    def test_visibility_is_enforced(self, group, membership_factory, audit_factory):
        membership = membership_factory(subgroups={"sg-1": False})

        assert is_eligible(membership, group, audit_factory(subgroup_id="sg-1"), NOW)
        assert is_eligible(
            membership, group, audit_factory(subgroup_id="sg-public"), NOW
        )
        assert not is_eligible(
            membership, group, audit_factory(subgroup_id="sg-other"), NOW
        )

    def test_naive_timestamps_are_treated_as_utc(
        self, group, membership_factory, audit_factory
    ):
        membership = membership_factory(last_notification=datetime(2025, 1, 1))
        audit = audit_factory(created_at=datetime(2025, 1, 7, 12))

        assert is_eligible(membership, group, audit, NOW)


class TestCategorizeEligible:
    def test_groups_eligible_ids_by_category(
        self, group, membership_factory, audit_factory
    ):
        audits = [
            audit_factory(id=1, category="posts"),
            audit_factory(id=2, category="posts", only_managers=True),
            audit_factory(id=3, category="events"),
        ]

        result = categorize_eligible(membership_factory(), group, audits, NOW)

        assert result == {"posts": [1], "events": [3]}

    def test_omits_categories_with_no_eligible_audits(
        self, group, membership_factory, audit_factory
    ):
        audits = [
            audit_factory(id=1, category="posts"),
            audit_factory(id=2, category="files", deleted_subgroup=True),
            audit_factory(id=3, category="events", subgroup_id="sg-hidden"),
        ]

        result = categorize_eligible(membership_factory(), group, audits, NOW)

        assert result == {"posts": [1]}
        assert all(ids for ids in result.values())

    def test_preserves_input_order(self, group, membership_factory, audit_factory):
        audits = [
            audit_factory(id=9, category="events"),
            audit_factory(id=4, category="posts"),
            audit_factory(id=7, category="events"),
            audit_factory(id=1, category="posts"),
        ]

        result = categorize_eligible(membership_factory(), group, audits, NOW)

        assert list(result) == ["events", "posts"]
        assert result["events"] == [9, 7]
        assert result["posts"] == [4, 1]

    def test_no_audits_returns_empty_mapping(self, group, membership_factory):
        assert categorize_eligible(membership_factory(), group, [], NOW) == {}
