"""
Unit tests for per-kind entity search handlers
"""

from datetime import datetime, timedelta, timezone

import pytest

from discovery.models.search import PostFilters, SearchFilters, SortMode, WorkFilters
from discovery.search.handlers import (
    HANDLERS,
    GroupHandler,
    PersonHandler,
    PostHandler,
    WorkHandler,
    search_groups,
    search_organizations,
    search_people,
    search_posts,
    search_works,
)
from discovery.search.models import EntityKind, GroupEntity, OrganizationEntity, PersonEntity, PostEntity, WorkEntity

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def make_work(id, title, **kwargs):
    defaults = {"work_type": "anime", "updated_at": NOW, "rating": 8.0}
    defaults.update(kwargs)
    return WorkEntity(id=id, title=title, **defaults)


def make_person(id, username, **kwargs):
    defaults = {"display_name": username, "updated_at": NOW}
    defaults.update(kwargs)
    return PersonEntity(id=id, username=username, **defaults)


def make_post(id, title, hours_ago=1, **kwargs):
    created = NOW - timedelta(hours=hours_ago)
    defaults = {"author_id": "u_1", "created_at": created, "updated_at": created}
    defaults.update(kwargs)
    return PostEntity(id=id, title=title, **defaults)


class TestRegistry:
    """Test the handler registry"""

    def test_every_kind_has_a_handler(self):
        assert set(HANDLERS) == set(EntityKind)
        for kind, handler in HANDLERS.items():
            assert handler.kind == kind


class TestRelevanceOrdering:
    """Test scoring and ordering"""

    def test_prefix_outranks_substring(self):
        works = [make_work("w2", "Someone"), make_work("w1", "One Piece")]
        results = search_works("one", None, SortMode.RELEVANCE, works)
        assert [work.title for work in results] == ["One Piece", "Someone"]

    def test_non_matching_entities_are_dropped(self):
        works = [make_work("w1", "One Piece"), make_work("w2", "Berserk")]
        assert [w.id for w in search_works("one", None, SortMode.RELEVANCE, works)] == ["w1"]

    def test_strict_and_across_terms(self):
        works = [make_work("w1", "One Piece"), make_work("w2", "One-Punch Man")]
        assert [w.id for w in search_works("one piece", None, SortMode.RELEVANCE, works)] == ["w1"]

    def test_empty_query_returns_nothing(self):
        works = [make_work("w1", "One Piece")]
        assert search_works("", None, SortMode.RELEVANCE, works) == []
        assert search_works("   ", None, SortMode.RELEVANCE, works) == []

    def test_score_tie_broken_by_popularity(self):
        people = [
            make_person("u1", "nova", followers=10),
            make_person("u2", "nova", followers=500),
        ]
        assert [p.id for p in search_people("nova", None, SortMode.RELEVANCE, people)] == ["u2", "u1"]

    def test_popularity_tie_broken_by_recency(self):
        people = [
            make_person("u1", "nova", updated_at=NOW - timedelta(days=2)),
            make_person("u2", "nova", updated_at=NOW),
        ]
        assert [p.id for p in search_people("nova", None, SortMode.RELEVANCE, people)] == ["u2", "u1"]

    def test_full_tie_broken_by_id(self):
        people = [make_person("u9", "nova"), make_person("u3", "nova"), make_person("u5", "nova")]
        assert [p.id for p in search_people("nova", None, SortMode.RELEVANCE, people)] == ["u3", "u5", "u9"]

    def test_order_does_not_depend_on_input_order(self):
        works = [make_work(f"w{i}", f"Star {i % 3}", rating=7 + i % 2) for i in range(9)]
        forward = search_works("star", None, SortMode.RELEVANCE, works)
        backward = search_works("star", None, SortMode.RELEVANCE, list(reversed(works)))
        assert [w.id for w in forward] == [w.id for w in backward]


class TestNewestOrdering:
    """Test newest sort"""

    def test_newest_sorts_by_recency_first(self):
        posts = [
            make_post("p1", "One Piece theory", hours_ago=30, reactions=9000),
            make_post("p2", "One Piece recap", hours_ago=1, reactions=10),
        ]
        assert [p.id for p in search_posts("one piece", None, SortMode.NEWEST, posts)] == ["p2", "p1"]

    def test_post_recency_uses_latest_timestamp(self):
        handler = PostHandler()
        edited = make_post("p1", "Old post", hours_ago=50, updated_at=NOW)
        assert handler.recency(edited) == NOW.timestamp()


class TestPersonFilters:
    """Test person filters"""

    def setup_method(self):
        self.people = [
            make_person("u1", "luffy.creator", role="creator", followers=48210, verified=True),
            make_person("u2", "luffy.fan", role="user", followers=200),
            make_person("u3", "luffy.star", role="influencer", followers=129004),
        ]

    def test_role_equality(self):
        filters = SearchFilters(people={"role": "creator"})
        assert [p.id for p in search_people("luffy", filters, SortMode.RELEVANCE, self.people)] == ["u1"]

    def test_min_followers(self):
        filters = SearchFilters(people={"min_followers": 10000})
        ids = {p.id for p in search_people("luffy", filters, SortMode.RELEVANCE, self.people)}
        assert ids == {"u1", "u3"}

    def test_verified_only(self):
        filters = SearchFilters(people={"verified_only": True})
        assert [p.id for p in search_people("luffy", filters, SortMode.RELEVANCE, self.people)] == ["u1"]

    def test_any_sentinel_means_unset(self):
        filters = SearchFilters(people={"role": "any", "min_followers": "any"})
        assert len(search_people("luffy", filters, SortMode.RELEVANCE, self.people)) == 3

    def test_invalid_values_fail_open(self):
        filters = SearchFilters(people={"role": "pirate-king", "min_followers": -5})
        assert len(search_people("luffy", filters, SortMode.RELEVANCE, self.people)) == 3

    @pytest.mark.parametrize("threshold", ["inf", "-inf", "nan", 1e999, float("inf")])
    def test_non_finite_threshold_fails_open(self, threshold):
        filters = SearchFilters(people={"min_followers": threshold})
        assert filters.people.min_followers is None
        assert len(search_people("luffy", filters, SortMode.RELEVANCE, self.people)) == 3

    def test_non_finite_thresholds_on_every_block(self):
        filters = SearchFilters(
            works={"year_from": "inf", "year_to": 1e999},
            posts={"min_reactions": "inf"},
            groups={"min_members": "1e999"},
            organizations={"min_works": float("inf")},
        )
        assert filters.works.year_from is None
        assert filters.works.year_to is None
        assert filters.posts.min_reactions is None
        assert filters.groups.min_members is None
        assert filters.organizations.min_works is None


class TestWorkFilters:
    """Test work filters"""

    def setup_method(self):
        self.works = [
            make_work("w1", "Star Gate", year=1999, genres=["Action", "Fantasy"], rating=9.0, status="ongoing"),
            make_work("w2", "Star Fall", year=2013, genres=["Drama"], rating=8.1, work_type="manga"),
            make_work("w3", "Star Dust", year=2020, genres=["Dark Fantasy"], rating=7.2, status="hiatus"),
        ]

    def search(self, **block):
        return {w.id for w in search_works("star", SearchFilters(works=block), SortMode.RELEVANCE, self.works)}

    def test_year_range_is_inclusive(self):
        assert self.search(year_from=1999, year_to=2013) == {"w1", "w2"}

    def test_genres_any_of_case_insensitive(self):
        assert self.search(genres=["drama", "FANTASY"]) == {"w1", "w2"}

    def test_min_rating(self):
        assert self.search(min_rating=8.5) == {"w1"}

    def test_work_type_and_status(self):
        assert self.search(work_type="manga") == {"w2"}
        assert self.search(status="hiatus") == {"w3"}

    def test_unparsable_threshold_fails_open(self):
        assert self.search(min_rating="great", year_from="soon") == {"w1", "w2", "w3"}

    def test_out_of_range_rating_fails_open(self):
        assert WorkFilters(min_rating=42).min_rating is None

    def test_missing_year_excluded_by_range(self):
        works = self.works + [make_work("w4", "Star Zero")]
        filters = SearchFilters(works={"year_from": 1990})
        ids = {w.id for w in search_works("star", filters, SortMode.RELEVANCE, works)}
        assert "w4" not in ids


class TestPostFilters:
    """Test post filters"""

    def setup_method(self):
        self.posts = [
            make_post("p1", "Titan ending", has_spoiler=True, tags=["Spoilers"], reactions=4210, post_type="post"),
            make_post("p2", "Titan review", tags=["Review", "Anime"], reactions=9320, post_type="review"),
            make_post("p3", "Titan OST", tags=["OST"], reactions=740),
        ]

    def test_hide_spoilers(self):
        filters = SearchFilters(posts={"hide_spoilers": True})
        assert {p.id for p in search_posts("titan", filters, SortMode.RELEVANCE, self.posts)} == {"p2", "p3"}

    def test_tags_any_of(self):
        filters = SearchFilters(posts={"tags": ["ost", "review"]})
        assert {p.id for p in search_posts("titan", filters, SortMode.RELEVANCE, self.posts)} == {"p2", "p3"}

    def test_min_reactions_and_type(self):
        filters = SearchFilters(posts={"min_reactions": 1000, "post_type": "review"})
        assert [p.id for p in search_posts("titan", filters, SortMode.RELEVANCE, self.posts)] == ["p2"]

    def test_accepts_kind_block_directly(self):
        handler = PostHandler()
        matches = handler.search("titan", PostFilters(hide_spoilers=True), SortMode.RELEVANCE, self.posts)
        assert {m.entity.id for m in matches} == {"p2", "p3"}

    def test_accepts_plain_dict(self):
        handler = PostHandler()
        matches = handler.search("titan", {"min_reactions": 5000}, SortMode.RELEVANCE, self.posts)
        assert [m.entity.id for m in matches] == ["p2"]


class TestGroupAndOrganizationFilters:
    """Test group and organization filters"""

    def test_group_filters(self):
        groups = [
            GroupEntity(id="c1", name="Piece Lab", members=50210, is_official=True, region="Global", updated_at=NOW),
            GroupEntity(id="c2", name="Piece Club", members=900, region="MENA", updated_at=NOW),
        ]
        official = SearchFilters(groups={"official_only": True})
        assert [g.id for g in search_groups("piece", official, SortMode.RELEVANCE, groups)] == ["c1"]
        region = SearchFilters(groups={"region": "mena"})
        assert [g.id for g in search_groups("piece", region, SortMode.RELEVANCE, groups)] == ["c2"]
        members = SearchFilters(groups={"min_members": 1000})
        assert [g.id for g in search_groups("piece", members, SortMode.RELEVANCE, groups)] == ["c1"]

    def test_organization_filters(self):
        organizations = [
            OrganizationEntity(id="s1", name="Studio Toei", country="JP", verified=True, works_count=250, updated_at=NOW),
            OrganizationEntity(id="s2", name="Studio Mir", country="KR", works_count=20, updated_at=NOW),
        ]
        country = SearchFilters(organizations={"country": "kr"})
        assert [o.id for o in search_organizations("studio", country, SortMode.RELEVANCE, organizations)] == ["s2"]
        verified = SearchFilters(organizations={"verified_only": "true", "min_works": 100})
        assert [o.id for o in search_organizations("studio", verified, SortMode.RELEVANCE, organizations)] == ["s1"]

    def test_popularity_orders_groups_by_members(self):
        handler = GroupHandler()
        assert handler.popularity(GroupEntity(id="c1", name="x", members=7, updated_at=NOW)) == 7


class TestHandlerDefaults:
    """Test handler fallbacks"""

    @pytest.mark.parametrize("handler_cls", [PersonHandler, WorkHandler, PostHandler, GroupHandler])
    def test_unusable_filters_mean_no_filter(self, handler_cls):
        handler = handler_cls()
        assert handler.kind_filters("garbage") == handler.filters_model()
        assert handler.kind_filters(None) == handler.filters_model()
