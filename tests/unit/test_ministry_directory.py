from portal.core.exceptions import ErrorCode
from portal.repositories import MinistryRepository
from portal.schemas.ministry import MinistryCreate, MinistryUpdate
from portal.services.ministry import MinistryDirectory, MinistryEntry, MinistryIndex
from portal.services.ministry.default_ministries import DEFAULT_MINISTRIES


def test_seed_loads_defaults_once(seeded):
    second = seeded.seed_default_ministries()

    assert second.is_success
    assert second.data.created == 0
    assert second.data.skipped == len(DEFAULT_MINISTRIES)
    assert len(seeded.list_ministries().data) == len(DEFAULT_MINISTRIES)


def test_seeded_adult_ministries_require_approval(seeded):
    by_name = {m.name: m for m in seeded.list_ministries().data}

    assert by_name["Adult Bible Study"].requires_approval is True
    assert by_name["Adult Bible Study"].approval_coordinator == "adult-discipleship"
    assert by_name["Youth Ministry"].requires_approval is False
    assert by_name["Youth Ministry"].approval_coordinator is None


def test_name_match_beats_alias_match():
    alias_owner = MinistryEntry("1", "Bible Study Fellowship", ("Small Groups",), False, None, None)
    name_owner = MinistryEntry("2", "Small Groups", (), True, "adult-discipleship", None)

    index = MinistryIndex([alias_owner, name_owner])

    assert index.resolve("small groups").id == "2"


def test_first_ministry_keeps_a_shared_alias():
    a = MinistryEntry("a", "Alpha", ("Shared",), False, None, None)
    b = MinistryEntry("b", "Beta", ("Shared",), True, None, None)

    assert MinistryIndex([b, a]).resolve("shared").id == "a"


def test_inactive_ministries_are_not_routed(ministry_service, db_session):
    ministry_service.create_ministry(
        MinistryCreate(name="Old Choir", requires_approval=True, active=False)
    )

    index = MinistryDirectory().snapshot(MinistryRepository(db_session))

    assert index.resolve("Old Choir") is None


def test_snapshot_is_reused_until_directory_changes(ministry_service, db_session):
    directory = MinistryDirectory()
    repo = MinistryRepository(db_session)
    ministry_service.create_ministry(MinistryCreate(name="Hospitality"))

    first = directory.snapshot(repo)
    assert directory.snapshot(repo) is first

    ministry_service.create_ministry(MinistryCreate(name="Prayer Ministry", aliases="Prayer, Intercession"))
    second = directory.snapshot(repo)

    assert second is not first
    assert second.resolve("intercession").name == "Prayer Ministry"


def test_create_duplicate_name_is_conflict(ministry_service):
    assert ministry_service.create_ministry(MinistryCreate(name="Missions")).is_success

    duplicate = ministry_service.create_ministry(MinistryCreate(name="  MISSIONS "))

    assert not duplicate.is_success
    assert duplicate.error_code == ErrorCode.CONFLICT


def test_new_approval_ministry_gets_default_coordinator(ministry_service):
    created = ministry_service.create_ministry(
        MinistryCreate(name="Adult Choir", requires_approval=True)
    ).data

    assert created.approval_coordinator == "adult-discipleship"


def test_update_can_keep_own_name_and_change_flags(ministry_service):
    ministry = ministry_service.create_ministry(MinistryCreate(name="Stewardship")).data

    updated = ministry_service.update_ministry(
        ministry.id,
        MinistryUpdate(name="stewardship", requires_approval=True),
    )

    assert updated.is_success
    assert updated.data.requires_approval is True
    assert updated.data.approval_coordinator == "adult-discipleship"


def test_update_to_another_ministrys_name_is_conflict(ministry_service):
    ministry_service.create_ministry(MinistryCreate(name="Facilities"))
    other = ministry_service.create_ministry(MinistryCreate(name="Grounds")).data

    result = ministry_service.update_ministry(other.id, MinistryUpdate(name="facilities"))

    assert result.error_code == ErrorCode.CONFLICT


def test_delete_keeps_existing_submissions(seeded, submit):
    record = submit(ministry="Adult Bible Study")

    result = seeded.delete_ministry(record.ministry_id)

    assert result.is_success
    assert result.metadata["detached_submissions"] == 1
    assert seeded.get_ministry(record.ministry_id).error_code == ErrorCode.NOT_FOUND


def test_get_missing_ministry_is_not_found(ministry_service):
    assert ministry_service.get_ministry("missing").error_code == ErrorCode.NOT_FOUND


def test_search_ranks_prefix_matches_first(seeded):
    names = [r.name for r in seeded.search_ministries("adult").data]

    assert names[:4] == [
        "Adult Bible Study",
        "Adult Discipleship Retreat",
        "Adult Education",
        "Adult Faith Formation",
    ]
    # Matched on description only
    assert "Small Groups" in names


def test_search_without_query_lists_active_ministries(seeded):
    results = seeded.search_ministries(None, limit=50).data

    assert len(results) == len(DEFAULT_MINISTRIES)


def test_search_matches_aliases(seeded):
    assert [r.name for r in seeded.search_ministries("youth group").data] == ["Youth Ministry"]
