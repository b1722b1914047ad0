from __future__ import annotations

import datetime

import pytest

from sweepstake.errors import (
    AlreadySubmitted,
    DeadlinePassed,
    NothingToSubmit,
    NoTeamSelected,
    NotFoundError,
    ValidationError,
)
from sweepstake.predictions.flow import DraftFlow, FlowState
from sweepstake.predictions.models import DraftPick
from sweepstake.predictions.storage import DeviceStorage, DraftStore
from sweepstake.teams.services import TeamService
from tests.mock_utils import snapshot_of

CID = "magnum2025"


@pytest.fixture
def device():
    return {}


@pytest.fixture
def flow(device):
    return DraftFlow(DeviceStorage(device), CID)


def test_new_device_has_no_team(flow):
    assert flow.state is FlowState.NO_TEAM_CHOSEN
    assert flow.team_id is None
    assert flow.locked_submission() is None


def test_choose_team_then_draft(db, flow):
    team = flow.choose_team(db, "lions")
    assert team.display_name == "Lions"
    assert flow.state is FlowState.TEAM_CHOSEN

    picks = flow.record_pick(db, "1", "Tigers")
    assert picks == [DraftPick("1", "Lions", "Tigers", "Tigers")]
    assert flow.state is FlowState.DRAFTING


def test_choose_submitted_team_keeps_state(db, flow):
    TeamService.team_ref(db, CID, "owls").update({"hasSubmitted": True})
    with pytest.raises(AlreadySubmitted):
        flow.choose_team(db, "owls")
    assert flow.state is FlowState.NO_TEAM_CHOSEN


def test_pick_without_team(db, flow):
    with pytest.raises(NoTeamSelected):
        flow.record_pick(db, "1", "Lions")


def test_repick_overwrites_and_moves_to_end(db, flow):
    flow.choose_team(db, "lions")
    flow.record_pick(db, "1", "Lions")
    flow.record_pick(db, "2", "Bears")
    picks = flow.record_pick(db, "1", "Tigers")

    assert [(p.match_id, p.winner_name) for p in picks] == [
        ("2", "Bears"),
        ("1", "Tigers"),
    ]
    assert len({p.match_id for p in flow.drafts.load()}) == 2


def test_pick_unknown_match(db, flow):
    flow.choose_team(db, "lions")
    with pytest.raises(NotFoundError):
        flow.record_pick(db, "99", "Lions")


def test_pick_winner_not_in_match(db, flow):
    flow.choose_team(db, "lions")
    with pytest.raises(ValidationError):
        flow.record_pick(db, "1", "Owls")


def test_pick_after_deadline(db, flow):
    flow.choose_team(db, "lions")
    late = datetime.datetime(2100, 1, 1, tzinfo=datetime.timezone.utc)
    with pytest.raises(DeadlinePassed):
        flow.record_pick(db, "1", "Lions", now=late)
    assert flow.drafts.is_empty()


def test_submit_empty_draft(db, flow, transactional):
    flow.choose_team(db, "lions")
    with pytest.raises(NothingToSubmit):
        flow.submit(db)
    assert flow.state is FlowState.TEAM_CHOSEN


def test_submit_locks_and_clears_draft(db, flow, device, transactional):
    flow.choose_team(db, "lions")
    flow.record_pick(db, "1", "Lions")
    flow.record_pick(db, "2", "Owls")

    submission = flow.submit(db)

    assert flow.state is FlowState.LOCKED
    assert flow.drafts.is_empty()
    assert flow.locked_submission() == submission
    assert snapshot_of(db, CID)["teams"]["lions"]["hasSubmitted"] is True
    assert not flow.is_stale(db)
    assert set(device) == {f"{CID}:teamName", f"{CID}:lockedPredictions"}


def test_locked_device_rejects_changes(db, flow, transactional):
    flow.choose_team(db, "lions")
    flow.record_pick(db, "1", "Lions")
    flow.submit(db)

    with pytest.raises(AlreadySubmitted):
        flow.record_pick(db, "2", "Owls")
    with pytest.raises(AlreadySubmitted):
        flow.choose_team(db, "tigers")
    with pytest.raises(AlreadySubmitted):
        flow.submit(db)
    assert flow.state is FlowState.LOCKED


def test_failed_submit_keeps_draft(db, flow, transactional):
    flow.choose_team(db, "lions")
    flow.record_pick(db, "1", "Lions")
    TeamService.team_ref(db, CID, "lions").update({"hasSubmitted": True})

    with pytest.raises(AlreadySubmitted):
        flow.submit(db)
    assert flow.state is FlowState.DRAFTING
    assert len(flow.drafts.load()) == 1


def test_reset_elsewhere_makes_locked_copy_stale(db, flow, transactional):
    flow.choose_team(db, "lions")
    flow.record_pick(db, "1", "Lions")
    flow.submit(db)

    TeamService.reset_all(db, CID)

    assert flow.is_stale(db)
    assert flow.state is FlowState.LOCKED


def test_forget_returns_to_start(db, flow, device, transactional):
    flow.choose_team(db, "lions")
    flow.record_pick(db, "1", "Lions")
    flow.submit(db)

    flow.forget()

    assert flow.state is FlowState.NO_TEAM_CHOSEN
    assert device == {}


def test_devices_are_independent(db, transactional):
    first = DraftFlow(DeviceStorage({}), CID)
    second = DraftFlow(DeviceStorage({}), CID)
    first.choose_team(db, "lions")
    second.choose_team(db, "lions")
    first.record_pick(db, "1", "Lions")
    second.record_pick(db, "1", "Tigers")

    first.submit(db)
    with pytest.raises(AlreadySubmitted):
        second.submit(db)

    assert second.state is FlowState.DRAFTING
    stored = snapshot_of(db, CID)["submissions"]["lions"]
    assert stored["predictions"]["0"]["winner"] == "Lions"


def test_drafts_are_namespaced_by_competition(device):
    storage = DeviceStorage(device)
    DraftStore(storage, "a").put(DraftPick("1", "X", "Y", "X"))
    assert DraftStore(storage, "b").is_empty()
    assert not DraftStore(storage, "a").is_empty()


def test_catalog_view_shows_names_and_picks(db, flow):
    flow.choose_team(db, "lions")
    flow.record_pick(db, "2", "Bears")

    assert flow.catalog_view(db) == [
        {"id": "1", "sideA": "Lions", "sideB": "Tigers", "winner": None},
        {"id": "2", "sideA": "Bears", "sideB": "Owls", "winner": "Bears"},
    ]
