"""Tests for the team registry service."""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock, patch

from sweepstake.core.constants import FIRESTORE_BATCH_LIMIT
from sweepstake.errors import AlreadySubmitted, NoTeamSelected, NotFoundError
from sweepstake.teams.models import Team
from sweepstake.teams.services import TeamService
from tests.mock_utils import MockFirestoreBuilder, seed_competition, snapshot_of

CID = "magnum2025"


class TestTeamService(unittest.TestCase):
    """Test case for the TeamService."""

    def setUp(self) -> None:
        self.db = MockFirestoreBuilder.build()
        seed_competition(
            self.db,
            teams={
                "lions": "Lions",
                "tigers": "tigers",
                "bears": "Bears",
                "owls": "Owls",
            },
        )

    def flag(self, team_id: str, value: bool) -> None:
        TeamService.team_ref(self.db, CID, team_id).update({"hasSubmitted": value})

    def test_list_teams_sorted_by_name(self) -> None:
        teams = TeamService.list_teams(self.db, CID)
        self.assertEqual(
            [team.display_name for team in teams], ["Bears", "Lions", "Owls", "tigers"]
        )

    def test_list_teams_shows_submitted_teams(self) -> None:
        self.flag("owls", True)
        teams = {team.id: team for team in TeamService.list_teams(self.db, CID)}
        self.assertEqual(len(teams), 4)
        self.assertTrue(teams["owls"].has_submitted)
        self.assertEqual(
            teams["owls"].to_dict(),
            {"id": "owls", "name": "Owls", "hasSubmitted": True},
        )

    def test_list_teams_for_unknown_competition(self) -> None:
        self.assertEqual(TeamService.list_teams(self.db, "nope"), [])

    def test_team_name_falls_back_to_id(self) -> None:
        TeamService.team_ref(self.db, CID, "wolves").set({"hasSubmitted": False})
        self.assertEqual(TeamService.get_team(self.db, CID, "wolves").display_name, "wolves")

    def test_select_team(self) -> None:
        team = TeamService.select_team(self.db, CID, "lions")
        self.assertEqual(team, Team("lions", "Lions", False))

    def test_select_team_requires_a_team(self) -> None:
        with self.assertRaises(NoTeamSelected) as ctx:
            TeamService.select_team(self.db, CID, "")
        self.assertEqual(ctx.exception.message, "Please select a team")

    def test_select_unknown_team(self) -> None:
        with self.assertRaises(NotFoundError):
            TeamService.select_team(self.db, CID, "wolves")

    def test_select_submitted_team_reads_the_registry(self) -> None:
        # A list fetched before the flag flipped must not matter.
        stale_list = TeamService.list_teams(self.db, CID)
        self.assertFalse(any(team.has_submitted for team in stale_list))
        self.flag("lions", True)

        with self.assertRaises(AlreadySubmitted) as ctx:
            TeamService.select_team(self.db, CID, "lions")
        self.assertEqual(
            ctx.exception.message, "Lions has already entered their predictions!"
        )

    def test_reset_all_clears_flags_and_keeps_records(self) -> None:
        self.flag("lions", True)
        self.flag("owls", True)
        submissions = self.db.collection("competitions").document(CID).collection(
            "submissions"
        )
        submissions.document("lions").set({"teamId": "lions", "predictions": {}})

        count = TeamService.reset_all(self.db, CID)

        self.assertEqual(count, 4)
        state = snapshot_of(self.db, CID)
        self.assertFalse(any(team["hasSubmitted"] for team in state["teams"].values()))
        self.assertIn("lions", state["submissions"])

    def test_reset_all_is_idempotent(self) -> None:
        TeamService.reset_all(self.db, CID)
        before = snapshot_of(self.db, CID)
        TeamService.reset_all(self.db, CID)
        self.assertEqual(snapshot_of(self.db, CID), before)

    def test_reset_all_on_empty_registry(self) -> None:
        self.assertEqual(TeamService.reset_all(self.db, "nope"), 0)

    def test_reset_all_commits_in_chunks(self) -> None:
        mock_db = MagicMock()
        docs = []
        for i in range(FIRESTORE_BATCH_LIMIT + 5):
            doc = MagicMock()
            doc.exists = True
            doc.reference = f"ref-{i}"
            docs.append(doc)
        with patch.object(TeamService, "teams_ref") as mock_teams_ref:
            mock_teams_ref.return_value.stream.return_value = docs
            count = TeamService.reset_all(mock_db, CID)

        self.assertEqual(count, FIRESTORE_BATCH_LIMIT + 5)
        self.assertEqual(mock_db.batch.call_count, 2)
        self.assertEqual(mock_db.batch.return_value.commit.call_count, 2)


class TestSubscribeTeams(unittest.TestCase):
    """Test case for the live registry feed."""

    def test_delivers_sorted_full_list(self) -> None:
        query = MagicMock()
        callback = MagicMock()
        with patch.object(TeamService, "teams_ref", return_value=query):
            subscription = TeamService.subscribe_teams(MagicMock(), CID, callback)

        on_snapshot = query.on_snapshot.call_args[0][0]
        docs = []
        for team_id, data in [
            ("tigers", {"teamName": "Tigers", "hasSubmitted": True}),
            ("bears", {"teamName": "Bears", "hasSubmitted": False}),
        ]:
            doc = MagicMock()
            doc.id = team_id
            doc.exists = True
            doc.to_dict.return_value = data
            docs.append(doc)
        on_snapshot(docs, [], None)

        callback.assert_called_once_with(
            [Team("bears", "Bears", False), Team("tigers", "Tigers", True)]
        )
        subscription.close()


if __name__ == "__main__":
    unittest.main()
