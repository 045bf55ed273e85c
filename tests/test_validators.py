"""Unit tests for validation functions."""

from matchtrack.models import Player, ReconciledScore, TeamAssignment
from matchtrack.validators import (
    validate_reconciled_scores,
    validate_roster,
    validate_team_assignment,
)


class TestRosterValidation:
    """Tests for roster validation."""

    def test_valid_roster(self):
        """Test that a valid roster passes all checks."""
        roster = [
            Player(id='p1', name='Jon'),
            Player(id='p2', name='Spartan117'),
            Player(id='p3', name='Noble Six'),
        ]
        assert validate_roster(roster) == []

    def test_duplicate_ids(self):
        """Test two players sharing an id."""
        roster = [Player(id='p1', name='Jon'), Player(id='p1', name='Arbiter')]
        errors = validate_roster(roster)

        assert len(errors) == 1
        assert 'duplicate player ids: p1' in errors[0]

    def test_blank_name(self):
        """Test a player with a blank name."""
        errors = validate_roster([Player(id='p1', name='   ')])
        assert errors == ['Player p1 has a blank name']

    def test_name_without_letters(self):
        """Test a name that normalizes to nothing can never be matched."""
        errors = validate_roster([Player(id='p1', name='???')])
        assert len(errors) == 1
        assert 'no letters or digits' in errors[0]

    def test_indistinguishable_names(self):
        """Test names equal after normalization are flagged."""
        roster = [Player(id='p1', name='Noble Six'), Player(id='p2', name='noble_six')]
        errors = validate_roster(roster)

        assert len(errors) == 1
        assert 'indistinguishable' in errors[0]


class TestReconciledScoreValidation:
    """Tests for reconciled score sanity checks."""

    def test_normal_game(self):
        """Test a normal stat line passes."""
        scores = [ReconciledScore(player_id='p1', kills=25, deaths=12, assists=8)]
        assert validate_reconciled_scores(scores) == []

    def test_duplicate_player(self):
        """Test the same player twice in one game."""
        scores = [ReconciledScore(player_id='p1'), ReconciledScore(player_id='p1')]
        warnings = validate_reconciled_scores(scores)
        assert warnings == ['Player p1 has 2 score rows']

    def test_unusually_high_kills(self):
        """Test an implausible kill count (likely a misread)."""
        scores = [ReconciledScore(player_id='p1', kills=250)]
        warnings = validate_reconciled_scores(scores)

        assert len(warnings) == 1
        assert '250 kills' in warnings[0]


class TestTeamAssignmentValidation:
    """Tests for checking team splits."""

    def players(self):
        return [
            Player(id='p1', name='A', handicap=5, is_selected=True),
            Player(id='p2', name='B', handicap=4, is_selected=True),
            Player(id='p3', name='C', handicap=3, is_selected=False),
        ]

    def test_valid_partition(self):
        """Test an exact partition passes."""
        p = self.players()
        assert validate_team_assignment(TeamAssignment([p[0]], [p[1]]), p) == []

    def test_empty_assignment(self):
        """Test the not-enough-players result is not an error."""
        assert validate_team_assignment(TeamAssignment(), self.players()) == []

    def test_missing_player(self):
        """Test a selected player left off both teams."""
        p = self.players()
        errors = validate_team_assignment(TeamAssignment([p[0]], []), p)
        assert errors == ['Selected players left out: p2']

    def test_duplicate_player(self):
        """Test a player on both teams."""
        p = self.players()
        errors = validate_team_assignment(TeamAssignment([p[0], p[1]], [p[1]]), p)
        assert errors == ['Players on more than one team slot: p2']

    def test_unselected_player(self):
        """Test an unselected player placed on a team."""
        p = self.players()
        errors = validate_team_assignment(TeamAssignment([p[0], p[2]], [p[1]]), p)
        assert errors == ['Unselected players assigned: p3']
