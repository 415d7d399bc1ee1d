"""
Read-only model of a competition snapshot.

The snapshot arrives as nested JSON with camelCase keys. Every class here
has a ``from_dict`` constructor; optional sections that are absent in the
JSON are stored as ``None`` rather than as empty placeholder objects.
"""
from enum import Enum
from typing import Optional

from .errors import SnapshotFormatError


RESULT_WON = 'won'
RESULT_TIED = 'tied'
RESULT_UNKNOWN = 'unknown'
RESULTS = (RESULT_WON, RESULT_TIED, RESULT_UNKNOWN)


def _require(data, key, owner):
    if not isinstance(data, dict):
        raise SnapshotFormatError(f"{owner} must be an object, got {type(data).__name__}")
    if key not in data:
        raise SnapshotFormatError(f"{owner} is missing '{key}'")
    return data[key]


class Robot:
    def __init__(self, id, name):
        self.id = id
        self.name = name

    @classmethod
    def from_dict(cls, data: dict) -> 'Robot':
        name = _require(data, 'name', 'robot')
        return cls(id=data.get('id'), name=name)

    def __eq__(self, other):
        return isinstance(other, Robot) and (self.id, self.name) == (other.id, other.name)

    def __hash__(self):
        return hash((self.id, self.name))

    def __repr__(self):
        return f"Robot(id={self.id}, name={self.name})"


class Score:
    """One reported value; invalid readings never count toward a side's total."""

    def __init__(self, is_valid, value=None):
        self.is_valid = is_valid
        self.value = value

    @classmethod
    def from_dict(cls, data: dict) -> 'Score':
        if not isinstance(data, dict):
            raise SnapshotFormatError(f"score must be an object, got {type(data).__name__}")
        return cls(is_valid=bool(data.get('isValid', False)), value=data.get('value'))

    def __repr__(self):
        return f"Score(is_valid={self.is_valid}, value={self.value})"


class Round:
    def __init__(self, scores, has_ended):
        self.scores = scores  # one list of Score per side, side order matches Game.robots
        self.has_ended = has_ended

    @classmethod
    def from_dict(cls, data: dict) -> 'Round':
        raw_scores = data.get('scores') if isinstance(data, dict) else None
        scores = []
        for side in raw_scores or []:
            scores.append(tuple(Score.from_dict(s) for s in side or []))
        return cls(scores=tuple(scores), has_ended=bool(_require(data, 'hasEnded', 'round')))

    def __repr__(self):
        return f"Round(scores={self.scores}, has_ended={self.has_ended})"


class FreeThrows:
    """Tiebreak scores, one raw value per side."""

    def __init__(self, scores):
        self.scores = scores

    @classmethod
    def from_dict(cls, data: dict) -> 'FreeThrows':
        scores = _require(data, 'scores', 'freeThrows')
        if not isinstance(scores, list) or len(scores) != 2:
            raise SnapshotFormatError("freeThrows.scores must hold exactly two values")
        return cls(scores=tuple(scores))

    def __repr__(self):
        return f"FreeThrows(scores={self.scores})"


class GameStatus:
    """
    Terminal status of a game.

    The round counters are the tally of the winning side when the game is
    won, and are only meaningful once ``result`` is no longer unknown.
    """

    def __init__(self, result, winner=None, round_win_count=0, round_tie_count=0, round_loss_count=0):
        self.result = result
        self.winner = winner
        self.round_win_count = round_win_count
        self.round_tie_count = round_tie_count
        self.round_loss_count = round_loss_count

    @classmethod
    def from_dict(cls, data: dict) -> 'GameStatus':
        result = _require(data, 'result', 'game status')
        if result not in RESULTS:
            raise SnapshotFormatError(f"unknown game result '{result}'")
        winner = data.get('winner')
        if result == RESULT_WON and not winner:
            raise SnapshotFormatError("a won game must name its winner")
        return cls(
            result=result,
            winner=Robot.from_dict(winner) if winner else None,
            round_win_count=data.get('roundWinCount', 0),
            round_tie_count=data.get('roundTieCount', 0),
            round_loss_count=data.get('roundLossCount', 0),
        )

    def __repr__(self):
        return (f"GameStatus(result={self.result}, winner={self.winner}, "
                f"tally={self.round_win_count}/{self.round_tie_count}/{self.round_loss_count})")


class Game:
    def __init__(self, id, robots, rounds, status, free_throws=None):
        self.id = id
        self.robots = robots
        self.rounds = rounds
        self.status = status
        self.free_throws = free_throws

    @classmethod
    def from_dict(cls, data: dict) -> 'Game':
        robots = _require(data, 'robots', 'game')
        if not isinstance(robots, list) or len(robots) != 2:
            raise SnapshotFormatError(f"game {data.get('id')} must have exactly two robots")
        free_throws = data.get('freeThrows')
        return cls(
            id=data.get('id'),
            robots=tuple(Robot.from_dict(r) for r in robots),
            rounds=tuple(Round.from_dict(r) for r in data.get('rounds') or []),
            status=GameStatus.from_dict(_require(data, 'status', 'game')),
            free_throws=FreeThrows.from_dict(free_throws) if free_throws else None,
        )

    def __repr__(self):
        return f"Game(id={self.id}, robots={self.robots}, rounds={len(self.rounds)}, status={self.status})"


class GameStage(Enum):
    NO_LOSS = 'noLoss'
    ONE_LOSS = 'oneLoss'
    FINAL = 'final'

    @classmethod
    def parse(cls, tag: str) -> 'GameStage':
        """Map a stage tag to its stage; ``final`` and every ``*Final`` tag is FINAL."""
        if tag == 'noLoss':
            return cls.NO_LOSS
        if tag == 'oneLoss':
            return cls.ONE_LOSS
        if isinstance(tag, str) and (tag == 'final' or tag.endswith('Final')):
            return cls.FINAL
        raise SnapshotFormatError(f"unknown game stage '{tag}'")


class GameType:
    """Stage of a bracket game, with the raw tag kept as the final's name."""

    def __init__(self, stage, name):
        self.stage = stage
        self.name = name

    @classmethod
    def from_tag(cls, tag: str) -> 'GameType':
        return cls(stage=GameStage.parse(tag), name=tag)

    @property
    def is_final(self) -> bool:
        return self.stage is GameStage.FINAL

    def __repr__(self):
        return f"GameType(stage={self.stage.name}, name={self.name})"


class DoubleEliminationInfo:
    """
    Double elimination bracket state.

    ``no_loss_queue`` and ``one_loss_queue`` list robots waiting for their
    next match on that side, in pairing order. ``eliminated_robots`` lists
    robots in the order they were knocked out, earliest first, so the final
    entries are the lower podium places.
    """

    def __init__(self, robots, games, game_types, no_loss_queue, one_loss_queue, eliminated_robots):
        self.robots = robots
        self.games = games
        self.game_types = game_types
        self.no_loss_queue = no_loss_queue
        self.one_loss_queue = one_loss_queue
        self.eliminated_robots = eliminated_robots

    @classmethod
    def from_dict(cls, data: dict) -> 'DoubleEliminationInfo':
        game_types = {}
        for game_id, tag in (data.get('gameTypes') or {}).items():
            game_types[str(game_id)] = GameType.from_tag(tag)
        return cls(
            robots=tuple(Robot.from_dict(r) for r in data.get('robots') or []),
            games=tuple(Game.from_dict(g) for g in data.get('games') or []),
            game_types=game_types,
            no_loss_queue=tuple(Robot.from_dict(r) for r in data.get('noLossQueue') or []),
            one_loss_queue=tuple(Robot.from_dict(r) for r in data.get('oneLossQueue') or []),
            eliminated_robots=tuple(Robot.from_dict(r) for r in data.get('eliminatedRobots') or []),
        )

    def game_type(self, game: Game) -> Optional[GameType]:
        return self.game_types.get(str(game.id))

    def __repr__(self):
        return (f"DoubleEliminationInfo(robots={len(self.robots)}, games={len(self.games)}, "
                f"eliminated={len(self.eliminated_robots)})")


class Bye:
    def __init__(self, robot_id):
        self.robot_id = robot_id

    @classmethod
    def from_dict(cls, data: dict) -> 'Bye':
        return cls(robot_id=_require(data, 'robotID', 'bye'))

    def __repr__(self):
        return f"Bye(robot_id={self.robot_id})"


class RobotScore:
    def __init__(self, robot, score, tie_break_score):
        self.robot = robot
        self.score = score
        self.tie_break_score = tie_break_score

    @classmethod
    def from_dict(cls, data: dict) -> 'RobotScore':
        return cls(
            robot=Robot.from_dict(_require(data, 'robot', 'robot score')),
            score=data.get('score', 0),
            tie_break_score=data.get('tieBreakScore', 0),
        )

    def __repr__(self):
        return f"RobotScore(robot={self.robot.name}, score={self.score}, tie_break_score={self.tie_break_score})"


class SwissSystemInfo:
    """Swiss tournament state; ``byes[i]`` is the bye of round i, or None."""

    def __init__(self, robots, round_count, games, byes, robot_scores):
        self.robots = robots
        self.round_count = round_count
        self.games = games
        self.byes = byes
        self.robot_scores = robot_scores

    @classmethod
    def from_dict(cls, data: dict) -> 'SwissSystemInfo':
        return cls(
            robots=tuple(Robot.from_dict(r) for r in data.get('robots') or []),
            round_count=data.get('roundCount', 0),
            games=tuple(Game.from_dict(g) for g in data.get('games') or []),
            byes=tuple(Bye.from_dict(b) if b else None for b in data.get('byes') or []),
            robot_scores=tuple(RobotScore.from_dict(s) for s in data.get('robotScores') or []),
        )

    def __repr__(self):
        return f"SwissSystemInfo(robots={len(self.robots)}, round_count={self.round_count}, games={len(self.games)})"


class CompetitionSnapshot:
    def __init__(self, name=None, robots=(), double_elimination=None, swiss_system=None):
        self.name = name
        self.robots = robots
        self.double_elimination = double_elimination
        self.swiss_system = swiss_system

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'CompetitionSnapshot':
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise SnapshotFormatError(f"competition snapshot must be an object, got {type(data).__name__}")
        de_info = data.get('doubleEliminationTournament')
        swiss_info = data.get('swissSystemTournament')
        return cls(
            name=data.get('name') or None,
            robots=tuple(Robot.from_dict(r) for r in data.get('robots') or []),
            double_elimination=DoubleEliminationInfo.from_dict(de_info) if de_info else None,
            swiss_system=SwissSystemInfo.from_dict(swiss_info) if swiss_info else None,
        )

    @property
    def is_configured(self) -> bool:
        """False when no competition has been set up yet."""
        return bool(self.name)

    def __repr__(self):
        return f"CompetitionSnapshot(name={self.name}, robots={len(self.robots)})"
