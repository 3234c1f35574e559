from __future__ import annotations

from .config import FIELD_TOP
from .state import AI, PLAYER, Event, GameState

# Step rules. Callers hold `state.lock`.


def move_player(state: GameState, step: int) -> Event:
    """Move the player paddle one cell up (-1) or down (+1).

    A move that would leave the reachable range is not applied, but the
    notification is still returned so the controller re-checks the paddle.
    """
    paddle = state.player
    paddle.old_row = paddle.row
    if state.reachable(paddle.row + step):
        paddle.row += step
    return Event.INPUT_MOVED


def step_ai(state: GameState) -> Event:
    paddle = state.ai
    delta = state.ball.row - paddle.row
    new_row = paddle.row + (delta > 0) - (delta < 0)

    paddle.old_row = paddle.row
    if state.reachable(new_row):
        paddle.row = new_row
    return Event.AI_MOVED


def _catches(state, paddle):
    ball = state.ball
    # one extra cell of reach: compare against the row the ball left
    return abs(paddle.row - ball.row + ball.dir_row) <= state.config.half_paddle


def step_ball(state: GameState) -> Event:
    ball = state.ball
    ball.old_row, ball.old_col = ball.row, ball.col
    ball.row += ball.dir_row
    ball.col += ball.dir_col

    if ball.row < FIELD_TOP or ball.row > state.bottom:
        ball.dir_row = -ball.dir_row
        ball.row += 2 * ball.dir_row

    for paddle, winner in ((state.player, AI), (state.ai, PLAYER)):
        if ball.col != paddle.col:
            continue
        if _catches(state, paddle):
            ball.dir_col = -ball.dir_col
            ball.col += 2 * ball.dir_col
            break
        state.end_round(winner)
        return Event.ROUND_OVER

    return Event.BALL_MOVED
