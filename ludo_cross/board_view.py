from __future__ import annotations

from typing import List

import numpy as np

from .board import Board
from .types import Color, PositionType


def player_order_for_agent(board: Board, agent_color: Color) -> List[Color]:
    """Seated colors in turn order, rotated so ``agent_color`` comes first."""
    players = [Color(c) for c in board.config.PLAYERS]
    idx = players.index(Color(agent_color))
    return players[idx:] + players[:idx]


def build_tensor(board: Board, agent_color: Color) -> np.ndarray:
    """Build a (players + 1, TRACK_LENGTH + HOME_LANE_LENGTH + 2) occupancy tensor.

    Columns follow the agent's frame: 0 is Base, 1..TRACK_LENGTH are ring
    cells counted from the agent's start, then the lane cells, and the last
    column is Home. Lane and Home columns of other colors use their own lanes.
    The final channel marks safe and start cells.
    """
    cfg = board.config
    length = cfg.TRACK_LENGTH
    lane_col = length + 1
    home_col = length + cfg.HOME_LANE_LENGTH + 1
    agent_start = cfg.start_index(agent_color)
    order = player_order_for_agent(board, agent_color)

    tensor = np.zeros((len(order) + 1, home_col + 1), dtype=np.float32)
    for ch, color in enumerate(order):
        for token in board.tokens_of(color):
            pos = board.position(token)
            if pos.kind is PositionType.BASE:
                tensor[ch, 0] += 1.0
            elif pos.on_track:
                cell = board.cell_of(token)
                tensor[ch, 1 + (cell - agent_start) % length] += 1.0
            elif pos.kind is PositionType.HOME_LANE:
                tensor[ch, lane_col + pos.index] += 1.0
            else:
                tensor[ch, home_col] += 1.0

    marks = tensor[len(order)]
    for cell in cfg.SAFE_CELLS | cfg.start_cells:
        marks[1 + (cell - agent_start) % length] = 1.0
    return tensor


def render_text(board: Board) -> str:
    lines: List[str] = []
    for color in board.config.PLAYERS:
        color = Color(color)
        cells = " ".join(
            f"{token.slot}={board.position(token)}" for token in board.tokens_of(color)
        )
        lines.append(f"{color.name:<6} {cells}")

    occupied = np.flatnonzero(board.track_occupancy())
    track = " ".join(
        f"{cell}:[{','.join(str(t) for t in board.tokens_on_cell(int(cell)))}]"
        for cell in occupied
    )
    lines.append(f"track  {track or '-'}")
    return "\n".join(lines)
