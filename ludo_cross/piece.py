from dataclasses import dataclass, field

from .types import Position, PositionType, TokenId


@dataclass(slots=True)
class Piece:
    """Lightweight piece model. Holds state only.

    Rule logic (legal destinations, captures, forfeiture) lives in the Board;
    a piece only knows which token it is and where it currently sits.
    """

    token: TokenId
    position: Position = field(default_factory=Position.base)

    @property
    def kind(self) -> PositionType:
        return self.position.kind

    def move_to(self, new_position: Position) -> None:
        self.position = new_position

    def send_to_base(self) -> None:
        self.position = Position.base()
