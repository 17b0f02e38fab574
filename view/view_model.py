from dataclasses import dataclass


@dataclass(frozen=True)
class CardView:
    id: int
    suit: str
    rank: int
    face_up: bool


@dataclass(frozen=True)
class PileView:
    cards: tuple[CardView, ...]

    @property
    def top(self) -> CardView | None:
        if not self.cards:
            return None
        return self.cards[-1]


@dataclass(frozen=True)
class GameViewModel:
    stock_count: int
    waste: PileView
    foundations: tuple[PileView, ...]
    tableau: tuple[PileView, ...]
    move_count: int
    draw_count: int
    pass_limit: int
    stock_passes_used: int
    can_undo: bool
    won: bool
    can_auto_complete: bool


@dataclass(frozen=True)
class AnimationEvent:
    type: str
    payload: dict
