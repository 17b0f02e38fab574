from engine.Core import (
    FLIPPED,
    LANDED,
    AnimationMarker,
    CardMove,
    Core,
    FoundationLand,
    GameEvent,
    RevealTop,
    StockDraw,
    StockRecycle,
)
from engine.State import FoundationSource, FoundationTarget, TableauSource, WasteSource
from view.view_model import AnimationEvent, CardView, GameViewModel, PileView


def _source_payload(source):
    if isinstance(source, WasteSource):
        return {"kind": "waste"}
    if isinstance(source, FoundationSource):
        return {"kind": "foundation"}
    if isinstance(source, TableauSource):
        return {"kind": "tableau", "column": source.columnIndex}
    return {"kind": "unknown"}


def _target_payload(target):
    if isinstance(target, FoundationTarget):
        return {"kind": "foundation", "suit": target.suit}
    return {"kind": "tableau", "column": target.columnIndex}


class CoreAdapter:
    """Bridges the live Core state/events to a renderer-friendly model."""

    @staticmethod
    def card_view(card) -> CardView:
        return CardView(id=card.id, suit=card.suit, rank=card.rank, face_up=card.faceUp)

    @staticmethod
    def pile_view(pile) -> PileView:
        return PileView(cards=tuple(CoreAdapter.card_view(card) for card in pile))

    @staticmethod
    def snapshot(core: Core) -> GameViewModel:
        state = core.getState()
        return GameViewModel(
            stock_count=len(state.stock),
            waste=CoreAdapter.pile_view(state.waste),
            foundations=tuple(CoreAdapter.pile_view(p) for p in state.foundations),
            tableau=tuple(CoreAdapter.pile_view(c) for c in state.tableau),
            move_count=core.getMoveCount(),
            draw_count=core.getDrawCount(),
            pass_limit=core.getPassLimit(),
            stock_passes_used=core.getStockPass(),
            can_undo=core.canUndo(),
            won=core.checkWin(),
            can_auto_complete=core.canAutoComplete(),
        )

    @staticmethod
    def event_to_animation(event: GameEvent) -> AnimationEvent:
        if isinstance(event, CardMove):
            return AnimationEvent(
                type="MOVE",
                payload={
                    "cards": tuple(card.id for card in event.cards),
                    "src": _source_payload(event.source),
                    "dest": _target_payload(event.dest),
                },
            )
        if isinstance(event, StockDraw):
            return AnimationEvent(
                type="DRAW",
                payload={"cards": tuple(card.id for card in event.cards)},
            )
        if isinstance(event, StockRecycle):
            return AnimationEvent(
                type="RECYCLE",
                payload={"count": event.count, "pass": event.passNumber},
            )
        if isinstance(event, RevealTop):
            return AnimationEvent(
                type="REVEAL",
                payload={"column": event.columnIndex, "card": event.card.id},
            )
        if isinstance(event, FoundationLand):
            return AnimationEvent(
                type="LAND",
                payload={"suit": event.card.suit, "card": event.card.id},
            )
        return AnimationEvent(type="UNKNOWN", payload={"event": type(event).__name__})

    @staticmethod
    def marker_to_animation(marker: AnimationMarker) -> AnimationEvent:
        if marker.kind == LANDED:
            return AnimationEvent(type="LAND", payload={"suit": marker.card.suit, "card": marker.card.id})
        if marker.kind == FLIPPED:
            return AnimationEvent(type="FLIP", payload={"card": marker.card.id})
        return AnimationEvent(type="UNKNOWN", payload={"marker": marker.kind})
