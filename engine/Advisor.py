"""
Move suggestions and stuck detection. Read-only over a GameState.
"""
import logging

from engine import Rules
from engine.State import (
    FoundationSource,
    FoundationTarget,
    MoveSource,
    MoveTarget,
    TableauSource,
    TableauTarget,
    WasteSource,
)

logger = logging.getLogger(__name__)


def _indexOf(pile, card):
    for i, c in enumerate(pile):
        if c is card:
            return i
    return -1


def movableUnit(state, card, source: MoveSource):
    """
    The cards that would travel together when `card` is picked up from `source`,
    or None if `card` is not movable from there.
    """
    if isinstance(source, WasteSource):
        if state.waste and state.waste[-1] is card:
            return [card]
        return None
    if isinstance(source, FoundationSource):
        pile = state.foundationFor(card.suit)
        if pile and pile[-1] is card:
            return [card]
        return None
    if isinstance(source, TableauSource):
        if not 0 <= source.columnIndex < len(state.tableau):
            return None
        column = state.tableau[source.columnIndex]
        idx = _indexOf(column, card)
        if idx < 0:
            return None
        unit = column[idx:]
        if not Rules.isValidRun(unit):
            return None
        return unit
    logger.warning("unrecognised move source: %r", source)
    return None


def findBestMove(state, card, source: MoveSource) -> MoveTarget | None:
    unit = movableUnit(state, card, source)
    if unit is None:
        return None

    if len(unit) == 1 and Rules.canMoveToFoundation(card, state.foundationFor(card.suit)):
        return FoundationTarget(card.suit)

    sourceColumn = source.columnIndex if isinstance(source, TableauSource) else -1
    candidates = [i for i in range(len(state.tableau)) if i != sourceColumn]
    nonEmpty = [i for i in candidates if state.tableau[i]]
    empty = [i for i in candidates if not state.tableau[i]]
    for i in nonEmpty + empty:
        if Rules.canMoveRunToTableau(unit, state.tableau[i]):
            return TableauTarget(i)
    return None


def _hasTableauDestination(state, card, excludeColumn=-1, allowEmpty=True):
    for i, column in enumerate(state.tableau):
        if i == excludeColumn or (not allowEmpty and not column):
            continue
        if Rules.canMoveToTableau(card, column):
            return True
    return False


def hasAnyMove(state, passLimit, stockPassesUsed) -> bool:
    if state.stock:
        return True
    if state.waste and Rules.canRecycle(passLimit, stockPassesUsed):
        return True

    if state.waste:
        top = state.waste[-1]
        if Rules.canMoveToFoundation(top, state.foundationFor(top.suit)):
            return True
        if _hasTableauDestination(state, top):
            return True

    for s, column in enumerate(state.tableau):
        if not column:
            continue
        top = column[-1]
        if top.faceUp and Rules.canMoveToFoundation(top, state.foundationFor(top.suit)):
            return True
        for idx in Rules.validRunStarts(column):
            # a whole column moved into an empty one leaves the board as it was
            if _hasTableauDestination(state, column[idx], excludeColumn=s, allowEmpty=idx > 0):
                return True
    return False
