import configparser
import copy
import logging
import random
from collections import deque
from dataclasses import dataclass
from pathlib import Path

from engine import Advisor, Rules
from engine.Cards import NUM_PER_SUIT, Card, createDeck, decodeStack, encodeStack, shuffleDeck
from engine.Interface import Interface
from engine.State import (
    FoundationSource,
    FoundationTarget,
    GameState,
    MoveSource,
    MoveTarget,
    TableauSource,
    TableauTarget,
    WasteSource,
)

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 100


class GameConfig:
    DRAW_COUNTS = (1, 3)
    SECTION = "game"

    def __init__(self):
        self.drawCount = 1
        self.passLimit = 0  # 0 means unlimited
        self.historyLimit = DEFAULT_HISTORY_LIMIT
        self.seed = None

    @staticmethod
    def _asInt(value, default):
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    @staticmethod
    def fromDict(data):
        config = GameConfig()
        drawCount = GameConfig._asInt(data.get("drawCount"), config.drawCount)
        if drawCount in GameConfig.DRAW_COUNTS:
            config.drawCount = drawCount
        passLimit = GameConfig._asInt(data.get("passLimit"), config.passLimit)
        if passLimit >= 0:
            config.passLimit = passLimit
        historyLimit = GameConfig._asInt(data.get("historyLimit"), config.historyLimit)
        if historyLimit > 0:
            config.historyLimit = historyLimit
        config.seed = GameConfig._asInt(data.get("seed"), None)
        return config

    @staticmethod
    def loadFromFile(path):
        parser = configparser.ConfigParser()
        parser.optionxform = str
        path = Path(path)
        if not path.exists():
            return GameConfig()
        try:
            parser.read(path, encoding="utf-8")
        except configparser.Error:
            logger.warning("unreadable config file %s, using defaults", path)
            return GameConfig()
        if GameConfig.SECTION not in parser:
            return GameConfig()
        return GameConfig.fromDict(dict(parser[GameConfig.SECTION]))

    def saveToFile(self, path):
        parser = configparser.ConfigParser()
        # configparser lowercases option names by default
        parser.optionxform = str
        data = {
            "drawCount": str(self.drawCount),
            "passLimit": str(self.passLimit),
            "historyLimit": str(self.historyLimit),
        }
        if self.seed is not None:
            data["seed"] = str(self.seed)
        parser[GameConfig.SECTION] = data
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            parser.write(f)


class GameEvent:
    def isAuto(self) -> bool:
        return False


class CardMove(GameEvent):
    def __init__(self, cards, source, dest):
        self.cards = list(cards)
        self.source = source
        self.dest = dest


class StockDraw(GameEvent):
    def __init__(self, cards):
        self.cards = list(cards)


class StockRecycle(GameEvent):
    def __init__(self, count, passNumber):
        self.count = count
        self.passNumber = passNumber


class RevealTop(GameEvent):
    def __init__(self, columnIndex, card):
        self.columnIndex = columnIndex
        self.card = card

    def isAuto(self):
        return True


class FoundationLand(GameEvent):
    def __init__(self, card):
        self.card = card

    def isAuto(self):
        return True


LANDED = "LANDED"
FLIPPED = "FLIPPED"


@dataclass(frozen=True)
class AnimationMarker:
    kind: str
    card: Card


@dataclass
class Checkpoint:
    state: GameState
    moveCount: int
    stockPassesUsed: int


class HistoryRecorder:
    def __init__(self, limit=DEFAULT_HISTORY_LIMIT):
        if limit <= 0:
            raise ValueError(f"history limit must be positive, got {limit}")
        self.limit = limit
        # the oldest checkpoint falls off the left end
        self.lst = deque(maxlen=limit)
        self.evicted = None

    def log(self, entry: Checkpoint):
        self.evicted = self.lst[0] if len(self.lst) == self.limit else None
        self.lst.append(entry)

    def rollback(self):
        """
        Takes back the latest log() and restores whatever it pushed out.
        """
        if not self.lst:
            return False
        self.lst.pop()
        if self.evicted is not None:
            self.lst.appendleft(self.evicted)
            self.evicted = None
        return True

    def pop(self):
        if not self.lst:
            return None
        self.evicted = None
        return self.lst.pop()

    def canUndo(self):
        return len(self.lst) > 0

    def clear(self):
        self.lst.clear()
        self.evicted = None

    def __len__(self):
        return len(self.lst)


class Core:
    """
    One game session: the board, its counters and the undo history.

    Commands return True/False (or a value/None) and never leave the board half-changed.
    Card arguments must be the objects currently on the board, as returned by getState().
    """

    def __init__(self, config: GameConfig = None, interface: Interface = None):
        self.config = config if config is not None else GameConfig()
        self.rng = random.Random(self.config.seed)
        self.interface = None
        self.registerInterface(interface if interface is not None else Interface())

        self.state = GameState()
        self.moveCount = 0
        self.stockPassesUsed = 0
        self.gameEnded = False
        self.history = HistoryRecorder(self.config.historyLimit)
        self.pendingAnimations = []

    def registerInterface(self, interface):
        self.interface = interface
        interface.core = self

    # ---- lifecycle ----

    def newGame(self):
        deck = shuffleDeck(createDeck(), self.rng)
        self.state.restore(GameState.deal(deck))
        self.moveCount = 0
        self.stockPassesUsed = 0
        self.gameEnded = False
        self.history.clear()
        self.pendingAnimations.clear()
        logger.info("new game: drawCount=%d passLimit=%d", self.config.drawCount, self.config.passLimit)
        self.interface.onStart()
        return self.state

    def checkWin(self):
        return all(len(pile) == NUM_PER_SUIT for pile in self.state.foundations)

    def canAutoComplete(self):
        state = self.state
        if state.stock or state.waste:
            return False
        return all(card.faceUp for column in state.tableau for card in column)

    def consumeAnimations(self):
        markers = list(self.pendingAnimations)
        self.pendingAnimations.clear()
        return markers

    # ---- queries ----

    def getState(self):
        return self.state

    def getMoveCount(self):
        return self.moveCount

    def getDrawCount(self):
        return self.config.drawCount

    def setDrawCount(self, n):
        if n not in GameConfig.DRAW_COUNTS:
            raise ValueError(f"draw count must be one of {GameConfig.DRAW_COUNTS}, got {n}")
        self.config.drawCount = n

    def getPassLimit(self):
        return self.config.passLimit

    def setPassLimit(self, n):
        if n < 0:
            raise ValueError(f"pass limit must be >= 0, got {n}")
        self.config.passLimit = n

    def getStockPass(self):
        return self.stockPassesUsed

    def canUndo(self):
        return self.history.canUndo()

    def hasAnyMove(self):
        return Advisor.hasAnyMove(self.state, self.config.passLimit, self.stockPassesUsed)

    def findBestMove(self, card: Card, source: MoveSource) -> MoveTarget | None:
        return Advisor.findBestMove(self.state, card, source)

    # ---- history ----

    def checkpoint(self):
        self.history.log(Checkpoint(copy.deepcopy(self.state), self.moveCount, self.stockPassesUsed))

    def discardCheckpoint(self):
        """
        Drops the checkpoint just taken, for an action that turned out to change nothing.
        """
        return self.history.rollback()

    def undo(self):
        entry = self.history.pop()
        if entry is None:
            return False
        self.state.restore(entry.state)
        self.moveCount = entry.moveCount
        self.stockPassesUsed = entry.stockPassesUsed
        self.gameEnded = self.checkWin()
        self.pendingAnimations.clear()
        logger.debug("undo: %d checkpoints left", len(self.history))
        self.interface.onUndo()
        return True

    # ---- stock ----

    def draw(self):
        state = self.state
        if state.stock:
            count = min(self.config.drawCount, len(state.stock))
            drawn = []
            for _ in range(count):
                card = state.stock.pop()
                card.faceUp = True
                state.waste.append(card)
                drawn.append(card)
            self.moveCount += 1
            logger.debug("drew %d card(s)", count)
            self.interface.onEvent(StockDraw(drawn))
            return True

        if state.waste and Rules.canRecycle(self.config.passLimit, self.stockPassesUsed):
            for card in state.waste:
                card.faceUp = False
            state.stock.extend(reversed(state.waste))
            state.waste.clear()
            self.stockPassesUsed += 1
            logger.debug("recycled waste, pass %d", self.stockPassesUsed)
            self.interface.onEvent(StockRecycle(len(state.stock), self.stockPassesUsed))
            return True

        logger.debug("draw rejected: stock empty, recycle unavailable")
        return False

    # ---- moves ----

    def _sourcePile(self, source: MoveSource, card: Card):
        if isinstance(source, WasteSource):
            return self.state.waste
        if isinstance(source, FoundationSource):
            return self.state.foundationFor(card.suit)
        if isinstance(source, TableauSource):
            if 0 <= source.columnIndex < len(self.state.tableau):
                return self.state.tableau[source.columnIndex]
            return None
        logger.warning("unrecognised move source: %r", source)
        return None

    @staticmethod
    def _isTopOf(pile, cards):
        n = len(cards)
        if n == 0 or n > len(pile):
            return False
        return all(a is b for a, b in zip(pile[len(pile) - n:], cards))

    def _revealTop(self, source):
        if not isinstance(source, TableauSource):
            return
        column = self.state.tableau[source.columnIndex]
        if column and not column[-1].faceUp:
            card = column[-1]
            card.faceUp = True
            self.pendingAnimations.append(AnimationMarker(FLIPPED, card))
            self.interface.onEvent(RevealTop(source.columnIndex, card))

    def _afterMove(self):
        if not self.gameEnded and self.checkWin():
            self.gameEnded = True
            logger.info("game won in %d moves", self.moveCount)
            self.interface.onWin()

    def moveToFoundation(self, card: Card, source: MoveSource, skipCount=False) -> bool:
        pile = self._sourcePile(source, card)
        if pile is None or not card.faceUp or not self._isTopOf(pile, [card]):
            logger.debug("foundation move rejected: %r is not on top of %r", card, source)
            return False
        foundation = self.state.foundationFor(card.suit)
        if not Rules.canMoveToFoundation(card, foundation):
            logger.debug("foundation move rejected: %r", card)
            return False

        pile.pop()
        foundation.append(card)
        if not skipCount:
            self.moveCount += 1
        self.pendingAnimations.append(AnimationMarker(LANDED, card))
        self.interface.onEvent(CardMove([card], source, FoundationTarget(card.suit)))
        self.interface.onEvent(FoundationLand(card))
        self._revealTop(source)
        self._afterMove()
        return True

    def moveToTableau(self, cards, targetColumnIndex: int, source: MoveSource) -> bool:
        cards = list(cards)
        if not cards or not 0 <= targetColumnIndex < len(self.state.tableau):
            return False
        if not isinstance(source, TableauSource) and len(cards) != 1:
            return False
        if isinstance(source, TableauSource) and source.columnIndex == targetColumnIndex:
            return False
        pile = self._sourcePile(source, cards[0])
        if pile is None or not self._isTopOf(pile, cards):
            logger.debug("tableau move rejected: cards are not on top of %r", source)
            return False
        target = self.state.tableau[targetColumnIndex]
        if not Rules.canMoveRunToTableau(cards, target):
            logger.debug("tableau move rejected: %r onto column %d", cards[0], targetColumnIndex)
            return False

        del pile[len(pile) - len(cards):]
        target.extend(cards)
        self.moveCount += 1
        self.interface.onEvent(CardMove(cards, source, TableauTarget(targetColumnIndex)))
        self._revealTop(source)
        self._afterMove()
        return True

    # ---- position codec ----

    def saveAsLines(self):
        state = self.state
        lines = [str(self.moveCount), str(self.stockPassesUsed), encodeStack(state.stock), encodeStack(state.waste)]
        lines.extend(encodeStack(pile) for pile in state.foundations)
        lines.extend(encodeStack(column) for column in state.tableau)
        return lines

    def loadFromLines(self, lines):
        """
        Sets up a position. Lines: move count, passes used, stock, waste,
        four foundations in SUITS order, seven columns. Blank and '#' lines are skipped.
        """

        def lineFilter(s: str):
            return not s.isspace() and len(s) > 0 and not s.startswith("#")

        lines = list(filter(lineFilter, lines))
        expected = 4 + len(self.state.foundations) + len(self.state.tableau)
        if len(lines) != expected:
            raise ValueError(f"expected {expected} lines, got {len(lines)}")
        piles = [decodeStack(line) for line in lines[2:]]
        state = GameState(
            stock=piles[0],
            waste=piles[1],
            foundations=piles[2:6],
            tableau=piles[6:],
        )
        self.state.restore(state)
        self.moveCount = int(lines[0])
        self.stockPassesUsed = int(lines[1])
        self.gameEnded = self.checkWin()
        self.history.clear()
        self.pendingAnimations.clear()
