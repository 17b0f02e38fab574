import argparse
import logging

from engine import Advisor
from engine.Cards import Card
from engine.Core import Core, GameConfig
from engine.Interface import Interface
from engine.State import FOUNDATION, WASTE, FoundationTarget, TableauSource, TableauTarget
from view.adapter import CoreAdapter

QUIT = "quit"
SUIT_KEYS = {"s": "spades", "h": "hearts", "d": "diamonds", "c": "clubs"}


def _cardStr(view):
    if view is None:
        return "[   ]"
    card = Card(view.suit, view.rank, view.face_up)
    return card.gameStr()


def renderBoard(core: Core) -> str:
    vm = CoreAdapter.snapshot(core)
    lines = []
    passes = "unlimited" if vm.pass_limit == 0 else f"{vm.stock_passes_used}/{vm.pass_limit}"
    lines.append(f"Moves: {vm.move_count}    Stock: {vm.stock_count}    Passes: {passes}")
    foundations = "  ".join(_cardStr(p.top) for p in vm.foundations)
    lines.append(f"Waste: {_cardStr(vm.waste.top)}    Foundations: {foundations}")
    lines.append("----0-----1-----2-----3-----4-----5-----6---")
    i = 0
    while True:
        has = False
        line = str(i) + ": "
        for column in vm.tableau:
            if len(column.cards) <= i:
                line += "      "
                continue
            has = True
            line += _cardStr(column.cards[i]) + "   "
        if not has:
            break
        lines.append(line.rstrip())
        i += 1
    return "\n".join(lines)


def resolveSource(core: Core, token: str):
    """
    Turns 'w', 'f<suit>', 't<col>' or 't<col>:<row>' into (card, cards, source).
    Returns None when nothing selectable is there.
    """
    state = core.getState()
    token = token.strip().lower()
    if token == "w":
        if not state.waste:
            return None
        card = state.waste[-1]
        return card, [card], WASTE
    if token.startswith("f") and token[1:] in SUIT_KEYS:
        pile = state.foundationFor(SUIT_KEYS[token[1:]])
        if not pile:
            return None
        card = pile[-1]
        return card, [card], FOUNDATION
    if token.startswith("t"):
        parts = token[1:].split(":")
        try:
            col = int(parts[0])
            column = state.tableau[col]
            row = int(parts[1]) if len(parts) > 1 else len(column) - 1
        except (ValueError, IndexError):
            return None
        if col < 0 or row < 0 or row >= len(column):
            return None
        return column[row], column[row:], TableauSource(col)
    return None


def _attempt(core: Core, action):
    core.checkpoint()
    ok = action()
    if not ok:
        # nothing changed, drop the checkpoint again
        core.discardCheckpoint()
    return ok


def _move(core: Core, srcToken: str, destToken: str) -> bool:
    resolved = resolveSource(core, srcToken)
    if resolved is None:
        return False
    card, cards, source = resolved
    destToken = destToken.strip().lower()
    if destToken == "f":
        if len(cards) != 1:
            return False
        return _attempt(core, lambda: core.moveToFoundation(card, source))
    if destToken.startswith("t"):
        try:
            col = int(destToken[1:])
        except ValueError:
            return False
        return _attempt(core, lambda: core.moveToTableau(cards, col, source))
    return False


def _go(core: Core, srcToken: str) -> bool:
    resolved = resolveSource(core, srcToken)
    if resolved is None:
        return False
    card, _, source = resolved
    dest = core.findBestMove(card, source)
    if isinstance(dest, FoundationTarget):
        return _attempt(core, lambda: core.moveToFoundation(card, source))
    if isinstance(dest, TableauTarget):
        unit = Advisor.movableUnit(core.getState(), card, source)
        return _attempt(core, lambda: core.moveToTableau(unit, dest.columnIndex, source))
    return False


def autoComplete(core: Core) -> int:
    """
    Sends top cards to the foundations one at a time while the board allows it.
    :return: number of cards moved
    """
    moved = 0
    while core.canAutoComplete() and not core.checkWin():
        state = core.getState()
        step = False
        for col, column in enumerate(state.tableau):
            if column and core.moveToFoundation(column[-1], TableauSource(col), skipCount=True):
                step = True
                moved += 1
                break
        if not step:
            break
    return moved


def handleCommand(core: Core, command: str) -> str:
    words = command.split()
    if not words:
        return ""
    name = words[0].lower()
    if name in ("q", "quit", "exit"):
        return QUIT
    if name == "draw":
        if not _attempt(core, core.draw):
            return "No card left!"
        return ""
    if name == "mv":
        if len(words) != 3:
            return "Usage: mv <src> <dest>"
        if not _move(core, words[1], words[2]):
            return "Cannot move!"
        return ""
    if name == "go":
        if len(words) != 2:
            return "Usage: go <src>"
        if not _go(core, words[1]):
            return "No move for that card!"
        return ""
    if name == "auto":
        if not core.canAutoComplete():
            return "Cannot auto-complete yet!"
        core.checkpoint()
        moved = autoComplete(core)
        if moved == 0:
            core.discardCheckpoint()
        return f"Auto-completed {moved} card(s)."
    if name == "undo":
        if not core.undo():
            return "Cannot undo!"
        return ""
    if name == "new":
        core.newGame()
        return ""
    if name == "hint":
        return "Moves available." if core.hasAnyMove() else "No moves left."
    return "Invalid command!"


class CommandLineInterface(Interface):

    def printAll(self):
        print(renderBoard(self.core))
        print()

    def onStart(self):
        print("Game started!")

    def notifyRedraw(self):
        self.printAll()

    def onWin(self):
        print("You win!")


def _parseArgs(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Klondike patience in the terminal.")
    parser.add_argument("--config", default=None, help="INI file with a [game] section")
    parser.add_argument("--draw", type=int, choices=GameConfig.DRAW_COUNTS, default=None)
    parser.add_argument("--passes", type=int, default=None, help="recycle limit, 0 for unlimited")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = _parseArgs(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = GameConfig.loadFromFile(args.config) if args.config else GameConfig()
    if args.seed is not None:
        config.seed = args.seed
    core = Core(config, CommandLineInterface())
    if args.draw is not None:
        core.setDrawCount(args.draw)
    if args.passes is not None:
        core.setPassLimit(max(0, args.passes))
    core.newGame()
    core.interface.printAll()
    while not core.gameEnded:
        try:
            command = input()
        except EOFError:
            break
        message = handleCommand(core, command)
        if message == QUIT:
            break
        if message:
            print(message)


if __name__ == '__main__':
    main()
