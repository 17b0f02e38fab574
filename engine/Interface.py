class Interface:
    """
    Listener for a presentation layer. The default implementation ignores everything.
    """

    def __init__(self):
        self.core = None

    def onStart(self):
        pass

    def onEvent(self, event):
        """
        Invoked when an action changed the board.
        :param event: one of the engine.Core event types
        """
        if not event.isAuto():
            self.notifyRedraw()

    def onUndo(self):
        """
        Invoked after the board was restored from a checkpoint.
        """
        self.notifyRedraw()

    def notifyRedraw(self):
        pass

    def onWin(self):
        pass
