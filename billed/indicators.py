class ErrorIndicator:
    """Visible/hidden state of an inline form error, e.g. the receipt format message."""

    def __init__(self, visible: bool = False) -> None:
        self.visible = visible

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False
