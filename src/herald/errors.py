"""Exception hierarchy shared across herald."""


class HeraldError(Exception):
    """Base exception for all herald errors."""


class GroupKeyMismatchError(HeraldError, RuntimeError):
    """Raised when a notification group is given a second, different group key.

    This is a programming error: grouping must never mix identities.
    """

    def __init__(self, current: str, offered: str) -> None:
        self.current = current
        self.offered = offered
        super().__init__(
            f"Group key mismatch when adding a notification to a group "
            f"(group_key={current!r}, offered={offered!r})"
        )


class CollaboratorError(HeraldError):
    """Raised when an external collaborator fails during a registry operation."""

    def __init__(self, collaborator: str, message: str) -> None:
        self.collaborator = collaborator
        super().__init__(f"[{collaborator}] {message}")


class RenderingError(CollaboratorError):
    """Raised when the rendering surface fails to present, update, or remove a view."""

    def __init__(self, message: str) -> None:
        super().__init__("rendering", message)


class AudioAlertError(CollaboratorError):
    """Raised when the audio alert collaborator fails to start a beep."""

    def __init__(self, message: str) -> None:
        super().__init__("audio", message)
