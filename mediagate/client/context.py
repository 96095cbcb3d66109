"""Current-user context for client components: set once at boot, read-only afterwards."""

from mediagate.schemas.auth import UserOut


class ContextAlreadyInitializedError(RuntimeError):
    pass


class ClientContext:
    """Holds the identity resolved at boot so UI code can gate features without refetching."""

    def __init__(self) -> None:
        self._initialized = False
        self._user: UserOut | None = None

    def initialize(self, user: UserOut | None) -> None:
        if self._initialized:
            raise ContextAlreadyInitializedError("ClientContext is already initialized")
        self._user = user
        self._initialized = True

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def user(self) -> UserOut | None:
        return self._user

    @property
    def disable_premium(self) -> bool:
        # Unknown identity gets the restrictive default.
        return self._user.disable_premium if self._user is not None else True
