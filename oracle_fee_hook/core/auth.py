from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Set


class AuthDecision(Enum):
    """Outcome of an authorization check."""
    ALLOW = "allow"
    DENY = "deny"

    @property
    def allowed(self) -> bool:
        return self is AuthDecision.ALLOW


class Authorizer(ABC):
    """
    Externally owned permission policy consulted before every mutating call.
    """

    @abstractmethod
    def can_perform(self, action: str, caller: Any) -> AuthDecision:
        """
        Decide whether ``caller`` may perform ``action``.

        Args:
            action: Name of the hook operation, e.g. ``set_threshold_percentage``
            caller: Identity of the caller

        Returns:
            AuthDecision.ALLOW or AuthDecision.DENY
        """


class AllowListAuthorizer(Authorizer):
    """
    Grants actions to explicit callers.

    The action ``"*"`` acts as a wildcard for every action.
    """

    WILDCARD = "*"

    def __init__(self, grants: Optional[Dict[str, Iterable[Any]]] = None):
        self._grants: Dict[str, Set[Any]] = {}
        for action, callers in (grants or {}).items():
            for caller in callers:
                self.grant(action, caller)

    def grant(self, action: str, caller: Any) -> None:
        self._grants.setdefault(action, set()).add(caller)

    def revoke(self, action: str, caller: Any) -> None:
        self._grants.get(action, set()).discard(caller)

    def can_perform(self, action: str, caller: Any) -> AuthDecision:
        if caller in self._grants.get(action, ()) or caller in self._grants.get(self.WILDCARD, ()):
            return AuthDecision.ALLOW
        return AuthDecision.DENY
