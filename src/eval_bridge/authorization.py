from __future__ import annotations

import threading
from enum import Enum
from typing import Callable

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.syntax import Syntax

from .logging_config import get_logger
from .settings import EvalSettings

logger = get_logger(__name__)

DecisionCallback = Callable[[str, str], bool]


class AuthorizationState(str, Enum):
    """Persistent consent setting shared by every request through one gate.

    Example:
        ```python
        state = AuthorizationState.FORCED_ALLOW
        ```
    """

    UNSET = "unset"
    FORCED_ALLOW = "forced-allow"
    FORCED_DENY = "forced-deny"


def prompt_for_consent(tool: str, payload: str, *, console: Console | None = None) -> bool:
    """Show the code about to run and ask the operator to confirm.

    Example:
        ```python
        approved = prompt_for_consent("python_eval", "print('hi')")
        ```
    """
    out = console or Console()
    out.print(
        Panel(
            Syntax(payload, "python", line_numbers=True, word_wrap=True),
            title=f"[bold]{tool}[/bold] wants to execute",
            border_style="yellow",
        )
    )
    return Confirm.ask("Do you want to execute it?", console=out, default=False)


class AuthorizationGate:
    """Consent checkpoint consulted before any code is executed.

    `FORCED_ALLOW` approves without consulting anything. `UNSET` and
    `FORCED_DENY` both defer to the decision callback, whose answer applies to
    that one request only. This is a consent checkpoint, not a sandbox.

    Example:
        ```python
        gate = AuthorizationGate(decide=lambda tool, code: True)
        gate.set_auto_execute(True)
        ```
    """

    def __init__(
        self,
        decide: DecisionCallback | None = None,
        state: AuthorizationState = AuthorizationState.UNSET,
    ) -> None:
        """Create a gate with its own state and decision callback.

        Example:
            ```python
            gate = AuthorizationGate(decide=lambda tool, code: False)
            ```
        """
        self._decide: DecisionCallback = decide or prompt_for_consent
        self._state = AuthorizationState(state)
        self._lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: EvalSettings,
        decide: DecisionCallback | None = None,
    ) -> "AuthorizationGate":
        """Create a gate whose initial state follows `settings.auto_execute`.

        Example:
            ```python
            gate = AuthorizationGate.from_settings(EvalSettings(auto_execute=True))
            ```
        """
        state = AuthorizationState.FORCED_ALLOW if settings.auto_execute else AuthorizationState.UNSET
        return cls(decide=decide, state=state)

    @property
    def state(self) -> AuthorizationState:
        """Current persistent state.

        Example:
            ```python
            gate.state is AuthorizationState.UNSET
            ```
        """
        with self._lock:
            return self._state

    def set_state(self, state: AuthorizationState) -> None:
        """Administrative toggle; the only way the persistent state changes.

        Example:
            ```python
            gate.set_state(AuthorizationState.FORCED_DENY)
            ```
        """
        new_state = AuthorizationState(state)
        with self._lock:
            self._state = new_state
        logger.info("authorization.state_changed", state=new_state.value)

    def set_auto_execute(self, enabled: bool) -> None:
        """Switch to `FORCED_ALLOW`, or reset to `UNSET`.

        Example:
            ```python
            gate.set_auto_execute(True)
            ```
        """
        self.set_state(AuthorizationState.FORCED_ALLOW if enabled else AuthorizationState.UNSET)

    def authorize(self, tool: str, payload: str) -> bool:
        """Decide whether one request may run; the callback runs at most once.

        A callback that raises, including `EOFError` or `KeyboardInterrupt` from
        an interactive prompt without a usable terminal, counts as a refusal.

        Example:
            ```python
            if gate.authorize("python_eval", code):
                ...
            ```
        """
        if self.state is AuthorizationState.FORCED_ALLOW:
            return True
        try:
            approved = bool(self._decide(tool, payload))
        except (Exception, KeyboardInterrupt):
            logger.exception("authorization.callback_failed", tool=tool)
            return False
        if not approved:
            logger.warning("authorization.denied", tool=tool)
        return approved


_DEFAULT_GATE: AuthorizationGate | None = None
_DEFAULT_GATE_LOCK = threading.Lock()


def default_gate() -> AuthorizationGate:
    """Return the process-wide gate, creating it on first use.

    Creation is guarded by a lock and the gate guards its own state, so the
    accessor is safe to call from several threads.

    Example:
        ```python
        default_gate().set_auto_execute(True)
        ```
    """
    global _DEFAULT_GATE
    with _DEFAULT_GATE_LOCK:
        if _DEFAULT_GATE is None:
            _DEFAULT_GATE = AuthorizationGate()
        return _DEFAULT_GATE


def auto_execute(enabled: bool) -> None:
    """Toggle unattended execution on the process-wide gate.

    Example:
        ```python
        auto_execute(True)
        ```
    """
    default_gate().set_auto_execute(enabled)
