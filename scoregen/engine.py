"""CsoundEngine: drives one Csound performance through the ctcsound API."""

from __future__ import annotations

from typing import Any, Callable


class EngineError(RuntimeError):
    """Raised when Csound reports a failure before the performance starts."""


# Backends whose process-wide initialization has already run.
_initialized_backends: list[Any] = []


def _load_backend() -> Any:
    import ctcsound

    return ctcsound


class CsoundEngine:
    """
    Scoped wrapper around a single Csound instance.

    Usage as a context manager guarantees the instance is stopped and cleaned
    up on every exit path, including failed compiles:

        with CsoundEngine(option="-odac") as engine:
            engine.compile_orchestra(orc)
            engine.read_score(sco)
            engine.perform()

    Call order is fixed by Csound: option, orchestra, score, start, then the
    ``performKsmps`` loop. ``perform()`` starts the engine itself if needed.
    """

    DEFAULT_OPTION = "-odac"  # real-time audio output

    def __init__(
        self,
        option: str = DEFAULT_OPTION,
        backend_loader: Callable[[], Any] = _load_backend,
    ) -> None:
        """
        Args:
            option:         Single command-line flag passed verbatim to Csound,
                            e.g. ``-odac`` or ``-oout.wav``.
            backend_loader: Returns the ctcsound module (or a stand-in exposing
                            ``csoundInitialize``, the init flags and ``Csound``).
        """
        self.option = option
        self._backend_loader = backend_loader
        self._backend: Any = None
        self._csound: Any = None
        self._started = False

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _initialize_library(self) -> None:
        """Run Csound's process-wide initialization once."""
        backend = self._backend
        if any(done is backend for done in _initialized_backends):
            return
        status = backend.csoundInitialize(
            backend.CSOUNDINIT_NO_ATEXIT | backend.CSOUNDINIT_NO_SIGNAL_HANDLER
        )
        # A positive status means the library was already initialized.
        if status < 0:
            raise EngineError(f"Csound could not initialize (status {status}).")
        _initialized_backends.append(backend)

    def _check(self, status: int, action: str) -> None:
        if status != 0:
            raise EngineError(f"Csound could not {action} (status {status}).")

    @property
    def _instance(self) -> Any:
        if self._csound is None:
            raise EngineError("Csound instance is not open; use CsoundEngine as a context manager.")
        return self._csound

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def open(self) -> None:
        """
        Initialize the library, create the instance and apply the option.

        Raises:
            EngineError: If Csound rejects the option.
            ImportError / OSError: If ctcsound or the Csound library is missing.
        """
        self._backend = self._backend_loader()
        self._initialize_library()
        self._csound = self._backend.Csound()
        self._check(self._csound.setOption(self.option), f"accept option '{self.option}'")

    def compile_orchestra(self, orchestra: str) -> None:
        """Compile the instrument definitions. Raises EngineError on failure."""
        self._check(self._instance.compileOrc(orchestra), "compile the orchestra")

    def read_score(self, score: str) -> None:
        """Load score text. Raises EngineError on failure."""
        self._check(self._instance.readScore(score), "read the score")

    def start(self) -> None:
        """Prepare Csound for performance. Required after compiling from strings."""
        self._check(self._instance.start(), "start")
        self._started = True

    def perform(self) -> int:
        """
        Perform one control block at a time until Csound signals completion.

        Returns:
            The number of blocks performed.
        """
        if not self._started:
            self.start()

        csound = self._instance
        blocks = 0
        while csound.performKsmps() == 0:
            blocks += 1
        return blocks

    def stop(self) -> None:
        """Stop a started performance; a no-op otherwise."""
        if self._csound is not None and self._started:
            self._csound.stop()
            self._started = False

    def close(self) -> None:
        """Stop if needed and release the instance."""
        if self._csound is None:
            return
        try:
            self.stop()
        finally:
            self._csound.cleanup()
            self._csound = None

    def run(self, orchestra: str, score: str) -> int:
        """Compile, load, start, perform and stop in one call. Returns blocks performed."""
        self.compile_orchestra(orchestra)
        self.read_score(score)
        self.start()
        blocks = self.perform()
        self.stop()
        return blocks

    def __enter__(self) -> "CsoundEngine":
        try:
            self.open()
        except BaseException:
            self.close()
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
