"""Unit tests for CsoundEngine, driven through a recording stand-in for ctcsound."""

import pytest

from scoregen.engine import CsoundEngine, EngineError

ORC = "sr=44100\nksmps=32\nnchnls=2\n0dbfs=1\n\ninstr 1\nendin\n"
SCO = "i1 0 1 0.5 8.00"


class _FakeCsound:
    def __init__(self, backend: "_FakeBackend") -> None:
        self._backend = backend
        self._remaining = backend.blocks
        backend.calls.append("create")

    def _status(self, name: str, *args) -> int:
        self._backend.calls.append((name, *args) if args else name)
        return self._backend.failures.get(name, 0)

    def setOption(self, option: str) -> int:
        return self._status("setOption", option)

    def compileOrc(self, orc: str) -> int:
        return self._status("compileOrc", orc)

    def readScore(self, sco: str) -> int:
        return self._status("readScore", sco)

    def start(self) -> int:
        return self._status("start")

    def performKsmps(self) -> int:
        self._backend.calls.append("performKsmps")
        if self._remaining > 0:
            self._remaining -= 1
            return 0
        return 1

    def stop(self) -> None:
        self._backend.calls.append("stop")

    def cleanup(self) -> int:
        return self._status("cleanup")


class _FakeBackend:
    CSOUNDINIT_NO_SIGNAL_HANDLER = 1
    CSOUNDINIT_NO_ATEXIT = 2

    def __init__(self, blocks: int = 3, failures: dict[str, int] | None = None) -> None:
        self.blocks = blocks
        self.failures = failures or {}
        self.calls: list = []

    def csoundInitialize(self, flags: int) -> int:
        self.calls.append(("csoundInitialize", flags))
        return self.failures.get("csoundInitialize", 0)

    def Csound(self) -> _FakeCsound:
        return _FakeCsound(self)


def _engine(backend: _FakeBackend, option: str = "-odac") -> CsoundEngine:
    return CsoundEngine(option=option, backend_loader=lambda: backend)


def test_run_follows_csound_lifecycle_order() -> None:
    backend = _FakeBackend(blocks=2)
    with _engine(backend) as engine:
        blocks = engine.run(ORC, SCO)

    assert blocks == 2
    assert backend.calls == [
        ("csoundInitialize", 3),
        "create",
        ("setOption", "-odac"),
        ("compileOrc", ORC),
        ("readScore", SCO),
        "start",
        "performKsmps",
        "performKsmps",
        "performKsmps",
        "stop",
        "cleanup",
    ]


def test_option_is_passed_verbatim() -> None:
    backend = _FakeBackend()
    with _engine(backend, option="-oout.wav"):
        pass
    assert ("setOption", "-oout.wav") in backend.calls


def test_perform_starts_engine_when_needed() -> None:
    backend = _FakeBackend(blocks=0)
    with _engine(backend) as engine:
        engine.compile_orchestra(ORC)
        engine.read_score(SCO)
        assert engine.perform() == 0
    assert backend.calls.index("start") < backend.calls.index("performKsmps")


def test_exit_stops_started_performance() -> None:
    backend = _FakeBackend()
    with _engine(backend) as engine:
        engine.compile_orchestra(ORC)
        engine.read_score(SCO)
        engine.start()
    assert backend.calls[-2:] == ["stop", "cleanup"]


def test_compile_failure_aborts_before_performance() -> None:
    backend = _FakeBackend(failures={"compileOrc": -1})
    with pytest.raises(EngineError, match="compile the orchestra"):
        with _engine(backend) as engine:
            engine.run(ORC, SCO)

    assert "performKsmps" not in backend.calls
    assert "start" not in backend.calls
    assert "stop" not in backend.calls
    assert backend.calls[-1] == "cleanup"


def test_score_failure_aborts_before_performance() -> None:
    backend = _FakeBackend(failures={"readScore": 1})
    with pytest.raises(EngineError, match="read the score"):
        with _engine(backend) as engine:
            engine.run(ORC, SCO)
    assert "performKsmps" not in backend.calls
    assert backend.calls[-1] == "cleanup"


def test_start_failure_aborts_before_performance() -> None:
    backend = _FakeBackend(failures={"start": -1})
    with pytest.raises(EngineError, match="start"):
        with _engine(backend) as engine:
            engine.run(ORC, SCO)
    assert "performKsmps" not in backend.calls
    assert "stop" not in backend.calls
    assert backend.calls[-1] == "cleanup"


def test_rejected_option_cleans_up_on_enter() -> None:
    backend = _FakeBackend(failures={"setOption": -1})
    with pytest.raises(EngineError, match="accept option"):
        with _engine(backend):
            pytest.fail("body must not run")  # pragma: no cover
    assert backend.calls[-1] == "cleanup"


def test_library_initialized_once_per_backend() -> None:
    backend = _FakeBackend()
    with _engine(backend):
        pass
    with _engine(backend):
        pass
    assert backend.calls.count(("csoundInitialize", 3)) == 1
    assert backend.calls.count("create") == 2


def test_initialization_failure_aborts_before_instance() -> None:
    backend = _FakeBackend(failures={"csoundInitialize": -1})
    with pytest.raises(EngineError, match="initialize"):
        with _engine(backend) as engine:
            engine.run(ORC, SCO)

    assert backend.calls == [("csoundInitialize", 3)]


def test_initialization_retried_after_failure() -> None:
    backend = _FakeBackend(failures={"csoundInitialize": -1})
    with pytest.raises(EngineError):
        with _engine(backend):
            pass

    backend.failures.clear()
    with _engine(backend):
        pass
    assert backend.calls.count(("csoundInitialize", 3)) == 2


def test_already_initialized_status_is_accepted() -> None:
    backend = _FakeBackend(blocks=1, failures={"csoundInitialize": 1})
    with _engine(backend) as engine:
        assert engine.run(ORC, SCO) == 1
    assert backend.calls[-1] == "cleanup"


def test_operations_outside_context_raise() -> None:
    engine = _engine(_FakeBackend())
    with pytest.raises(EngineError, match="not open"):
        engine.compile_orchestra(ORC)


def test_close_is_idempotent() -> None:
    backend = _FakeBackend()
    engine = _engine(backend)
    engine.open()
    engine.close()
    engine.close()
    assert backend.calls.count("cleanup") == 1


# ---------------------------------------------------------------------------
# Integration test: needs ctcsound and the Csound library installed.
# ---------------------------------------------------------------------------

@pytest.mark.integration
def test_real_csound_performs_static_score() -> None:
    try:
        import ctcsound  # noqa: F401
    except (ImportError, OSError):
        pytest.skip("ctcsound / Csound library not available.")

    from scoregen.orchestra import Orchestra
    from scoregen.score_strategy import StaticScore

    with CsoundEngine(option="-n") as engine:
        blocks = engine.run(Orchestra().render(), StaticScore().generate())

    assert blocks > 0
