from bootstrap_invoker.domain.exceptions import (
    BootstrapExitError,
    BootstrapSpawnError,
    InvocationError,
)


class TestBootstrapExitError:
    def test_message_contains_exit_code(self) -> None:
        error = BootstrapExitError(137)

        assert str(error) == "Process exited with non-zero status code: 137"
        assert error.exit_code == 137
        assert isinstance(error, InvocationError)

    def test_signal_named_for_negative_code(self) -> None:
        error = BootstrapExitError(-15)

        assert "-15" in str(error)
        assert "SIGTERM" in str(error)

    def test_unknown_signal(self) -> None:
        assert str(BootstrapExitError(-999)) == "Process exited with non-zero status code: -999"


def test_spawn_error_keeps_path() -> None:
    error = BootstrapSpawnError("./bootstrap", "No such file or directory")

    assert error.path == "./bootstrap"
    assert "./bootstrap" in str(error)
