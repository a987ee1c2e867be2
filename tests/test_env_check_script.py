"""Tests for the environment drift detection script."""

from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from pathlib import Path

import pytest

from scripts import check_env

MANAGED_ENV_KEYS = [
    "AWS_REGION",
    "DOCUMENT_STORE_BACKEND",
    "SQLITE_DB_PATH",
    "DYNAMODB_TABLE_NAME",
    "SECRETS_PREFIX",
    "FITBIT_TOKEN_URL",
    "INGESTION_INTERVAL_MINUTES",
    "TOKEN_REFRESH_INTERVAL_MINUTES",
]


def _write_env(env_path: Path, **values: str) -> None:
    contents = "\n".join(f"{key}={value}" for key, value in values.items())
    env_path.write_text(contents + "\n", encoding="utf-8")


def _clear_managed_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in MANAGED_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.mark.parametrize("command", ["record", "verify", "check"])
def test_main_requires_existing_env_file(tmp_path: Path, command: str) -> None:
    env_file = tmp_path / ".missing-env"
    hash_file = tmp_path / ".env.sha256"

    argv = [command, "--env-file", str(env_file)]
    if command != "check":
        argv.extend(["--hash-file", str(hash_file)])

    exit_code = check_env.main(argv)
    assert exit_code == check_env.EXIT_RUNTIME_ERROR


def test_record_and_verify_detects_mismatched_checksum(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    hash_file = tmp_path / ".env.sha256"

    _clear_managed_env(monkeypatch)
    _write_env(
        env_file,
        AWS_REGION="eu-west-1",
        DOCUMENT_STORE_BACKEND="dynamodb",
        DYNAMODB_TABLE_NAME="biotrackr-records",
        SECRETS_PREFIX="biotrackr/",
    )

    exit_code = check_env.main(
        ["record", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_OK
    baseline = hash_file.read_text(encoding="utf-8").strip()
    assert baseline

    exit_code = check_env.main(
        ["verify", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_OK

    _write_env(
        env_file,
        AWS_REGION="eu-west-1",
        DOCUMENT_STORE_BACKEND="sqlite",
        DYNAMODB_TABLE_NAME="biotrackr-records",
        SECRETS_PREFIX="biotrackr/",
    )

    exit_code = check_env.main(
        ["verify", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_CHECKSUM_ERROR


def test_verify_without_baseline_is_runtime_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    _clear_managed_env(monkeypatch)
    _write_env(env_file, AWS_REGION="eu-west-1")

    exit_code = check_env.main(
        ["verify", "--env-file", str(env_file), "--hash-file", str(tmp_path / "none.sha256")]
    )
    assert exit_code == check_env.EXIT_RUNTIME_ERROR


@pytest.mark.parametrize(
    "values",
    [
        {"DOCUMENT_STORE_BACKEND": "postgres"},
        {"INGESTION_INTERVAL_MINUTES": "daily"},
        {"TOKEN_REFRESH_INTERVAL_MINUTES": "0"},
        {"FITBIT_TOKEN_URL": "not-a-url"},
    ],
)
def test_validation_failure_for_invalid_values(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, values: dict[str, str]
) -> None:
    env_file = tmp_path / ".env"
    hash_file = tmp_path / ".env.sha256"

    _clear_managed_env(monkeypatch)
    _write_env(env_file, **values)

    exit_code = check_env.main(
        ["record", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_VALIDATION_ERROR
    assert not hash_file.exists()


def test_check_prints_effective_backend(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"
    _clear_managed_env(monkeypatch)
    _write_env(env_file, DOCUMENT_STORE_BACKEND="sqlite", INGESTION_INTERVAL_MINUTES="720")

    exit_code = check_env.main(["check", "--env-file", str(env_file)])

    assert exit_code == check_env.EXIT_OK
    output = capsys.readouterr().out
    assert "Document store: sqlite" in output
    assert "ingestion every 720 min" in output
