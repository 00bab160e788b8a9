from gitrelease.doctor import diagnose_environment


def test_doctor_returns_expected_keys() -> None:
    res = diagnose_environment()
    # keys exist regardless of environment
    assert "git" in res
    assert "package_manager" in res


def test_doctor_reports_missing_tool() -> None:
    res = diagnose_environment(npm_command="definitely-not-a-package-manager")
    assert res["package_manager"]["present"] == "False"
    assert res["package_manager"]["version"] == ""


def test_doctor_uses_project_process_runner(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    from gitrelease import doctor

    calls = []

    class _Proc:
        stdout = "tool 9.9.9\n"

    def fake_run(cmd, **kwargs):  # type: ignore[no-untyped-def]
        calls.append(list(cmd))
        return _Proc()

    monkeypatch.setattr(doctor.shutil, "which", lambda cmd: f"/usr/bin/{cmd}")
    monkeypatch.setattr(doctor, "run_command", fake_run)
    res = diagnose_environment(git_command="hub", npm_command="pnpm")
    assert calls == [["hub", "--version"], ["pnpm", "--version"]]
    assert res["git"]["command"] == "hub"
    assert res["package_manager"]["version"] == "tool 9.9.9"
