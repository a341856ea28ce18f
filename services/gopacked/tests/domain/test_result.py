from gopacked.domain.diagnostics import Diagnostic, Severity, has_errors
from gopacked.domain.result import Result


def test_exit_code_precedence_exec_over_validation():
    r = Result(diagnostics=[
        Diagnostic(code="VAL", rule="r", severity=Severity.ERROR, message="v"),
        Diagnostic(code="EXEC", rule="r", severity=Severity.ERROR, message="e", is_execution=True),
    ])
    assert r.exit_code == 3
    assert not r.ok


def test_warnings_keep_exit_code_zero():
    r = Result(diagnostics=[Diagnostic(code="W", rule="r", severity=Severity.WARN, message="w")])
    assert r.exit_code == 0
    assert r.ok
    assert not has_errors(r.diagnostics)
