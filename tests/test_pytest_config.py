from pathlib import Path
import tomllib


def _pyproject() -> dict:
    pyproject_path = Path(__file__).resolve().parents[1] / "pyproject.toml"
    return tomllib.loads(pyproject_path.read_text(encoding="utf-8"))


def test_pytest_collects_service_tests_with_src_on_path() -> None:
    pytest_options = _pyproject().get("tool", {}).get("pytest", {}).get("ini_options", {})
    assert "services/gopacked/tests" in pytest_options.get("testpaths", [])
    assert "services/gopacked/src" in pytest_options.get("pythonpath", [])
    assert "--import-mode=importlib" in pytest_options.get("addopts", [])


def test_package_data_ships_schema_and_codes() -> None:
    package_data = _pyproject()["tool"]["setuptools"]["package-data"]
    assert package_data["gopacked.schemas"] == ["*.json"]
    assert package_data["gopacked.diagnostics"] == ["*.yaml"]
