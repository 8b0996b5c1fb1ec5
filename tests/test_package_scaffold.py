import logging
import re
import sys
import tomllib
from pathlib import Path

import pytest

import ndtensor
from ndtensor import Initializer, Shape, Tensor

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def test_public_exports_are_importable() -> None:
    for name in ndtensor.__all__:
        assert hasattr(ndtensor, name), name


def test_package_logger_has_null_handler() -> None:
    handlers = logging.getLogger("ndtensor").handlers
    assert any(isinstance(handler, logging.NullHandler) for handler in handlers)


def test_construction_logs_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="ndtensor"):
        Tensor((2, 2), Initializer.ZEROS)

    assert any("built tensor (2, 2)" in record.getMessage() for record in caplog.records)


def test_reshape_logs_resolved_shape(caplog: pytest.LogCaptureFixture) -> None:
    tensor = Tensor((24,), Initializer.ZEROS)
    with caplog.at_level(logging.DEBUG, logger="ndtensor"):
        tensor.reshape(2, -1, 4)

    assert tensor.shape == Shape((2, 3, 4))
    assert any("-> (2, 3, 4)" in record.getMessage() for record in caplog.records)


def _project_table() -> dict[str, object]:
    with open(PROJECT_ROOT / "pyproject.toml", "rb") as f:
        return tomllib.load(f)["project"]


def test_every_runtime_dependency_is_imported() -> None:
    requirements = _project_table()["dependencies"]
    assert isinstance(requirements, list)

    for requirement in requirements:
        name = re.split(r"[<>=!~ \[]", requirement, maxsplit=1)[0]
        assert name.replace("-", "_") in sys.modules, requirement


def test_readme_is_a_package_readme() -> None:
    readme = _project_table()["readme"]

    assert readme == "README.md"
    assert (PROJECT_ROOT / readme).read_text().startswith("# ndtensor")
