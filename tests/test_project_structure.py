"""Basic project scaffolding tests."""

import importlib


def test_package_importable() -> None:
    """Verify the top-level package is importable."""
    import battleship_offline  # noqa: F401  (import used to ensure availability)

    assert battleship_offline.__version__


def test_submodules_exist() -> None:
    modules = [
        "battleship_offline.engine",
        "battleship_offline.engine.session",
        "battleship_offline.ai",
        "battleship_offline.telemetry",
        "battleship_offline.cli",
        "battleship_offline.config",
        "battleship_offline.errors",
    ]

    for module in modules:
        assert importlib.import_module(module) is not None
