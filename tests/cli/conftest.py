import logging.config

import pytest

from solidpod.cli.context import PodContext

POD_URL = 'http://localhost:9999/alice/'


@pytest.fixture
def pod_context():
    return PodContext(config={'POD': {'URL': POD_URL}})


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / 'config.yml'
    path.write_text(
        'POD:\n'
        f'  URL: {POD_URL}\n'
        'LOGGING:\n'
        f'  LOG_DIR: {tmp_path / "logs"}\n'
    )
    return path


@pytest.fixture
def no_logging_config(monkeypatch):
    """Keep `main()` from replacing the logging configuration of the test run."""
    monkeypatch.setattr(logging.config, 'dictConfig', lambda options: None)
