import os
import tempfile

import pytest

# Antes de importar la app: sin pausas simuladas y logs fuera del paquete
os.environ['MENTA_AUTH_DELAY'] = '0'
os.environ['MENTA_RESET_DELAY'] = '0'
os.environ['MENTA_ENABLE_PROFILING'] = '1'
os.environ.setdefault('MENTA_LOGS_DIR', tempfile.mkdtemp(prefix='menta_logs_'))
os.environ.setdefault('GEMINI_API_KEY', 'test-key')

from menta_verde.app_container import AppContainer, get_container  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_container():
    """Cada test arranca con los datos semilla."""
    AppContainer.reset_instance()
    yield get_container()
    AppContainer.reset_instance()


@pytest.fixture
def container(fresh_container):
    return fresh_container
