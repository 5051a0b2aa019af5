import pytest

from scenarios import build_gated_corridors


@pytest.fixture
def gated_corridors():
    return build_gated_corridors()
