import pytest


class FakeProvider:
    """In-memory holiday provider keyed by (country code, year)."""

    def __init__(self, data=None, fail_on=None):
        self.data = data or {}
        self.fail_on = fail_on
        self.calls = []

    def fetch(self, country, year):
        self.calls.append((country.code, year))
        if self.fail_on == country.code:
            raise RuntimeError(f"provider failure for {country.code}")
        return list(self.data.get((country.code, year), []))


@pytest.fixture
def fake_provider():
    def _build(data=None, fail_on=None):
        return FakeProvider(data=data, fail_on=fail_on)
    return _build


@pytest.fixture
def build_dir(tmp_path):
    """A dist-single style directory with index.html written by the test."""
    path = tmp_path / "dist-single"
    path.mkdir()
    return path



