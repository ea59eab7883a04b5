import pytest
from sqlalchemy import inspect

from brightcards import config
from brightcards.fsrs import DEFAULT_PARAMETERS, DEFAULT_WEIGHTS, InvalidInputState, build_parameters


def test_defaults():
    assert DEFAULT_PARAMETERS.desired_retention == 0.9
    assert DEFAULT_PARAMETERS.weights == DEFAULT_WEIGHTS
    assert len(DEFAULT_PARAMETERS.weights) == 19
    assert DEFAULT_PARAMETERS.w(2) == 3.173


def test_parameters_are_frozen():
    with pytest.raises(Exception):
        DEFAULT_PARAMETERS.desired_retention = 0.5


@pytest.mark.parametrize("weights", [DEFAULT_WEIGHTS[:17], DEFAULT_WEIGHTS + (1.0,)])
def test_wrong_weight_count_rejected(weights):
    with pytest.raises(InvalidInputState):
        build_parameters(weights=weights)


def test_non_finite_weight_rejected():
    with pytest.raises(InvalidInputState):
        build_parameters(weights=(float("nan"),) + DEFAULT_WEIGHTS[1:])


@pytest.mark.parametrize("retention", [0.0, 1.0, 1.5, -0.1])
def test_retention_out_of_range_rejected(retention):
    with pytest.raises(InvalidInputState):
        build_parameters(desired_retention=retention)


def test_retention_from_environment(monkeypatch):
    monkeypatch.setenv("BRIGHTCARDS_DESIRED_RETENTION", "0.85")
    assert config.get_scheduler_parameters().desired_retention == 0.85


def test_retention_defaults_when_unset(monkeypatch):
    monkeypatch.delenv("BRIGHTCARDS_DESIRED_RETENTION", raising=False)
    assert config.get_desired_retention() == 0.9


def test_database_url_test_mode(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://user:pw@localhost:5432/brightcards")
    monkeypatch.setenv("TEST_MODE", "true")
    assert config.get_database_url() == "postgresql://user:pw@localhost:5432/test_brightcards"


def test_database_url_default(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("TEST_MODE", "false")
    assert config.get_database_url() == "sqlite:///brightcards.db"


def test_open_database_creates_tables(tmp_path):
    db = config.open_database(f"sqlite:///{tmp_path / 'cards.db'}")
    assert {"decks", "flashcards", "review_events"} <= set(inspect(db.engine).get_table_names())


def test_non_numeric_retention_rejected(monkeypatch):
    monkeypatch.setenv("BRIGHTCARDS_DESIRED_RETENTION", "abc")
    with pytest.raises(InvalidInputState):
        config.get_desired_retention()
