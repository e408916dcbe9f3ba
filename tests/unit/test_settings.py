import json

import pytest
from pydantic import ValidationError

from config import InterviewConfig, load_route
from config.settings import Settings
from services.sessions import build_context


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.DB_PATH.endswith(".db")
    assert settings.MAX_SALARY == 72000
    assert settings.EXPERIENCE_DETAILS_MIN_CHARS == 30


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("MAX_SALARY", "80000")
    monkeypatch.setenv("COMPANY_LOCATION", "Oregon")
    cfg = InterviewConfig.from_settings(Settings(_env_file=None))
    assert cfg.max_salary == 80000
    assert cfg.company.location == "Oregon"


def test_interview_config_is_frozen():
    cfg = InterviewConfig()
    with pytest.raises(ValidationError):
        cfg.max_salary = 1


def test_salary_band_must_be_ordered():
    with pytest.raises(ValidationError):
        InterviewConfig(salary_floor=100, salary_ceiling=50)


def test_salary_band_bounds_are_exclusive():
    cfg = InterviewConfig()
    assert not cfg.salary_in_band(20000)
    assert cfg.salary_in_band(20001)
    assert not cfg.salary_in_band(200000)


def test_load_route(tmp_path):
    path = tmp_path / "app_config.json"
    path.write_text(
        json.dumps({"llm_routes": {"interviewer": {"name": "interviewer", "base_url": "http://x", "model": "m"}}}),
        encoding="utf-8",
    )
    route = load_route(path, "interviewer")
    assert route.model == "m"
    assert route.endpoint == "/v1/chat/completions"
    assert load_route(tmp_path / "missing.json", "interviewer") is None
    with pytest.raises(KeyError):
        load_route(path, "other")


def test_build_context_without_llm_config(tmp_path):
    settings = Settings(_env_file=None, LLM_CONFIG_PATH=str(tmp_path / "none.json"), TEMPLATE_DIR=str(tmp_path))
    ctx = build_context(settings)
    assert ctx.route is None
    assert "rn-icu-interview" in ctx.catalog.ids()
    assert ctx.interview.max_salary == settings.MAX_SALARY
