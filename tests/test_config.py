import json
import pytest

from learningjourney import config
from learningjourney.models import Goal, Plan


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


def test_defaults_when_missing(home):
    cfg = config.load_config()
    assert cfg['habit_name'] == 'Swift'
    assert cfg['habit_plan'] == 'Week'
    assert cfg['has_set_goal'] is False
    assert cfg['first_weekday'] == 6
    goal = config.load_goal(cfg)
    assert goal == Goal('Swift', Plan.WEEK, False)


def test_save_and_reload_goal(home):
    cfg = config.load_config()
    config.save_config(config.apply_goal(cfg, Goal('Python', Plan.MONTH, True)))
    assert (home / '.learningjourney' / 'learningjourney_config.json').exists()
    goal = config.load_goal(config.load_config())
    assert goal.habit_name == 'Python'
    assert goal.plan is Plan.MONTH
    assert goal.has_set_goal


def test_corrupt_config_falls_back(home):
    path = home / '.learningjourney'
    path.mkdir()
    (path / 'learningjourney_config.json').write_text("{kaputt", encoding='utf-8')
    assert config.load_config() == config.DEFAULT_CONFIG


def test_partial_config_is_completed(home):
    path = home / '.learningjourney'
    path.mkdir()
    (path / 'learningjourney_config.json').write_text(json.dumps({'habit_plan': 'Year'}), encoding='utf-8')
    cfg = config.load_config()
    assert cfg['habit_plan'] == 'Year'
    assert cfg['habit_name'] == 'Swift'


def test_unknown_plan_falls_back_to_week():
    goal = config.load_goal({'habit_name': 'Go', 'habit_plan': 'Decade'})
    assert goal.plan is Plan.WEEK


def test_update_goal():
    current = Goal('Swift', Plan.WEEK, True)
    goal, is_new = config.update_goal(current, 'Swift', Plan.YEAR)
    assert not is_new
    assert goal.plan is Plan.YEAR
    goal, is_new = config.update_goal(current, '  Rust  ', Plan.WEEK)
    assert is_new
    assert goal.habit_name == 'Rust'
    with pytest.raises(ValueError):
        config.update_goal(current, '   ', Plan.WEEK)
