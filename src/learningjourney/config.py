import calendar
import json
import logging
import os

from learningjourney.models import Goal, Plan

DEFAULT_CONFIG = {
    'habit_name': 'Swift',
    'habit_plan': Plan.WEEK.value,
    'has_set_goal': False,
    'first_weekday': calendar.SUNDAY,
}


def _base_dir():
    base = os.path.join(os.path.expanduser('~'), '.learningjourney')
    os.makedirs(base, exist_ok=True)
    return base


def _config_path():
    return os.path.join(_base_dir(), 'learningjourney_config.json')


def load_config():
    path = _config_path()
    if not os.path.exists(path):
        return dict(DEFAULT_CONFIG)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except (OSError, ValueError) as e:
        logging.warning(f"Konfiguration unlesbar, nutze Standardwerte: {e}")
        return dict(DEFAULT_CONFIG)
    cfg = dict(DEFAULT_CONFIG)
    if isinstance(stored, dict):
        cfg.update(stored)
    return cfg


def save_config(cfg: dict):
    path = _config_path()
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2)


def load_goal(cfg: dict) -> Goal:
    return Goal(
        habit_name=cfg.get('habit_name', DEFAULT_CONFIG['habit_name']),
        plan=Plan.from_id(cfg.get('habit_plan', DEFAULT_CONFIG['habit_plan'])),
        has_set_goal=bool(cfg.get('has_set_goal', False)),
    )


def apply_goal(cfg: dict, goal: Goal) -> dict:
    cfg['habit_name'] = goal.habit_name
    cfg['habit_plan'] = goal.plan.value
    cfg['has_set_goal'] = goal.has_set_goal
    return cfg


def update_goal(current: Goal, name: str, plan: Plan):
    """
    Übernimmt neuen Namen und Plan.
    Rückgabe: (neues Goal, is_new_goal). Ein geänderter Name ist ein neues Ziel,
    die Serie beginnt dann von vorn. Leere Namen werden abgelehnt.
    """
    trimmed = (name or '').strip()
    if not trimmed:
        raise ValueError("Der Name des Lernziels darf nicht leer sein")
    is_new_goal = trimmed != current.habit_name
    goal = Goal(habit_name=trimmed, plan=plan, has_set_goal=True)
    return goal, is_new_goal
