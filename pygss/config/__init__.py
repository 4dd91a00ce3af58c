"""Configuration: the validated models plus the nested-dict constructor used by the parser."""

from typing import Any, Dict, Mapping

from .models import RepoConfig, UserConfig, GssConfig, ToolConfig

DEFAULTS: Dict[str, Dict[str, Any]] = {
    'repo': {'remote': 'origin', 'base_branch': 'main'},
    'user': {},
    'tool': {'gss': {'pretend': False}},
}


class Config(GssConfig):
    """GssConfig built from {'repo': ..., 'user': ..., 'tool': {'gss': ...}}.

    Missing sections fall back to the model defaults.
    """
    def __init__(self, sections: Mapping[str, Mapping[str, Any]]):
        super().__init__(
            repo=RepoConfig.model_validate(dict(sections.get('repo', {}))),
            user=UserConfig.model_validate(dict(sections.get('user', {}))),
            tool=ToolConfig.model_validate(dict(sections.get('tool', {}).get('gss', {}))),
        )


def default_config() -> Config:
    """Config used before a repository is known (and in tests)."""
    return Config(DEFAULTS)


__all__ = ["Config", "default_config", "DEFAULTS", "GssConfig", "RepoConfig", "UserConfig", "ToolConfig"]
