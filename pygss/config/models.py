"""Pydantic models for config types."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class RepoConfig(BaseModel):
    """Repository configuration."""
    remote: str = "origin"
    base_branch: str = "main"
    github_host: str = "github.com"
    github_repo_owner: Optional[str] = None
    github_repo_name: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @property
    def remote_base(self) -> str:
        """Remote-tracking ref of the integration branch, e.g. origin/main."""
        return f"{self.remote}/{self.base_branch}"

class UserConfig(BaseModel):
    """User configuration."""
    auto_confirm: bool = False
    log_git_commands: bool = False

    model_config = ConfigDict(extra="allow")

class ToolConfig(BaseModel):
    """Tool configuration."""
    pretend: bool = False

    model_config = ConfigDict(extra="allow")

class GssConfig(BaseModel):
    """Full pygss configuration."""
    repo: RepoConfig = Field(default_factory=RepoConfig)
    user: UserConfig = Field(default_factory=UserConfig)
    tool: ToolConfig = Field(default_factory=ToolConfig)

    model_config = ConfigDict(extra="allow")
