"""
════════════════════════════════════════════════════════════════════════════════
INTERCHANGE - JSON import/export and CSV reports
════════════════════════════════════════════════════════════════════════════════

JSON shape shared with the web app:

    ImportFile: { teams: Team[], projects: { [id]: Project }, dependencies: Dependency[] }

Schemas:
- TeamSchema, ProjectSchema, DependencySchema: one record each
- ImportFileSchema: a whole workspace export
- PrioritizeRequest: API body (workspace + mode)

Reports:
- selected_projects_frame / export_prioritized_csv: the "prioritized projects"
  table (global or per team)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .heuristics import value_effort_ratio
from .models import Dependency, PrioritizationResult, Project, Team


class InterchangeError(ValueError):
    """Raised when an import file does not have the expected shape."""
    pass


# ═══════════════════════════════════════════════════════════════════════════════
# SCHEMAS
# ═══════════════════════════════════════════════════════════════════════════════

class TeamSchema(BaseModel):
    """Team record."""
    id: str
    name: str = ""
    capacity: float = Field(0.0, description="Person-days available this round")

    def to_domain(self) -> Team:
        return Team(id=self.id, name=self.name, capacity=self.capacity)


class ProjectSchema(BaseModel):
    """
    Project record.

    effort and value are null until the user fills them in.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    team_id: str = Field(..., alias="teamId")
    title: str = ""
    effort: Optional[float] = None
    value: Optional[float] = None
    source_project_id: Optional[str] = Field(None, alias="sourceProjectId")
    is_linked_copy: Optional[bool] = Field(None, alias="isLinkedCopy")

    def to_domain(self) -> Project:
        return Project(
            id=self.id,
            team_id=self.team_id,
            title=self.title,
            effort=self.effort,
            value=self.value,
            source_project_id=self.source_project_id,
            is_linked_copy=self.is_linked_copy,
        )


class DependencySchema(BaseModel):
    """source is a prerequisite of target."""
    model_config = ConfigDict(populate_by_name=True)

    source_id: str = Field(..., alias="sourceId")
    target_id: str = Field(..., alias="targetId")

    def to_domain(self) -> Dependency:
        return Dependency(source_id=self.source_id, target_id=self.target_id)


class ImportFileSchema(BaseModel):
    """Whole workspace export."""
    teams: List[TeamSchema]
    projects: Dict[str, ProjectSchema]
    dependencies: List[DependencySchema]


class PrioritizeRequest(BaseModel):
    """Body of POST /prioritization/run."""
    mode: Optional[str] = Field(None, description="sequential, greedy-with-dependencies or optimized")
    teams: List[TeamSchema] = Field(default_factory=list)
    projects: Union[Dict[str, ProjectSchema], List[ProjectSchema]] = Field(default_factory=list)
    dependencies: List[DependencySchema] = Field(default_factory=list)

    def project_list(self) -> List[Project]:
        records = self.projects.values() if isinstance(self.projects, dict) else self.projects
        return [p.to_domain() for p in records]


class CycleCheckRequest(BaseModel):
    """Body of POST /prioritization/dependencies/check-cycle."""
    model_config = ConfigDict(populate_by_name=True)

    source_id: str = Field(..., alias="sourceId")
    target_id: str = Field(..., alias="targetId")
    dependencies: List[DependencySchema] = Field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════════
# WORKSPACE
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class Workspace:
    """Teams, projects (keyed by id) and dependencies of one export."""
    teams: List[Team] = field(default_factory=list)
    projects: Dict[str, Project] = field(default_factory=dict)
    dependencies: List[Dependency] = field(default_factory=list)

    def project_list(self) -> List[Project]:
        return list(self.projects.values())


def load_import_file(source: Union[Dict[str, Any], str, Path]) -> Workspace:
    """
    Parse an ImportFile.

    Args:
        source: Parsed dict, JSON text, or a Path to a JSON file

    Raises:
        InterchangeError: invalid JSON or wrong shape
    """
    if isinstance(source, Path):
        source = source.read_text(encoding="utf-8")
    if isinstance(source, str):
        try:
            source = json.loads(source)
        except json.JSONDecodeError as e:
            raise InterchangeError(f"Invalid JSON: {e}") from e

    try:
        schema = ImportFileSchema.model_validate(source)
    except ValidationError as e:
        raise InterchangeError(f"Invalid data format for import: {e}") from e

    return Workspace(
        teams=[t.to_domain() for t in schema.teams],
        projects={key: p.to_domain() for key, p in schema.projects.items()},
        dependencies=[d.to_domain() for d in schema.dependencies],
    )


def dump_import_file(workspace: Workspace) -> Dict[str, Any]:
    """Serialize a workspace to the ImportFile shape."""
    return {
        "teams": [t.to_dict() for t in workspace.teams],
        "projects": {key: p.to_dict() for key, p in workspace.projects.items()},
        "dependencies": [d.to_dict() for d in workspace.dependencies],
    }


def save_import_file(workspace: Workspace, path: Path) -> None:
    path.write_text(json.dumps(dump_import_file(workspace), indent=2), encoding="utf-8")


# ═══════════════════════════════════════════════════════════════════════════════
# CSV REPORTS
# ═══════════════════════════════════════════════════════════════════════════════

def _format_ratio(effort: float, value: float) -> str:
    ratio = value_effort_ratio(effort, value)
    return "∞" if ratio == float("inf") else f"{ratio:.2f}"


def selected_projects_frame(
    result: PrioritizationResult,
    teams: List[Team],
    team_id: Optional[str] = None,
) -> pd.DataFrame:
    """
    Table of selected projects in priority order.

    Global tables have a Team column; a team-scoped table (team_id given)
    keeps only that team's projects and drops it.
    """
    team_names = {t.id: t.name for t in teams}
    rows = []
    for project in result.selected_projects:
        if team_id is not None and project.team_id != team_id:
            continue
        effort = project.numeric_effort() or 0.0
        value = project.numeric_value() or 0.0
        rows.append({
            "Project": project.title,
            "Team": team_names.get(project.team_id, "Unknown"),
            "Effort": effort,
            "Value": value,
            "Value/Effort Ratio": _format_ratio(effort, value),
        })

    columns = ["Project", "Team", "Effort", "Value", "Value/Effort Ratio"]
    df = pd.DataFrame(rows, columns=columns)
    if team_id is not None:
        df = df.drop(columns=["Team"])
    return df


def prioritized_csv_filename(teams: List[Team], team_id: Optional[str] = None) -> str:
    if team_id is None:
        return "prioritized-projects.csv"
    name = next((t.name for t in teams if t.id == team_id), team_id)
    return f"{name}-prioritized-projects.csv"


def export_prioritized_csv(
    result: PrioritizationResult,
    teams: List[Team],
    path: Optional[Path] = None,
    team_id: Optional[str] = None,
) -> Optional[str]:
    """
    Write the selected-projects table as CSV.

    Returns the CSV text when no path is given.
    """
    df = selected_projects_frame(result, teams, team_id=team_id)
    if path is None:
        return df.to_csv(index=False)
    df.to_csv(path, index=False)
    return None
