"""Use cases driving the project approval workflow."""

from .accept_project import accept_project
from .assign_project import assign_project
from .create_project import create_project
from .delete_project import delete_project
from .get_project import get_project
from .get_project_stats import ProjectStats, get_project_stats
from .list_pending_projects_for_user import list_pending_projects_for_user
from .list_project_acceptances import list_project_acceptances
from .list_projects import list_projects
from .update_project import update_project

__all__ = [
    "ProjectStats",
    "accept_project",
    "assign_project",
    "create_project",
    "delete_project",
    "get_project",
    "get_project_stats",
    "list_pending_projects_for_user",
    "list_project_acceptances",
    "list_projects",
    "update_project",
]
