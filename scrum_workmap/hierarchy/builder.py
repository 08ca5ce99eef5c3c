"""
Work map hierarchy construction.

Groups a flat list of weekly snapshot items into trees:

    Project -> Module -> Feature            (build_workmap_hierarchy)
    Person -> Domain -> Project -> Module -> Feature   (build_person_hierarchy)

Every level keeps the flat list of the items underneath it, in the order the
items were encountered, so a level's ``items`` is always the concatenation of
its children's items.  Siblings are sorted by plain code-point comparison of
their names so the output does not depend on input order.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from ..core.config import UNSPECIFIED_MODULE
from ..models.data_models import (
    SnapshotItem, ProjectNode, ModuleNode, FeatureNode,
    PersonNode, PersonDomainNode,
)

logger = logging.getLogger(__name__)


def _by_name(node):
    return node.name


def module_name_of(item: SnapshotItem) -> str:
    """Module name an item is filed under in the tree."""
    return item.module if item.module else UNSPECIFIED_MODULE


def _place_in_project(project: ProjectNode, item: SnapshotItem, module_index: dict):
    """Append ``item`` to the module and feature below ``project``.

    ``module_index`` maps module name -> (ModuleNode, {feature name: FeatureNode})
    for this project.
    """
    module_key = module_name_of(item)
    entry = module_index.get(module_key)
    if entry is None:
        entry = (ModuleNode(name=module_key), {})
        module_index[module_key] = entry
        project.modules.append(entry[0])
    module, feature_index = entry
    module.items.append(item)

    feature = feature_index.get(item.feature)
    if feature is None:
        feature = FeatureNode(name=item.feature)
        feature_index[item.feature] = feature
        module.features.append(feature)
    feature.items.append(item)


def _sort_projects(projects: List[ProjectNode]):
    projects.sort(key=_by_name)
    for project in projects:
        project.modules.sort(key=_by_name)
        for module in project.modules:
            module.features.sort(key=_by_name)


def build_workmap_hierarchy(items: Iterable[SnapshotItem]) -> List[ProjectNode]:
    """Build the Project -> Module -> Feature forest for one week's items.

    Args:
        items: Snapshot items in any order.

    Returns:
        Projects sorted by name, with modules and features sorted likewise.
        An empty input gives an empty list.
    """
    projects = {}
    module_indexes = {}

    for item in items:
        project = projects.get(item.project)
        if project is None:
            project = ProjectNode(name=item.project)
            projects[item.project] = project
            module_indexes[item.project] = {}
        project.items.append(item)
        _place_in_project(project, item, module_indexes[item.project])

    result = list(projects.values())
    _sort_projects(result)
    logger.debug(f"[Hierarchy] Built {len(result)} projects")
    return result


def build_person_hierarchy(items: Iterable[SnapshotItem]) -> List[PersonNode]:
    """Build the Person -> Domain -> Project -> Module -> Feature forest."""
    persons = {}
    domain_indexes = {}

    for item in items:
        person = persons.get(item.name)
        if person is None:
            person = PersonNode(name=item.name)
            persons[item.name] = person
            domain_indexes[item.name] = {}
        person.items.append(item)

        domains = domain_indexes[item.name]
        entry = domains.get(item.domain)
        if entry is None:
            entry = (PersonDomainNode(name=item.domain), {})
            domains[item.domain] = entry
            person.domains.append(entry[0])
        domain, project_index = entry
        domain.items.append(item)

        project_entry = project_index.get(item.project)
        if project_entry is None:
            project_entry = (ProjectNode(name=item.project), {})
            project_index[item.project] = project_entry
            domain.projects.append(project_entry[0])
        project, module_index = project_entry
        project.items.append(item)
        _place_in_project(project, item, module_index)

    result = sorted(persons.values(), key=_by_name)
    for person in result:
        person.domains.sort(key=_by_name)
        for domain in person.domains:
            _sort_projects(domain.projects)
    return result


# ============================================================================
# LOOKUPS
# ============================================================================

def find_project(projects: List[ProjectNode], name: str) -> Optional[ProjectNode]:
    return next((p for p in projects if p.name == name), None)


def find_module(projects: List[ProjectNode], project_name: str,
                module_name: str) -> Optional[ModuleNode]:
    project = find_project(projects, project_name)
    if project is None:
        return None
    return next((m for m in project.modules if m.name == module_name), None)


def find_feature(projects: List[ProjectNode], project_name: str, module_name: str,
                 feature_name: str) -> Optional[FeatureNode]:
    module = find_module(projects, project_name, module_name)
    if module is None:
        return None
    return next((f for f in module.features if f.name == feature_name), None)


def person_feature_items(persons: List[PersonNode], person_name: str, domain_name: str,
                         project_name: str, module_name: str,
                         feature_name: str) -> List[SnapshotItem]:
    """Items of one person's feature, or an empty list if any level is missing."""
    person = next((p for p in persons if p.name == person_name), None)
    if person is None:
        return []
    domain = next((d for d in person.domains if d.name == domain_name), None)
    if domain is None:
        return []
    feature = find_feature(domain.projects, project_name, module_name, feature_name)
    return list(feature.items) if feature else []


def iter_features(projects: List[ProjectNode]) -> Iterator[Tuple[ProjectNode, ModuleNode, FeatureNode]]:
    """Yield every (project, module, feature) triple in tree order."""
    for project in projects:
        for module in project.modules:
            for feature in module.features:
                yield project, module, feature
