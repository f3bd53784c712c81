"""project-factory scaffolder -- generates a new project directory.

Quick usage::

    from project_factory.config import FactoryConfig
    from project_factory.scaffolder import ProjectGenerator

    config = FactoryConfig(project_path=Path("/tmp"), project_name="demo")
    project_root = await ProjectGenerator(config).generate()
"""

from project_factory.scaffolder.generator import ProjectExistsError, ProjectGenerator
from project_factory.scaffolder.templates import TemplateRenderer

__all__ = [
    "ProjectExistsError",
    "ProjectGenerator",
    "TemplateRenderer",
]
