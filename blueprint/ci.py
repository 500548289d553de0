"""CI pipeline file generation.

Renders one pipeline definition per supported provider:

* GitHub Actions  -> ``.github/workflows/ci.yml``
* GitLab CI       -> ``.gitlab-ci.yml``
* Azure Pipelines -> ``azure-pipelines.yml``
"""

from __future__ import annotations

from blueprint.config import BlueprintConfig, CIProvider
from blueprint.templates.base import GeneratedFile
from blueprint.templates.engine import TemplateEngine, build_context

CI_OUTPUT_PATHS: dict[CIProvider, str] = {
    CIProvider.GITHUB: ".github/workflows/ci.yml",
    CIProvider.GITLAB: ".gitlab-ci.yml",
    CIProvider.AZURE: "azure-pipelines.yml",
}

_CI_TEMPLATES: dict[CIProvider, str] = {
    CIProvider.GITHUB: "ci/github.yml.j2",
    CIProvider.GITLAB: "ci/gitlab.yml.j2",
    CIProvider.AZURE: "ci/azure.yml.j2",
}


class CIConfigGenerator:
    """Builds the CI configuration file for a blueprint."""

    def __init__(self, engine: TemplateEngine | None = None) -> None:
        self.engine = engine or TemplateEngine()

    def generate(self, config: BlueprintConfig) -> GeneratedFile | None:
        """Render the pipeline file, or ``None`` when no provider is set."""
        if config.ci_provider is CIProvider.NONE:
            return None
        content = self.engine.render(
            _CI_TEMPLATES[config.ci_provider], build_context(config)
        )
        return GeneratedFile(path=CI_OUTPUT_PATHS[config.ci_provider], content=content)
