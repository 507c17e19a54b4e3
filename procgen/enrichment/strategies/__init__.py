"""Built-in enrichment strategies."""

from procgen.enrichment.strategies.cicd import (
    GitHubActionsEnrichStrategy,
    GitLabCIEnrichStrategy,
    ReleaseEnrichStrategy,
)
from procgen.enrichment.strategies.devops import DockerComposeEnrichStrategy, DockerProdStrategy
from procgen.enrichment.strategies.docs import ReadmeEnrichStrategy
from procgen.enrichment.strategies.logic import (
    ApiRoutesEnrichStrategy,
    CliCommandsEnrichStrategy,
    MiddlewareEnrichStrategy,
    WebComponentsEnrichStrategy,
)
from procgen.enrichment.strategies.quality import EnvFilesEnrichStrategy, LintingEnrichStrategy
from procgen.enrichment.strategies.testing import (
    IntegrationTestsEnrichStrategy,
    RunnerConfigEnrichStrategy,
    UnitTestsEnrichStrategy,
)

# Registration order; ties in priority run in this order.
ENRICHMENT_STRATEGY_CLASSES = (
    LintingEnrichStrategy,
    EnvFilesEnrichStrategy,
    GitHubActionsEnrichStrategy,
    GitLabCIEnrichStrategy,
    ReleaseEnrichStrategy,
    ApiRoutesEnrichStrategy,
    CliCommandsEnrichStrategy,
    WebComponentsEnrichStrategy,
    MiddlewareEnrichStrategy,
    RunnerConfigEnrichStrategy,
    UnitTestsEnrichStrategy,
    IntegrationTestsEnrichStrategy,
    DockerProdStrategy,
    DockerComposeEnrichStrategy,
    ReadmeEnrichStrategy,
)

__all__ = [cls.__name__ for cls in ENRICHMENT_STRATEGY_CLASSES] + ["ENRICHMENT_STRATEGY_CLASSES"]
