"""Generation plan model.

A ``GenerationPlan`` is an immutable, ordered sequence of steps.  Steps form
a closed tagged union discriminated by ``kind``:

- ``EnsureDirectory`` -- create a directory (and parents)
- ``InstallDependencies`` -- install a batch of packages with the project's
  package manager
- ``WriteFile`` -- write fully resolved text to a path
- ``MergeManifestScripts`` -- merge entries into ``package.json`` scripts
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from prtw.config import PackageManager


class Dependency(BaseModel):
    """A single package to install.  ``name`` may carry a version spec."""

    model_config = ConfigDict(frozen=True)

    name: str
    dev: bool = False


class _StepBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    @property
    def label(self) -> str:
        raise NotImplementedError


class EnsureDirectory(_StepBase):
    kind: Literal["ensure_directory"] = "ensure_directory"
    path: str

    @property
    def label(self) -> str:
        return f"Create {self.path}/"


class InstallDependencies(_StepBase):
    kind: Literal["install_dependencies"] = "install_dependencies"
    manager: PackageManager
    packages: tuple[Dependency, ...]
    description: str = "dependencies"

    @property
    def label(self) -> str:
        return f"Install {self.description}"

    @property
    def prod_packages(self) -> list[str]:
        return [p.name for p in self.packages if not p.dev]

    @property
    def dev_packages(self) -> list[str]:
        return [p.name for p in self.packages if p.dev]


class WriteFile(_StepBase):
    kind: Literal["write_file"] = "write_file"
    path: str
    content: str

    @property
    def label(self) -> str:
        return f"Write {self.path}"


class MergeManifestScripts(_StepBase):
    kind: Literal["merge_manifest_scripts"] = "merge_manifest_scripts"
    entries: dict[str, str]
    manifest: str = "package.json"

    @property
    def label(self) -> str:
        return f"Update {self.manifest} scripts"


Step = Annotated[
    Union[EnsureDirectory, InstallDependencies, WriteFile, MergeManifestScripts],
    Field(discriminator="kind"),
]


class GenerationPlan(BaseModel):
    """Ordered, immutable list of steps derived from a ``ProjectConfig``."""

    model_config = ConfigDict(frozen=True)

    steps: tuple[Step, ...] = ()

    # -- Queries used by the CLI and tests --------------------------------

    @property
    def directories(self) -> list[str]:
        return [s.path for s in self.steps if isinstance(s, EnsureDirectory)]

    @property
    def files(self) -> dict[str, str]:
        """Mapping of written path -> content, in plan order."""
        return {s.path: s.content for s in self.steps if isinstance(s, WriteFile)}

    @property
    def installs(self) -> list[InstallDependencies]:
        return [s for s in self.steps if isinstance(s, InstallDependencies)]

    @property
    def packages(self) -> list[str]:
        """Every package name installed by the plan, in order."""
        return [p.name for batch in self.installs for p in batch.packages]
